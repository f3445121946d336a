import asyncio
import logging

import httpx

from pokedex.config import LIST_URL, SEARCH_DEBOUNCE_MS
from pokedex.debounce import debounce
from pokedex.detail_sync import DetailSynchronizer, normalize_identifier
from pokedex.list_sync import ListSynchronizer
from pokedex.schemas import DetailState, ListState

logger = logging.getLogger(__name__)


class PokedexViewer:
    """
    Headless Pokedex screen: the listing, the detail view and the search box.

    User actions map onto the synchronizers the way the UI wires them. The
    search text only ever flows input -> debouncer -> detail synchronizer.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        search_delay_ms: float = SEARCH_DEBOUNCE_MS,
        start_cursor: str = LIST_URL,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.listing = ListSynchronizer(client, cursor=start_cursor)
        self.detail = DetailSynchronizer(client)
        self._search = debounce(self._run_search, search_delay_ms, loop=loop)

    @property
    def list_state(self) -> ListState:
        return self.listing.state

    @property
    def detail_state(self) -> DetailState:
        return self.detail.state

    async def start(self) -> ListState:
        return await self.listing.load()

    async def next_page(self) -> ListState:
        return await self.listing.next_page()

    async def previous_page(self) -> ListState:
        return await self.listing.previous_page()

    async def open(self, identifier: str) -> DetailState:
        return await self.detail.set_identifier(identifier)

    def type_search(self, text: str) -> None:
        """Called on every keystroke of the search box."""
        self._search(text)

    @property
    def search_pending(self) -> bool:
        return self._search.pending

    @property
    def search_task(self) -> asyncio.Future | None:
        return self._search.task

    async def _run_search(self, text: str) -> DetailState | None:
        if not normalize_identifier(text):
            return None
        logger.info("Searching for %r", text)
        return await self.detail.set_identifier(text)

    def close(self) -> None:
        self._search.cancel()
        self.listing.close()
        self.detail.close()
