import asyncio
import logging

import httpx

from pokedex.config import LIST_URL
from pokedex.errors import PokedexError
from pokedex.pokeapi_client import fetch_page, fetch_pokemon_details, parse_pokemon
from pokedex.schemas import ErrorInfo, ListState, SyncStatus

logger = logging.getLogger(__name__)


class ListSynchronizer:
    """
    Keeps one page of the Pokemon listing in sync with a pagination cursor.

    Every cursor change starts a new generation: the page is fetched, then the
    details of all its Pokemon concurrently, and the result is committed in a
    single state replacement. A load whose generation has been superseded (or
    that finishes after close()) is dropped instead of committed.
    """

    def __init__(self, client: httpx.AsyncClient, cursor: str = LIST_URL):
        self.client = client
        self.state = ListState(cursor=cursor)
        self._generation = 0
        self._closed = False

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def has_next(self) -> bool:
        return self.state.next is not None

    @property
    def has_previous(self) -> bool:
        return self.state.previous is not None

    async def load(self) -> ListState:
        """(Re)load the current cursor."""
        return await self.set_cursor(self.state.cursor)

    async def next_page(self) -> ListState:
        # Disabled control: nothing to do
        if self.state.next is None:
            return self.state
        return await self.set_cursor(self.state.next)

    async def previous_page(self) -> ListState:
        if self.state.previous is None:
            return self.state
        return await self.set_cursor(self.state.previous)

    async def set_cursor(self, cursor: str) -> ListState:
        """
        Point the synchronizer at `cursor` and load that page.

        Returns the state once this load is committed, or the current state if
        a newer cursor took over in the meantime.
        """
        if self._closed:
            return self.state

        self._generation += 1
        generation = self._generation

        # Previous items are kept while loading; error is reset
        self.state = self.state.model_copy(
            update={"status": SyncStatus.LOADING, "cursor": cursor, "error": None}
        )

        try:
            # Step 1: fetch list page
            page = await fetch_page(self.client, cursor)

            # Step 2: fetch details concurrently, all-or-nothing
            tasks = [fetch_pokemon_details(self.client, item.url) for item in page.results]
            details_list = await asyncio.gather(*tasks)

            # gather() keeps request order, whatever order responses arrive in
            items = [
                parse_pokemon(details, item.url)
                for details, item in zip(details_list, page.results)
            ]
        except PokedexError as e:
            if not self._is_current(generation, cursor):
                return self.state
            logger.warning("Failed to load page %s: %s", cursor, e)
            # Nothing of the previous page survives under the new cursor
            self.state = ListState(
                status=SyncStatus.ERROR,
                cursor=cursor,
                error=ErrorInfo(kind=e.kind, message=str(e), url=e.url),
            )
            return self.state

        if not self._is_current(generation, cursor):
            return self.state

        self.state = ListState(
            status=SyncStatus.READY,
            cursor=cursor,
            items=items,
            count=page.count,
            next=page.next,
            previous=page.previous,
        )
        logger.info("Loaded %d Pokemon from %s", len(items), cursor)
        return self.state

    def close(self) -> None:
        """Stop committing results; in-flight loads finish and are ignored."""
        self._closed = True
        self._generation += 1

    def _is_current(self, generation: int, cursor: str) -> bool:
        if self._closed or generation != self._generation:
            logger.debug("Discarding stale page %s (generation %d)", cursor, generation)
            return False
        return True
