import logging

import httpx

from pokedex.config import SIMILAR_LIMIT
from pokedex.errors import PokedexError
from pokedex.pokeapi_client import (
    detail_url,
    fetch_pokemon_details,
    fetch_type_members,
    parse_pokemon,
)
from pokedex.schemas import DetailState, ErrorInfo, SyncStatus

logger = logging.getLogger(__name__)


def normalize_identifier(identifier: str | None) -> str:
    # PokeAPI names are lowercase; ids are unaffected
    return (identifier or "").strip().lower()


class DetailSynchronizer:
    """
    Resolves one Pokemon plus up to SIMILAR_LIMIT Pokemon of its first type.

    Nothing is cached: every identifier change fetches from scratch, and only
    the most recent request may commit its result.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.state = DetailState()
        self._generation = 0
        self._closed = False

    @property
    def loading(self) -> bool:
        return self.state.loading

    async def set_identifier(self, identifier: str | None) -> DetailState:
        if self._closed:
            return self.state

        self._generation += 1
        generation = self._generation
        identifier = normalize_identifier(identifier)

        if not identifier:
            self.state = DetailState()
            return self.state

        self.state = DetailState(status=SyncStatus.LOADING, identifier=identifier)

        pokemon = None
        try:
            url = detail_url(identifier)
            raw = await fetch_pokemon_details(self.client, url)
            pokemon = parse_pokemon(raw, url)

            similar = []
            if pokemon.types:
                members = await fetch_type_members(self.client, pokemon.types[0])
                similar = members[:SIMILAR_LIMIT]
        except PokedexError as e:
            if not self._is_current(generation, identifier):
                return self.state
            # A failed type lookup still shows the Pokemon itself
            kind = e.kind if pokemon is None else f"type_{e.kind}"
            logger.warning("Failed to load Pokemon %r: %s", identifier, e)
            self.state = DetailState(
                status=SyncStatus.ERROR,
                identifier=identifier,
                pokemon=pokemon,
                error=ErrorInfo(kind=kind, message=str(e), url=e.url),
            )
            return self.state

        if not self._is_current(generation, identifier):
            return self.state

        self.state = DetailState(
            status=SyncStatus.READY,
            identifier=identifier,
            pokemon=pokemon,
            similar=similar,
        )
        logger.info("Loaded Pokemon %s with %d similar", pokemon.name, len(similar))
        return self.state

    def close(self) -> None:
        self._closed = True
        self._generation += 1

    def _is_current(self, generation: int, identifier: str) -> bool:
        if self._closed or generation != self._generation:
            logger.debug("Discarding stale detail for %r", identifier)
            return False
        return True
