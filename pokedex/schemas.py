# pokedex/schemas.py
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


# ---- Shared error model (for docs / consistency) ----
class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    pokeapi: str


# ---- Catalog data ----
class ItemSummary(BaseModel):
    """One entry of a list page: just enough to fetch the full record."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class ItemDetail(BaseModel):
    """
    Full record of one Pokemon, as rendered on the list and detail views.

    `image` is the dream world artwork URL, or the stringified `order`
    field when the record has no alternate artwork at all.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    image: str | None = None
    height: int | None = None
    weight: int | None = None
    types: List[str] = []


class RelatedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class CatalogPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int | None = None
    next: str | None = None
    previous: str | None = None
    results: List[ItemSummary] = []


# ---- Synchronizer state ----
class SyncStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    url: str | None = None


class ListState(BaseModel):
    """
    Snapshot of a ListSynchronizer.

    Replaced wholesale on every transition, never mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    status: SyncStatus = SyncStatus.IDLE
    cursor: str
    items: List[ItemDetail] = []
    count: int | None = None
    next: str | None = None
    previous: str | None = None
    error: ErrorInfo | None = None

    @property
    def loading(self) -> bool:
        return self.status is SyncStatus.LOADING


class DetailState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SyncStatus = SyncStatus.IDLE
    identifier: str | None = None
    pokemon: ItemDetail | None = None
    similar: List[RelatedItem] = []
    error: ErrorInfo | None = None

    @property
    def loading(self) -> bool:
        return self.status is SyncStatus.LOADING

    @property
    def show_similar(self) -> bool:
        # The "More <type> type pokemon" section only exists for typed Pokemon
        return self.pokemon is not None and bool(self.pokemon.types)
