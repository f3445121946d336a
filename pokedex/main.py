import logging
from urllib.parse import quote

import httpx
from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse, RedirectResponse

from pokedex.config import LIST_URL, LOG_LEVEL, POKEAPI_BASE_URL
from pokedex.detail_sync import DetailSynchronizer, normalize_identifier
from pokedex.http_client import create_client, get_client
from pokedex.list_sync import ListSynchronizer
from pokedex.schemas import ErrorInfo, ErrorResponse, HealthResponse, SyncStatus

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Pokedex Viewer")

# Error kind -> HTTP status returned to the browser
ERROR_STATUS = {
    "not_found": 404,
    "network": 502,
    "malformed": 502,
}


@app.on_event("startup")
async def on_startup():
    """
    Application startup hook.

    Opens the AsyncClient shared by all requests to PokeAPI.
    """
    app.state.http_client = create_client()


@app.on_event("shutdown")
async def on_shutdown():
    await app.state.http_client.aclose()


def error_response(error: ErrorInfo | None) -> JSONResponse:
    kind = error.kind if error else "network"
    message = error.message if error else "Failed to fetch from PokeAPI"
    return JSONResponse(
        status_code=ERROR_STATUS.get(kind, 502),
        content={"error": message},
    )


def is_valid_cursor(cursor: str) -> bool:
    # Only PokeAPI listing URLs are fetched on behalf of the browser
    return cursor == LIST_URL or cursor.startswith((LIST_URL + "?", LIST_URL + "/?"))


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {"status": "ok", "pokeapi": POKEAPI_BASE_URL}


@app.get("/", responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
async def list_pokemon(
    cursor: str | None = Query(None),
    client: httpx.AsyncClient = Depends(get_client),
):
    """
    Root listing: one page of Pokemon with full details.

    Query params:
      - cursor: optional, a `next`/`previous` URL from an earlier page.
        Defaults to the first page.

    Error 400:
      { "error": "Invalid cursor" }

    Error 502:
      { "error": "<reason>" } when PokeAPI fails
    """
    cursor = cursor or LIST_URL
    if not is_valid_cursor(cursor):
        return JSONResponse(status_code=400, content={"error": "Invalid cursor"})

    synchronizer = ListSynchronizer(client, cursor=cursor)
    state = await synchronizer.load()
    if state.status is SyncStatus.ERROR:
        return error_response(state.error)

    return state.model_dump(mode="json", exclude={"error"})


@app.get(
    "/pokemon/{identifier}",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def pokemon_detail(
    identifier: str,
    client: httpx.AsyncClient = Depends(get_client),
):
    """
    Detail view: one Pokemon by id or name, plus up to 5 of the same type.

    Error 404:
      { "error": "<reason>" } when PokeAPI has no such Pokemon

    When only the same-type lookup fails, the Pokemon is still returned with
    an empty `similar` list and the lookup failure under `error`.
    """
    if not normalize_identifier(identifier):
        return JSONResponse(status_code=400, content={"error": "Invalid identifier"})

    synchronizer = DetailSynchronizer(client)
    state = await synchronizer.set_identifier(identifier)
    if state.status is SyncStatus.ERROR and state.pokemon is None:
        return error_response(state.error)

    body = state.model_dump(mode="json")
    body["show_similar"] = state.show_similar
    return body


@app.get("/search", responses={400: {"model": ErrorResponse}})
async def search(name: str = Query("")):
    """Jump straight to a Pokemon's detail route by name."""
    identifier = normalize_identifier(name)
    if not identifier:
        return JSONResponse(status_code=400, content={"error": "Invalid identifier"})
    return RedirectResponse(url=f"/pokemon/{quote(identifier, safe='')}", status_code=307)
