import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from pokedex.config import LIST_URL, TYPE_URL
from pokedex.errors import MalformedResponse, NetworkFailure, NotFound
from pokedex.schemas import CatalogPage, ItemDetail, ItemSummary, RelatedItem

logger = logging.getLogger(__name__)


async def fetch_json(client: httpx.AsyncClient, url: str) -> dict:
    """
    GET a PokeAPI URL and return the parsed JSON body.

    Raises:
        NotFound: the service answered 404.
        NetworkFailure: the request failed or returned any other error status.
        MalformedResponse: the body is not a JSON object.
    """
    try:
        resp = await client.get(url)
    except httpx.HTTPError as e:
        raise NetworkFailure(f"Request to {url} failed: {e!s}", url=url) from e

    if resp.status_code == 404:
        raise NotFound(f"Not found: {url}", url=url)

    try:
        resp.raise_for_status()  # raises if status is 4xx/5xx
    except httpx.HTTPStatusError as e:
        raise NetworkFailure(
            f"PokeAPI returned {resp.status_code} for {url}", url=url
        ) from e

    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponse(f"Response from {url} is not JSON", url=url) from e

    if not isinstance(data, dict):
        raise MalformedResponse(f"Response from {url} is not a JSON object", url=url)
    return data


async def fetch_page(client: httpx.AsyncClient, cursor: str = LIST_URL) -> CatalogPage:
    """
    Fetch one page of the Pokemon listing.

    Calls:
        GET {cursor}   e.g. https://pokeapi.co/api/v2/pokemon?offset=20&limit=20

    `next` and `previous` are kept verbatim; either may be None.
    """
    data = await fetch_json(client, cursor)

    results = data.get("results")
    if not isinstance(results, list):
        raise MalformedResponse(f"Page {cursor} has no 'results'", url=cursor)

    try:
        summaries: list[ItemSummary] = []
        for item in results:
            name = item.get("name")
            url = item.get("url")
            if not name or not url:
                raise MalformedResponse(f"Page {cursor} has an incomplete entry", url=cursor)
            summaries.append(ItemSummary(name=name, url=url))

        return CatalogPage(
            count=data.get("count"),
            next=data.get("next"),
            previous=data.get("previous"),
            results=summaries,
        )
    except (AttributeError, TypeError, ValidationError) as e:
        raise MalformedResponse(f"Unexpected page shape at {cursor}: {e!s}", url=cursor) from e


def detail_url(identifier: str) -> str:
    """Detail endpoint for a numeric id or an exact (lowercase) name."""
    return f"{LIST_URL}/{quote(identifier, safe='')}"


async def fetch_pokemon_details(client: httpx.AsyncClient, url: str) -> dict:
    """
    Fetch detailed Pokemon info from a given PokeAPI URL.

    Returns:
        Parsed JSON dict. Failures propagate so that a page batch is
        all-or-nothing.
    """
    data = await fetch_json(client, url)
    if data.get("id") is None or not data.get("name"):
        raise MalformedResponse(f"Pokemon at {url} has no id or name", url=url)
    return data


async def fetch_type_members(client: httpx.AsyncClient, type_name: str) -> list[RelatedItem]:
    """
    Fetch every Pokemon sharing the given type, in the order PokeAPI lists them.

    Calls:
        GET https://pokeapi.co/api/v2/type/{type_name}
    """
    url = f"{TYPE_URL}/{quote(type_name, safe='')}"
    data = await fetch_json(client, url)

    members = data.get("pokemon")
    if not isinstance(members, list):
        raise MalformedResponse(f"Type {type_name} has no 'pokemon' list", url=url)

    related: list[RelatedItem] = []
    try:
        for entry in members:
            p = entry.get("pokemon") or {}
            name = p.get("name")
            member_url = p.get("url")
            if name and member_url:
                related.append(RelatedItem(name=name, url=member_url))
    except (AttributeError, TypeError, ValidationError) as e:
        raise MalformedResponse(f"Unexpected type shape at {url}: {e!s}", url=url) from e
    return related


def artwork_for(raw: dict) -> str | None:
    """
    Pick the display image of a raw Pokemon record.

    Uses the dream world artwork when `sprites.other` exists. Records without
    it fall back to the `order` number, which is not an image; this keeps the
    list's existing rendering and is logged so it can be spotted.
    """
    sprites = raw.get("sprites") or {}
    other = sprites.get("other")
    if other:
        dream_world = other.get("dream_world") or {}
        if "front_default" in dream_world:
            return dream_world["front_default"]

    order = raw.get("order")
    logger.warning(
        "No dream world artwork for %s, falling back to order %s",
        raw.get("name"),
        order,
    )
    return None if order is None else str(order)


def parse_pokemon(raw: dict, url: str | None = None) -> ItemDetail:
    """Map a raw PokeAPI record; any unexpected shape is a MalformedResponse."""
    try:
        return ItemDetail(
            id=raw["id"],
            name=raw["name"],
            image=artwork_for(raw),
            height=raw.get("height"),
            weight=raw.get("weight"),
            types=[
                t["type"]["name"]
                for t in raw.get("types") or []
                if (t.get("type") or {}).get("name")
            ],
        )
    except (AttributeError, KeyError, TypeError, ValidationError) as e:
        raise MalformedResponse(
            f"Unexpected Pokemon record for {raw.get('name')}: {e!s}", url=url
        ) from e
