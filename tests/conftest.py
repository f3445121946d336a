"""
Pytest configuration and fixtures
"""

import asyncio

import httpx
import pytest
import pytest_asyncio

from pokedex.config import LIST_URL, TYPE_URL
from pokedex.http_client import create_client

API_PREFIX = httpx.URL(LIST_URL).path.rsplit("/", 1)[0]  # e.g. /api/v2


def page_url(offset: int, limit: int) -> str:
    return f"{LIST_URL}?offset={offset}&limit={limit}"


def detail_url_for(pokemon_id: int) -> str:
    return f"{LIST_URL}/{pokemon_id}/"


class FakePokeAPI:
    """
    In-memory PokeAPI served through httpx.MockTransport.

    Pokemon are named mon1..monN. Requests can be held back with `gate(url)`
    to control the order in which responses arrive.
    """

    def __init__(self, total: int = 12, page_size: int = 4):
        self.total = total
        self.page_size = page_size
        self.requests: list[str] = []
        self.responded: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, int] = {}
        self.payloads: dict[str, object] = {}
        self.no_artwork: set[int] = set()
        self.untyped: set[int] = set()
        self.type_members = {
            "grass": [f"grass-{i}" for i in range(12)],
            "fire": ["charmander", "charmeleon", "charizard"],
        }

    # ---- test controls ----
    def gate(self, url: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[url] = event
        return event

    def serve(self, url: str, payload) -> None:
        """Answer `url` with this JSON body instead of the generated data."""
        self.payloads[url] = payload

    def fail(self, url: str, status: int) -> None:
        self.failures[url] = status

    def count(self, fragment: str) -> int:
        return sum(1 for url in self.requests if fragment in url)

    async def wait_for_request(self, url: str) -> None:
        for _ in range(1000):
            if url in self.requests:
                return
            await asyncio.sleep(0.001)
        raise AssertionError(f"{url} was never requested")

    # ---- fake data ----
    def types_of(self, pokemon_id: int) -> list[str]:
        if pokemon_id in self.untyped:
            return []
        return ["grass", "poison"] if pokemon_id % 2 == 0 else ["fire"]

    def detail(self, pokemon_id: int) -> dict:
        sprites: dict = {"front_default": f"https://img.example/{pokemon_id}.png"}
        if pokemon_id not in self.no_artwork:
            sprites["other"] = {
                "dream_world": {"front_default": f"https://img.example/dw/{pokemon_id}.svg"}
            }
        return {
            "id": pokemon_id,
            "name": f"mon{pokemon_id}",
            "order": pokemon_id * 10,
            "height": pokemon_id + 1,
            "weight": pokemon_id * 5,
            "sprites": sprites,
            "types": [
                {"slot": slot, "type": {"name": name, "url": f"{TYPE_URL}/{name}/"}}
                for slot, name in enumerate(self.types_of(pokemon_id), start=1)
            ],
        }

    def listing(self, offset: int, limit: int) -> dict:
        end = min(offset + limit, self.total)
        return {
            "count": self.total,
            "next": page_url(end, limit) if end < self.total else None,
            "previous": page_url(max(offset - limit, 0), limit) if offset > 0 else None,
            "results": [
                {"name": f"mon{i}", "url": detail_url_for(i)}
                for i in range(offset + 1, end + 1)
            ],
        }

    def resolve_id(self, identifier: str) -> int | None:
        if identifier.isdigit():
            pokemon_id = int(identifier)
        elif identifier.startswith("mon") and identifier[3:].isdigit():
            pokemon_id = int(identifier[3:])
        else:
            return None
        return pokemon_id if 1 <= pokemon_id <= self.total else None

    # ---- transport ----
    async def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)

        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()

        response = self.route(request)
        self.responded.append(url)
        return response

    def route(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url in self.failures:
            return httpx.Response(self.failures[url], text="error")
        if url in self.payloads:
            return httpx.Response(200, json=self.payloads[url])

        parts = request.url.path[len(API_PREFIX):].strip("/").split("/")

        if parts == ["pokemon"]:
            offset = int(request.url.params.get("offset", 0))
            limit = int(request.url.params.get("limit", self.page_size))
            return httpx.Response(200, json=self.listing(offset, limit))

        if len(parts) == 2 and parts[0] == "pokemon":
            pokemon_id = self.resolve_id(parts[1])
            if pokemon_id is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=self.detail(pokemon_id))

        if len(parts) == 2 and parts[0] == "type":
            members = self.type_members.get(parts[1])
            if members is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(
                200,
                json={
                    "name": parts[1],
                    "pokemon": [
                        {"slot": 1, "pokemon": {"name": n, "url": f"{LIST_URL}/{n}/"}}
                        for n in members
                    ],
                },
            )

        return httpx.Response(404, text="Not Found")


@pytest.fixture
def api() -> FakePokeAPI:
    return FakePokeAPI()


@pytest_asyncio.fixture
async def client(api):
    async with create_client(transport=httpx.MockTransport(api.handler)) as c:
        yield c
