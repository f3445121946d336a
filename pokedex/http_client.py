from typing import AsyncGenerator

import httpx
from fastapi import Request

from pokedex import __version__
from pokedex.config import HTTP_TIMEOUT


def create_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """
    Build the AsyncClient shared by every PokeAPI call.

    A custom `transport` lets tests plug in an httpx.MockTransport.
    """
    return httpx.AsyncClient(
        timeout=HTTP_TIMEOUT,
        follow_redirects=True,
        headers={"User-Agent": f"pokedex-viewer/{__version__}"},
        transport=transport,
    )


async def get_client(request: Request) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    FastAPI dependency that provides the application's AsyncClient
    to request handlers.

    Usage in endpoints:
        async def some_endpoint(client: httpx.AsyncClient = Depends(get_client)):
            ...
    """
    yield request.app.state.http_client
