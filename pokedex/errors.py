class PokedexError(Exception):
    """
    Base class for failures while talking to PokeAPI.

    `kind` is the short label exposed in synchronizer state and API errors.
    """

    kind = "error"

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class NetworkFailure(PokedexError):
    """The request could not complete (transport error, timeout, 5xx...)."""

    kind = "network"


class NotFound(PokedexError):
    """PokeAPI answered 404 for the requested Pokemon or type."""

    kind = "not_found"


class MalformedResponse(PokedexError):
    """The response body is not JSON or lacks a required field."""

    kind = "malformed"
