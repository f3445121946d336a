import os

# Root of the remote catalog
POKEAPI_BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2").rstrip("/")

LIST_URL = f"{POKEAPI_BASE_URL}/pokemon"
TYPE_URL = f"{POKEAPI_BASE_URL}/type"

HTTP_TIMEOUT = float(os.getenv("POKEDEX_HTTP_TIMEOUT", "10.0"))

SEARCH_DEBOUNCE_MS = int(os.getenv("POKEDEX_SEARCH_DEBOUNCE_MS", "1000"))

LOG_LEVEL = os.getenv("POKEDEX_LOG_LEVEL", "INFO").upper()

# Number of same-type Pokemon shown on the detail view
SIMILAR_LIMIT = 5
