"""Pokédex viewer: paginated catalog listing and per-item detail over PokeAPI."""

__version__ = "0.1.0"
