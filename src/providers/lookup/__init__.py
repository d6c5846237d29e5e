"""Lookup/search provider implementations."""

from src.providers.lookup.itunes_lookup_provider import ITunesLookupProvider

__all__ = ["ITunesLookupProvider"]
