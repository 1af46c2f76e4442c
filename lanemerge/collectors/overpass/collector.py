"""
Relation collector

Orchestrates query building, caching, the Overpass request and parsing
"""

from typing import Any, Dict, Optional
from loguru import logger

from ...config import LaneMergeConfig
from .api_client import OverpassAPIClient
from .cache import OverpassCache
from .parser import OverpassResponseParser, ParsedResponse
from .query import build_query


class RelationCollector:
    """
    Collect a road relation from OpenStreetMap via Overpass API

    Responses are cached to disk when a cache directory is configured. The
    cache is skipped for reading when `ignore_cache` is set; the flag is
    cleared after one request.
    """

    def __init__(self, config: LaneMergeConfig, api_client: Optional[OverpassAPIClient] = None):
        self.config = config
        self.api_client = api_client or OverpassAPIClient(config.api)
        self.cache = OverpassCache(config.cache.cache_dir)
        self.parser = OverpassResponseParser()

    def fetch_raw(self, search_term: str) -> Dict[str, Any]:
        """
        Fetch the raw Overpass response for a relation name or ID

        Raises:
            OverpassError: If the search term is invalid or the request fails
        """
        query = build_query(search_term)
        logger.debug(f"Overpass query: {query}")

        cache_path = self.cache.get_cache_path(query)
        if cache_path and not self.config.cache.ignore_cache:
            cached = self.cache.load(cache_path)
            if cached is not None:
                return cached

        logger.info(f"Fetching relation '{search_term}' from {self.api_client.overpass_url}")
        data = self.api_client.query(query)

        if cache_path:
            self.cache.save(cache_path, data)
        self.config.cache.ignore_cache = False
        return data

    def fetch(self, search_term: str) -> ParsedResponse:
        """Fetch and parse a relation with its highway ways and nodes"""
        return self.parser.parse(self.fetch_raw(search_term))
