"""
Overpass response caching

Handles caching of raw Overpass API responses to disk, keyed by query
"""

import os
import json
import hashlib
from typing import Any, Dict, Optional
from loguru import logger


class OverpassCache:
    """Handles caching of Overpass responses to disk"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir

    def get_cache_path(self, query: str) -> Optional[str]:
        """Get cache file path for an Overpass query"""
        if not self.cache_dir:
            return None
        cache_hash = hashlib.md5(query.encode("utf-8")).hexdigest()[:16]
        return os.path.join(self.cache_dir, f"overpass_{cache_hash}.json")

    def load(self, cache_path: str) -> Optional[Dict[str, Any]]:
        """Load a response from cache if it exists"""
        if not os.path.exists(cache_path):
            return None
        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load cache {cache_path}: {e}")
            return None
        logger.info(f"Loaded Overpass data from cache: {cache_path}")
        return data

    def save(self, cache_path: str, data: Dict[str, Any]) -> bool:
        """
        Save a response to cache

        Empty responses are not cached.

        Returns:
            Whether the response was written
        """
        if not self.cache_dir or not data.get("elements"):
            return False
        try:
            os.makedirs(os.path.dirname(cache_path), exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Failed to save cache {cache_path}: {e}")
            return False
        logger.info(f"Saved Overpass data to cache: {cache_path}")
        return True
