"""
Thread-safe file cache for generated documents.

The sitemap is rebuilt from every location, specialization and business,
so it is cached on disk for an hour and shared between worker processes.
Entries are stored as JSON envelopes carrying their creation time.
"""

import json
import re
import time
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from groomer_directory.config import settings
from groomer_directory.logging_config import get_logger

logger = get_logger(__name__)


class DocumentCache:
    """
    File-based cache of text documents, one JSON file per key.

        cache_dir/
            sitemap.json
            sitemap.json.lock
    """

    def __init__(self, cache_dir: str | None = None, ttl_seconds: int | None = None):
        """
        Args:
            cache_dir: Override cache directory from settings.
            ttl_seconds: Time-to-live for entries. Defaults to the sitemap TTL.
        """
        self.cache_dir = Path(cache_dir or settings.cache.dir)
        self.ttl_seconds = settings.cache.sitemap_ttl if ttl_seconds is None else ttl_seconds
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _safe_key(key: str) -> str:
        """Convert a key to a filesystem-safe name: 'sitemap/xml' → 'sitemap_xml'."""
        return re.sub(r"[^A-Za-z0-9_.-]+", "_", key.strip()) or "_"

    def _path_for(self, key: str) -> Path:
        return self.cache_dir / f"{self._safe_key(key)}.json"

    def _lock_for(self, path: Path) -> FileLock:
        return FileLock(str(path) + ".lock", timeout=5)

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve a cached document.

        Returns:
            The document text, or None if missing, expired or unreadable.
        """
        path = self._path_for(key)
        if not path.exists():
            return None

        try:
            with self._lock_for(path):
                data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, Timeout) as e:
            logger.warning("Cache read error for %s: %s", key, e)
            return None

        cached_at = data.get("_cached_at") if isinstance(data, dict) else None
        if not isinstance(cached_at, (int, float)):
            logger.warning("Cache entry for %s is not an envelope, ignoring", key)
            return None

        if time.time() - cached_at > self.ttl_seconds:
            logger.debug("Cache expired for %s", key)
            return None
        return data.get("payload")

    def set(self, key: str, document: str) -> None:
        """Store a document. Write failures are logged, not raised."""
        path = self._path_for(key)
        envelope = {"_cached_at": time.time(), "_key": key, "payload": document}
        try:
            with self._lock_for(path):
                path.write_text(json.dumps(envelope), encoding="utf-8")
            logger.debug("Cached document %s (%d chars)", key, len(document))
        except (OSError, Timeout) as e:
            logger.error("Cache write error for %s: %s", key, e)

    def invalidate(self, key: str) -> bool:
        """
        Remove a cache entry.

        Returns:
            True if the entry was removed, False if it didn't exist.
        """
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            logger.debug("Invalidated cache for %s", key)
            return True
        return False

    def clear(self) -> int:
        """Remove all entries. Returns the number removed."""
        count = 0
        for f in self.cache_dir.glob("*.json"):
            f.unlink()
            count += 1
        for f in self.cache_dir.glob("*.lock"):
            f.unlink()
        logger.info("Cleared %d cache entries", count)
        return count
