"""Disk-based cache for remotely fetched service models.

Uses :mod:`diskcache` to keep parsed ``service-2.json`` documents fetched
over HTTP(S) on the filesystem with a configurable time-to-live (TTL), so
repeated ``cmdschemas preview <url>`` runs do not download multi-megabyte
models again.

Cache keys are SHA-256 hashes of the URL.

See Also:
    :class:`~cmdschemas.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from cmdschemas.models import CacheConfig


class ModelCache:
    """Disk-backed cache of raw service-model dicts keyed by URL.

    Args:
        cache_dir: Root directory for the cache.  A ``models/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        from cmdschemas.cache import ModelCache
        from cmdschemas.models import CacheConfig

        cache = ModelCache("/tmp/cmdschemas-cache", CacheConfig())
        cache.set("https://example.com/s3/service-2.json", raw_model)
        hit = cache.get("https://example.com/s3/service-2.json")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "models"))

    def get(self, url: str) -> Optional[dict[str, Any]]:
        """Return the cached model for *url*, or ``None`` on a miss or when disabled."""
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, raw_model: dict[str, Any]) -> None:
        """Store *raw_model* under *url* for the configured TTL."""
        if self._cache is None:
            return
        self._cache.set(self._make_key(url), raw_model, expire=self._config.ttl_seconds)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds`` (int).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "models"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def __enter__(self) -> ModelCache:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _make_key(url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()
