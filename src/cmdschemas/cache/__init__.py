"""Disk-based cache of remote service models.

This package provides :class:`ModelCache`, which stores service models
fetched over HTTP(S) using :mod:`diskcache`, keyed by URL with a
configurable TTL.

The cache is consumed by :func:`~cmdschemas.parser.loader.load_service_model`
and is controlled by the ``cache`` section of the global configuration
(:class:`~cmdschemas.models.CacheConfig`).
"""

from cmdschemas.cache.cache import ModelCache

__all__ = ["ModelCache"]
