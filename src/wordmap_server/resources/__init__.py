"""
Resources Package

Lazy, retry-on-failure loading of the word map assets.
"""

from .fetcher import AssetFetcher
from .lazy import LazyResource, ResourceState
from .loader import ResourceLoader

__all__ = [
    "AssetFetcher",
    "LazyResource",
    "ResourceState",
    "ResourceLoader",
]
