"""Name-keyed cache of loaded assets."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class AssetCache(Generic[T]):
    """Loads assets on first request and hands out the cached copy afterwards.

    The loader is called with the asset name and returns the asset, or None
    when the asset could not be loaded; failed loads are not cached.
    """

    def __init__(self, loader: Callable[[str], Optional[T]]) -> None:
        self._loader = loader
        self._assets: dict[str, T] = {}

    def get(self, name: str) -> Optional[T]:
        """Return the cached asset, or None if it has not been loaded."""
        return self._assets.get(name)

    def load(self, name: str) -> Optional[T]:
        """Return the cached asset, loading and caching it if needed."""
        if name in self._assets:
            return self._assets[name]
        asset = self._loader(name)
        if asset is not None:
            self._assets[name] = asset
        return asset

    def cache(self, key: str, asset: T) -> None:
        """Store ``asset`` under ``key``, replacing any earlier entry."""
        self._assets[key] = asset

    def clear(self) -> None:
        """Forget every cached asset."""
        self._assets.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._assets

    def __len__(self) -> int:
        return len(self._assets)