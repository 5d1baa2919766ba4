"""Math, asset caching, mesh and level loading, and lighting for a small 3D game engine."""

__version__ = "0.1.0"
__all__ = ["vecmath", "asset_cache", "mesh", "lighting", "game"]