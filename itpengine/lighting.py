"""Point-light pool and the lighting constants it lays out for the GPU."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from itpengine.vecmath import Matrix4, Vector3

MAX_POINT_LIGHTS = 8

# color, pad, position, inner, outer, enabled, 2 pad bytes + alignment, vec2 pad
_POINT_LIGHT_LAYOUT = struct.Struct("<3f4x3fff?3x8x")
# ambient color and its padding float
_AMBIENT_LAYOUT = struct.Struct("<3f4x")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _read_float(properties: Mapping[str, Any], key: str, default: float) -> float:
    value = properties.get(key)
    return float(value) if _is_number(value) else default


def _read_vector3(properties: Mapping[str, Any], key: str, default: Vector3) -> Vector3:
    value = properties.get(key)
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(map(_is_number, value)):
        return Vector3(*(float(v) for v in value))
    return Vector3(*default)


@dataclass
class PointLightData:
    """One slot of the point-light array."""

    light_color: Vector3 = field(default_factory=Vector3)
    position: Vector3 = field(default_factory=Vector3)
    inner_radius: float = 0.0
    outer_radius: float = 0.0
    is_enabled: bool = False

    def to_bytes(self) -> bytes:
        """Pack the light in its padded constant-buffer layout."""
        return _POINT_LIGHT_LAYOUT.pack(
            *self.light_color,
            *self.position,
            self.inner_radius,
            self.outer_radius,
            self.is_enabled,
        )


def _light_pool() -> list[PointLightData]:
    return [PointLightData() for _ in range(MAX_POINT_LIGHTS)]


@dataclass
class LightingConstants:
    """Ambient color plus a fixed pool of point lights."""

    ambient: Vector3 = field(default_factory=Vector3)
    point_lights: list[PointLightData] = field(default_factory=_light_pool)

    def allocate_light(self) -> Optional[PointLightData]:
        """Enable and return the first free light, or None if all are in use."""
        light = next((light for light in self.point_lights if not light.is_enabled), None)
        if light is not None:
            light.is_enabled = True
        return light

    def free_light(self, light: PointLightData) -> None:
        """Give a light back to the pool."""
        light.is_enabled = False

    def enabled_lights(self) -> list[PointLightData]:
        """Lights currently in use, in slot order."""
        return [light for light in self.point_lights if light.is_enabled]

    def to_bytes(self) -> bytes:
        """Pack the whole constant buffer."""
        return _AMBIENT_LAYOUT.pack(*self.ambient) + b"".join(
            light.to_bytes() for light in self.point_lights
        )


class PointLight:
    """Component that owns one light slot for as long as it lives."""

    def __init__(self, lighting: LightingConstants) -> None:
        data = lighting.allocate_light()
        if data is None:
            raise RuntimeError(f"all {MAX_POINT_LIGHTS} point lights are in use")
        self._lighting = lighting
        self.data = data
        self._released = False

    def load_properties(self, properties: Mapping[str, Any]) -> None:
        """Read radii, color and position; missing values default to zero."""
        self.data.inner_radius = _read_float(properties, "innerRadius", 0.0)
        self.data.outer_radius = _read_float(properties, "outerRadius", 0.0)
        self.data.light_color = _read_vector3(properties, "lightColor", Vector3())
        self.data.position = _read_vector3(properties, "position", Vector3())

    def update(self, model_to_world: Matrix4) -> None:
        """Move the light to the translation of its owner's world matrix."""
        self.data.position = model_to_world.translation()

    def release(self) -> None:
        """Free the light slot; calling it again does nothing."""
        if not self._released:
            self._lighting.free_light(self.data)
            self._released = True