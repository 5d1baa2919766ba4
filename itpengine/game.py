"""Level loading, key state and lighting for the game."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from itpengine.lighting import (
    LightingConstants,
    PointLight,
    PointLightData,
    _is_number,
    _read_float,
    _read_vector3,
)
from itpengine.vecmath import Matrix4, Vector3, Vector4

LEVEL_TYPE = "itplevel"
LEVEL_VERSION = 2


class LevelFormatError(ValueError):
    """Raised when a level document is malformed."""


def _identity_quaternion() -> Vector4:
    return Vector4(0.0, 0.0, 0.0, 1.0)


def _read_quaternion(properties: Mapping[str, Any], key: str, default: Vector4) -> Vector4:
    value = properties.get(key)
    if isinstance(value, (list, tuple)) and len(value) == 4 and all(map(_is_number, value)):
        return Vector4(*(float(v) for v in value))
    return Vector4(*default)


@dataclass(frozen=True)
class ComponentSpec:
    """A component entry of a render object: its type and raw properties."""

    type: str
    properties: Mapping[str, Any]


@dataclass(frozen=True)
class RenderObjectSpec:
    """A render object as described by a level."""

    mesh: str
    scale: float = 0.0
    position: Vector3 = field(default_factory=Vector3)
    rotation: Vector4 = field(default_factory=_identity_quaternion)
    components: tuple[ComponentSpec, ...] = ()

    @property
    def model_to_world(self) -> Matrix4:
        """Scale, then rotation, then translation."""
        return (
            Matrix4.create_scale(self.scale)
            * Matrix4.create_from_quaternion(self.rotation)
            * Matrix4.create_translation(self.position)
        )


@dataclass(frozen=True)
class Level:
    """Camera, ambient light and render objects of a level."""

    camera_position: Vector3
    camera_rotation: Vector4
    ambient: Vector3
    render_objects: tuple[RenderObjectSpec, ...]

    @property
    def camera_to_world(self) -> Matrix4:
        return Matrix4.create_translation(self.camera_position) * Matrix4.create_from_quaternion(
            self.camera_rotation
        )

    @property
    def view_matrix(self) -> Matrix4:
        """World-to-camera matrix."""
        view = self.camera_to_world
        view.invert()
        return view


def _section(doc: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = doc.get(key)
    if not isinstance(value, dict):
        raise LevelFormatError(f"level has no {key!r} object")
    return value


def _parse_component(value: object) -> ComponentSpec:
    if not isinstance(value, dict):
        raise LevelFormatError("component entries must be objects")
    kind = value.get("type")
    return ComponentSpec(kind if isinstance(kind, str) else "", value)


def _parse_render_object(value: object) -> RenderObjectSpec:
    if not isinstance(value, dict):
        raise LevelFormatError("render objects must be objects")
    mesh = value.get("mesh")
    if not isinstance(mesh, str):
        raise LevelFormatError("render object has no mesh")
    components = value.get("components")
    return RenderObjectSpec(
        mesh=mesh,
        scale=_read_float(value, "scale", 0.0),
        position=_read_vector3(value, "position", Vector3()),
        rotation=_read_quaternion(value, "rotation", _identity_quaternion()),
        components=(
            tuple(_parse_component(c) for c in components) if isinstance(components, list) else ()
        ),
    )


def parse_level(text: str) -> Level:
    """Parse a level document."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LevelFormatError("level is not valid JSON") from exc
    if not isinstance(doc, dict):
        raise LevelFormatError("level is not a JSON object")

    metadata = doc.get("metadata")
    if (
        not isinstance(metadata, dict)
        or metadata.get("type") != LEVEL_TYPE
        or metadata.get("version") != LEVEL_VERSION
    ):
        raise LevelFormatError("level has the wrong type or version")

    camera = _section(doc, "camera")
    lighting = _section(doc, "lightingData")
    objects = doc.get("renderObjects")
    if not isinstance(objects, list):
        raise LevelFormatError("level has no 'renderObjects' array")

    return Level(
        camera_position=_read_vector3(camera, "position", Vector3()),
        camera_rotation=_read_quaternion(camera, "rotation", Vector4()),
        ambient=_read_vector3(lighting, "ambient", Vector3()),
        render_objects=tuple(_parse_render_object(obj) for obj in objects),
    )


def load_level(path: Union[str, Path]) -> Level:
    """Read and parse a level file."""
    return parse_level(Path(path).read_text(encoding="utf-8"))


class Game:
    """Game state: held keys, lighting, camera view and loaded level."""

    def __init__(self) -> None:
        self._keys_held: dict[int, bool] = {}
        self.lighting = LightingConstants()
        self.view_matrix = Matrix4.identity()
        self.level: Optional[Level] = None
        self.point_lights: list[PointLight] = []

    def on_key_down(self, key: int) -> None:
        self._keys_held[key] = True

    def on_key_up(self, key: int) -> None:
        self._keys_held[key] = False

    def is_key_held(self, key: int) -> bool:
        return self._keys_held.get(key, False)

    def allocate_light(self) -> Optional[PointLightData]:
        """Enable and return a free point light, or None if none is left."""
        return self.lighting.allocate_light()

    def free_light(self, light: PointLightData) -> None:
        self.lighting.free_light(light)

    def ambient_light(self) -> Vector3:
        """A copy of the ambient light color."""
        return Vector3(*self.lighting.ambient)

    def load_level(self, path: Union[str, Path]) -> Level:
        """Load a level: camera view, ambient light and point-light components."""
        level = load_level(path)
        self.view_matrix = level.view_matrix
        self.lighting.ambient = Vector3(*level.ambient)
        for obj in level.render_objects:
            for component in obj.components:
                if component.type == "PointLight":
                    light = PointLight(self.lighting)
                    light.load_properties(component.properties)
                    self.point_lights.append(light)
        self.level = level
        return level