"""Loading of JSON mesh files into packed vertex and index data."""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Union

MESH_TYPE = "itpmesh"
MESH_VERSION = 3

_SKINNED_LEADING_FLOATS = 6
_SKINNED_BYTE_VALUES = 8
_SKINNED_MIN_VALUES = _SKINNED_LEADING_FLOATS + _SKINNED_BYTE_VALUES
_MIN_VERTEX_VALUES = 3


class MeshFormatError(ValueError):
    """Raised when a mesh document is malformed."""


@dataclass(frozen=True)
class VertexElement:
    """One named element of a vertex, such as a position or a UV pair."""

    name: str
    type: str
    count: int

    @property
    def element_size(self) -> int:
        """Bytes per value: 4 for floats, 1 for anything else."""
        return 4 if self.type == "float" else 1

    @property
    def size(self) -> int:
        """Bytes taken by the whole element."""
        return self.element_size * self.count


@dataclass(frozen=True)
class Mesh:
    """A loaded mesh: material, packed vertices and triangle indices."""

    material: Any
    vertex_format: tuple[VertexElement, ...]
    vertex_data: bytes
    vertex_count: int
    vertex_size: int
    indices: tuple[int, ...]
    skinned: bool = False

    @property
    def input_layout_name(self) -> str:
        """Names of the vertex elements joined together."""
        return "".join(element.name for element in self.vertex_format)

    def index_count(self) -> int:
        """Number of indices (three per triangle)."""
        return len(self.indices)

    def triangles(self) -> Iterator[tuple[int, int, int]]:
        """Yield each triangle as a triple of vertex indices."""
        it = iter(self.indices)
        yield from zip(it, it, it)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_uint(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_vertex_format(value: object) -> tuple[VertexElement, ...]:
    if not isinstance(value, list) or not value:
        raise MeshFormatError("Mesh File Invalid Vertex Format")
    elements = []
    for entry in value:
        if not isinstance(entry, dict):
            raise MeshFormatError("Mesh File Invalid Vertex Format")
        name, kind, count = entry.get("name"), entry.get("type"), entry.get("count")
        if not isinstance(name, str) or not isinstance(kind, str) or not _is_uint(count):
            raise MeshFormatError("Mesh File Invalid Vertex Format")
        elements.append(VertexElement(name, kind, count))
    return tuple(elements)


def _vertex_packer(value_count: int, skinned: bool) -> Callable[[list], bytes]:
    if not skinned:
        layout = struct.Struct(f"<{value_count}f")

        def pack_plain(vert: list) -> bytes:
            if not all(_is_number(v) for v in vert):
                raise MeshFormatError("Mesh File Invalid Vertex Format")
            return layout.pack(*vert)

        return pack_plain

    if value_count < _SKINNED_MIN_VALUES:
        raise MeshFormatError("Mesh File Invalid Vertex Format")
    trailing = value_count - _SKINNED_MIN_VALUES
    layout = struct.Struct(f"<{_SKINNED_LEADING_FLOATS}f{_SKINNED_BYTE_VALUES}B{trailing}f")

    def pack_skinned(vert: list) -> bytes:
        leading = vert[:_SKINNED_LEADING_FLOATS]
        packed_bytes = vert[_SKINNED_LEADING_FLOATS:_SKINNED_MIN_VALUES]
        rest = vert[_SKINNED_MIN_VALUES:]
        if not all(_is_number(v) for v in (*leading, *rest)) or not all(
            _is_uint(v) for v in packed_bytes
        ):
            raise MeshFormatError("Mesh File Invalid Vertex Format")
        return layout.pack(*leading, *(v & 0xFF for v in packed_bytes), *rest)

    return pack_skinned


def _parse_indices(value: object) -> tuple[int, ...]:
    if not isinstance(value, list) or not value:
        raise MeshFormatError("Mesh File Invalid Index Format")
    indices: list[int] = []
    for triangle in value:
        if not isinstance(triangle, list) or len(triangle) != 3:
            raise MeshFormatError("Mesh File Invalid Index Format")
        if not all(_is_uint(i) for i in triangle):
            raise MeshFormatError("Mesh File Invalid Index Format")
        indices.extend(i & 0xFFFF for i in triangle)
    return tuple(indices)


def parse_mesh(text: str, load_material: Callable[[str], Any]) -> Mesh:
    """Parse a mesh document; ``load_material`` resolves the material name."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MeshFormatError("Unable to open Mesh file") from exc
    if not isinstance(doc, dict):
        raise MeshFormatError("Unable to open Mesh file")

    metadata = doc.get("metadata")
    if (
        not isinstance(metadata, dict)
        or metadata.get("type") != MESH_TYPE
        or metadata.get("version") != MESH_VERSION
    ):
        raise MeshFormatError("Mesh File Incorrect Version")

    skinned = doc.get("skinned") is True
    material_name = doc.get("material")
    material = load_material(material_name if isinstance(material_name, str) else "")

    vertex_format = _parse_vertex_format(doc.get("vertexformat"))
    value_count = sum(element.count for element in vertex_format)
    vertex_size = sum(element.size for element in vertex_format)
    if value_count < _MIN_VERTEX_VALUES:
        raise MeshFormatError("Mesh File Invalid Vertex Format")

    vertices = doc.get("vertices")
    if not isinstance(vertices, list) or not vertices:
        raise MeshFormatError("Mesh File Invalid Vertex Format")
    pack = _vertex_packer(value_count, skinned)
    chunks = []
    for vert in vertices:
        if not isinstance(vert, list) or len(vert) != value_count:
            raise MeshFormatError("Mesh File Invalid Vertex Format")
        chunks.append(pack(vert))

    indices = _parse_indices(doc.get("indices"))

    return Mesh(
        material=material,
        vertex_format=vertex_format,
        vertex_data=b"".join(chunks),
        vertex_count=len(vertices),
        vertex_size=vertex_size,
        indices=indices,
        skinned=skinned,
    )


def load_mesh(path: Union[str, Path], load_material: Callable[[str], Any]) -> Mesh:
    """Read and parse a mesh file."""
    return parse_mesh(Path(path).read_text(encoding="utf-8"), load_material)