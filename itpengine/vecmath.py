"""Vectors, 4x4 matrices and helpers for row-vector 3D transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator, Protocol, Sequence, TypeVar, Union

DEFAULT_TOLERANCE = 0.001


class _QuaternionLike(Protocol):
    x: float
    y: float
    z: float
    w: float


def is_close_enough(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Return True if ``a`` and ``b`` differ by less than ``tolerance``."""
    return abs(a - b) < tolerance


def to_radians(degrees: float) -> float:
    """Convert an angle in degrees to radians."""
    return degrees * math.pi / 180.0


@dataclass(slots=True)
class Vector3:
    """Mutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def set(self, x: float, y: float, z: float) -> None:
        """Set all three components at once."""
        self.x, self.y, self.z = float(x), float(y), float(z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Union[Vector3, float]) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, Real):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, other: float) -> Vector3:
        if isinstance(other, Real):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __truediv__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iadd__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        self.x += other.x
        self.y += other.y
        self.z += other.z
        return self

    def __isub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        self.x -= other.x
        self.y -= other.y
        self.z -= other.z
        return self

    def __imul__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        self.x *= scalar
        self.y *= scalar
        self.z *= scalar
        return self

    def __itruediv__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        self.x /= scalar
        self.y /= scalar
        self.z /= scalar
        return self

    def length_sq(self) -> float:
        """Squared length of the vector."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Length of the vector."""
        return math.sqrt(self.length_sq())

    def normalize(self) -> None:
        """Scale this vector to unit length in place."""
        self /= self.length()


@dataclass(slots=True)
class Vector4:
    """Mutable four-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def set(self, x: float, y: float, z: float, w: float) -> None:
        """Set all four components at once."""
        self.x, self.y, self.z, self.w = float(x), float(y), float(z), float(w)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __add__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        return Vector4(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        return Vector4(*(a - b for a, b in zip(self, other)))

    def __mul__(self, other: Union[Vector4, float]) -> Vector4:
        if isinstance(other, Vector4):
            return Vector4(*(a * b for a, b in zip(self, other)))
        if isinstance(other, Real):
            return Vector4(*(a * other for a in self))
        return NotImplemented

    def __rmul__(self, other: float) -> Vector4:
        if isinstance(other, Real):
            return Vector4(*(a * other for a in self))
        return NotImplemented

    def __truediv__(self, scalar: float) -> Vector4:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector4(*(a / scalar for a in self))

    def __iadd__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        self.set(*(a + b for a, b in zip(self, other)))
        return self

    def __isub__(self, other: Vector4) -> Vector4:
        if not isinstance(other, Vector4):
            return NotImplemented
        self.set(*(a - b for a, b in zip(self, other)))
        return self

    def __imul__(self, scalar: float) -> Vector4:
        if not isinstance(scalar, Real):
            return NotImplemented
        self.set(*(a * scalar for a in self))
        return self

    def __itruediv__(self, scalar: float) -> Vector4:
        if not isinstance(scalar, Real):
            return NotImplemented
        self.set(*(a / scalar for a in self))
        return self

    def length_sq(self) -> float:
        """Squared length of the vector."""
        return sum(a * a for a in self)

    def length(self) -> float:
        """Length of the vector."""
        return math.sqrt(self.length_sq())

    def normalize(self) -> None:
        """Scale this vector to unit length in place."""
        self /= self.length()


_Vec = TypeVar("_Vec", Vector3, Vector4)


def normalize(vec: _Vec) -> _Vec:
    """Return a unit-length copy of ``vec``."""
    length = vec.length()
    return type(vec)(*(a / length for a in vec))


def dot(a: _Vec, b: _Vec) -> float:
    """Dot product of two vectors of the same kind."""
    return sum(p * q for p, q in zip(a, b))


def cross(a: _Vec, b: _Vec) -> _Vec:
    """Cross product; for 4D vectors w is taken as zero."""
    components = (
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )
    if isinstance(a, Vector4):
        return Vector4(*components, 0.0)
    return Vector3(*components)


def lerp(a: _Vec, b: _Vec, f: float) -> _Vec:
    """Linear interpolation from ``a`` to ``b`` by ``f``."""
    return a + (b - a) * f


class Matrix4:
    """4x4 row-major matrix for row vectors (translation in the last row)."""

    __slots__ = ("_rows",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, rows: Sequence[Sequence[float]] | None = None) -> None:
        if rows is None:
            self._rows = [[0.0] * 4 for _ in range(4)]
            return
        converted = [[float(v) for v in row] for row in rows]
        if len(converted) != 4 or any(len(row) != 4 for row in converted):
            raise ValueError("a Matrix4 needs exactly 4 rows of 4 values")
        self._rows = converted

    def __mul__(self, other: Matrix4) -> Matrix4:
        if not isinstance(other, Matrix4):
            return NotImplemented
        columns = list(zip(*other._rows))
        return Matrix4(
            [[sum(a * b for a, b in zip(row, col)) for col in columns] for row in self._rows]
        )

    def __imul__(self, other: Matrix4) -> Matrix4:
        if not isinstance(other, Matrix4):
            return NotImplemented
        self._rows = (self * other)._rows
        return self

    def __getitem__(self, index: int) -> tuple[float, ...]:
        return tuple(self._rows[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"Matrix4({self._rows!r})"

    def to_list(self) -> list[list[float]]:
        """Return the elements as a fresh list of row lists."""
        return [list(row) for row in self._rows]

    def is_close(self, other: Matrix4, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """True if every element is within ``tolerance`` of ``other``'s."""
        return all(
            is_close_enough(a, b, tolerance)
            for row_a, row_b in zip(self._rows, other._rows)
            for a, b in zip(row_a, row_b)
        )

    @staticmethod
    def _minor(rows: list[list[float]], skip_row: int, skip_col: int) -> float:
        (a, b, c), (d, e, f), (g, h, i) = (
            [v for j, v in enumerate(row) if j != skip_col]
            for r, row in enumerate(rows)
            if r != skip_row
        )
        return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)

    def invert(self) -> None:
        """Invert this matrix in place; raises ValueError if it is singular."""
        rows = self._rows
        cofactors = [
            [(-1.0) ** (r + c) * self._minor(rows, r, c) for c in range(4)] for r in range(4)
        ]
        det = sum(a * b for a, b in zip(rows[0], cofactors[0]))
        if det == 0.0:
            raise ValueError("matrix is singular and cannot be inverted")
        self._rows = [[cofactors[c][r] / det for c in range(4)] for r in range(4)]

    def transpose(self) -> None:
        """Transpose this matrix in place."""
        self._rows = [list(col) for col in zip(*self._rows)]

    def translation(self) -> Vector3:
        """The translation component (last row)."""
        return Vector3(*self._rows[3][:3])

    def x_axis(self) -> Vector3:
        """Normalized X axis (forward)."""
        return normalize(Vector3(*self._rows[0][:3]))

    def y_axis(self) -> Vector3:
        """Normalized Y axis (left)."""
        return normalize(Vector3(*self._rows[1][:3]))

    def z_axis(self) -> Vector3:
        """Normalized Z axis (up)."""
        return normalize(Vector3(*self._rows[2][:3]))

    def scale(self) -> Vector3:
        """Scale along each axis, taken from the lengths of the first three rows."""
        return Vector3(*(math.sqrt(sum(v * v for v in row[:3])) for row in self._rows[:3]))

    @classmethod
    def identity(cls) -> Matrix4:
        return cls([[1.0 if r == c else 0.0 for c in range(4)] for r in range(4)])

    @classmethod
    def zero(cls) -> Matrix4:
        return cls()

    @classmethod
    def create_scale(
        cls, x: Union[float, Vector3], y: float | None = None, z: float | None = None
    ) -> Matrix4:
        """Scale matrix from three factors, a Vector3, or one uniform factor."""
        if isinstance(x, Vector3):
            x, y, z = x
        elif y is None and z is None:
            y = z = x
        elif y is None or z is None:
            raise TypeError("create_scale takes one factor, three factors or a Vector3")
        return cls(
            [
                [x, 0.0, 0.0, 0.0],
                [0.0, y, 0.0, 0.0],
                [0.0, 0.0, z, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def create_rotation_x(cls, theta: float) -> Matrix4:
        c, s = math.cos(theta), math.sin(theta)
        return cls(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, c, s, 0.0],
                [0.0, -s, c, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def create_rotation_y(cls, theta: float) -> Matrix4:
        c, s = math.cos(theta), math.sin(theta)
        return cls(
            [
                [c, 0.0, -s, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [s, 0.0, c, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def create_rotation_z(cls, theta: float) -> Matrix4:
        c, s = math.cos(theta), math.sin(theta)
        return cls(
            [
                [c, s, 0.0, 0.0],
                [-s, c, 0.0, 0.0],
                [0.0, 0.0, 1.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def create_yaw_pitch_roll(cls, yaw: float, pitch: float, roll: float) -> Matrix4:
        """Roll about Z, then pitch about X, then yaw about Y."""
        return (
            cls.create_rotation_z(roll) * cls.create_rotation_x(pitch) * cls.create_rotation_y(yaw)
        )

    @classmethod
    def create_from_quaternion(cls, q: _QuaternionLike) -> Matrix4:
        """Rotation matrix from any object with x, y, z and w attributes."""
        x, y, z, w = q.x, q.y, q.z, q.w
        return cls(
            [
                [1.0 - 2.0 * y * y - 2.0 * z * z, 2.0 * x * y + 2.0 * w * z,
                 2.0 * x * z - 2.0 * w * y, 0.0],
                [2.0 * x * y - 2.0 * w * z, 1.0 - 2.0 * x * x - 2.0 * z * z,
                 2.0 * y * z + 2.0 * w * x, 0.0],
                [2.0 * x * z + 2.0 * w * y, 2.0 * y * z - 2.0 * w * x,
                 1.0 - 2.0 * x * x - 2.0 * y * y, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def create_translation(cls, trans: Vector3) -> Matrix4:
        return cls(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [0.0, 0.0, 1.0, 0.0],
                [trans.x, trans.y, trans.z, 1.0],
            ]
        )

    @classmethod
    def create_look_at(cls, eye: Vector3, at: Vector3, up: Vector3) -> Matrix4:
        forward = normalize(at - eye)
        left = normalize(cross(up, forward))
        new_up = normalize(cross(forward, left))
        return cls(
            [
                [*left, 0.0],
                [*new_up, 0.0],
                [*forward, 0.0],
                [*eye, 1.0],
            ]
        )

    @classmethod
    def create_ortho(cls, width: float, height: float, near: float, far: float) -> Matrix4:
        return cls(
            [
                [2.0 / width, 0.0, 0.0, 0.0],
                [0.0, 2.0 / height, 0.0, 0.0],
                [0.0, 0.0, 1.0 / (far - near), 0.0],
                [0.0, 0.0, near / (near - far), 1.0],
            ]
        )

    @classmethod
    def create_perspective_fov(
        cls, fov_y: float, width: float, height: float, near: float, far: float
    ) -> Matrix4:
        y_scale = 1.0 / math.tan(fov_y / 2.0)
        x_scale = y_scale * height / width
        return cls(
            [
                [x_scale, 0.0, 0.0, 0.0],
                [0.0, y_scale, 0.0, 0.0],
                [0.0, 0.0, far / (far - near), 1.0],
                [0.0, 0.0, -near * far / (far - near), 0.0],
            ]
        )


def transpose(mat: Matrix4) -> Matrix4:
    """Return a transposed copy of ``mat``."""
    result = Matrix4(mat.to_list())
    result.transpose()
    return result


def transform(vec: Vector3, mat: Matrix4, w: float = 1.0) -> Vector3:
    """Transform ``vec`` as a row vector with the given w (1 for points, 0 for directions)."""
    source = (vec.x, vec.y, vec.z, w)
    return Vector3(*(sum(s * mat[r][c] for r, s in enumerate(source)) for c in range(3)))