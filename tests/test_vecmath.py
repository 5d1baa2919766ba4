import math
from collections import namedtuple

import pytest

from itpengine.vecmath import (
    Matrix4,
    Vector3,
    Vector4,
    cross,
    dot,
    is_close_enough,
    lerp,
    normalize,
    to_radians,
    transform,
    transpose,
)

Quat = namedtuple("Quat", "x y z w")


def close_vec(vec, expected):
    values = list(vec)
    return len(values) == len(expected) and all(
        is_close_enough(a, b) for a, b in zip(values, expected)
    )


TEST_V3 = (-1.0, 0.0, 3.0)
TEST_V4 = (-1.0, 0.0, 3.0, 1.0)

TEST_MAT = [
    [0.5, 0.0, 0.0, 0.0],
    [0.0, 0.0, -1.0, 0.0],
    [0.0, 1.0, 0.0, 0.0],
    [10.0, 20.0, -30.0, 1.0],
]


# ---- helpers ----

def test_is_close_enough():
    assert is_close_enough(1.0, 1.0005)
    assert not is_close_enough(1.0, 1.01)


def test_to_radians():
    assert to_radians(180.0) == pytest.approx(math.pi)


# ---- Vector3 ----

def test_vector3_add():
    v = Vector3(*TEST_V3)
    assert close_vec(v + Vector3(1.0, -1.0, 2.0), (0.0, -1.0, 5.0))
    w = Vector3(*TEST_V3)
    w += Vector3(0.0, 2.0, -4.0)
    assert close_vec(w, (-1.0, 2.0, -1.0))
    assert close_vec(v, TEST_V3)


def test_vector3_subtract():
    v = Vector3(*TEST_V3)
    assert close_vec(v - Vector3(1.0, -1.0, 2.0), (-2.0, 1.0, 1.0))
    w = Vector3(*TEST_V3)
    w -= Vector3(0.0, 2.0, -4.0)
    assert close_vec(w, (-1.0, -2.0, 7.0))


def test_vector3_component_multiply():
    v = Vector3(*TEST_V3)
    assert close_vec(v * Vector3(1.0, 2.0, -3.0), (-1.0, 0.0, -9.0))


def test_vector3_scalar_multiply():
    v = Vector3(*TEST_V3)
    assert close_vec(v * 2.0, (-2.0, 0.0, 6.0))
    assert close_vec(0.5 * v, (-0.5, 0.0, 1.5))
    w = Vector3(*TEST_V3)
    w *= -3.0
    assert close_vec(w, (3.0, 0.0, -9.0))


def test_vector3_scalar_divide():
    v = Vector3(*TEST_V3)
    assert close_vec(v / 2.0, (-0.5, 0.0, 1.5))
    w = Vector3(*TEST_V3)
    w /= -0.5
    assert close_vec(w, (2.0, 0.0, -6.0))


def test_vector3_length():
    assert is_close_enough(Vector3(*TEST_V3).length_sq(), 10.0)
    assert is_close_enough(Vector3(4.0, 0.0, -3.0).length(), 5.0)


def test_vector3_normalize():
    v = Vector3(*TEST_V3)
    v.normalize()
    assert close_vec(v, (-0.31622777, 0.0, 0.9486833))
    assert close_vec(normalize(Vector3(0.0, -10.0, 10.0)), (0.0, -0.70710678, 0.70710678))


def test_vector3_dot():
    assert is_close_enough(dot(Vector3(*TEST_V3), Vector3(2.0, 0.5, -1.0)), -5.0)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (TEST_V3, (2.0, 0.5, -1.0), (-1.5, 5.0, -0.5)),
        ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)),
        ((0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (1.0, 0.0, 0.0)),
        ((1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, -1.0, 0.0)),
    ],
)
def test_vector3_cross(a, b, expected):
    assert close_vec(cross(Vector3(*a), Vector3(*b)), expected)


@pytest.mark.parametrize(
    "f, expected",
    [
        (0.0, TEST_V3),
        (1.0, (0.0, 0.0, 0.0)),
        (0.5, (-0.5, 0.0, 1.5)),
        (2.0, (1.0, 0.0, -3.0)),
    ],
)
def test_vector3_lerp(f, expected):
    assert close_vec(lerp(Vector3(*TEST_V3), Vector3(), f), expected)


def test_vector3_chain():
    v = Vector3(*TEST_V3)
    chain = 2.0 * v - cross(Vector3(1.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0)) * dot(
        Vector3(0.0, 0.0, 1.0), Vector3(0.0, 0.0, 2.0)
    )
    assert close_vec(chain, (-2.0, 0.0, 4.0))


def test_vector3_set_and_iter():
    v = Vector3()
    v.set(1, 2, 3)
    assert list(v) == [1.0, 2.0, 3.0]


def test_vector3_bad_operand():
    with pytest.raises(TypeError):
        Vector3(1.0, 2.0, 3.0) + 1.0


# ---- Vector4 ----

def test_vector4_add():
    v = Vector4(*TEST_V4)
    assert close_vec(v + Vector4(1.0, -1.0, 2.0, 0.5), (0.0, -1.0, 5.0, 1.5))
    w = Vector4(*TEST_V4)
    w += Vector4(0.0, 2.0, -4.0, 0.0)
    assert close_vec(w, (-1.0, 2.0, -1.0, 1.0))


def test_vector4_subtract():
    v = Vector4(*TEST_V4)
    assert close_vec(v - Vector4(1.0, -1.0, 2.0, 0.0), (-2.0, 1.0, 1.0, 1.0))
    w = Vector4(*TEST_V4)
    w -= Vector4(0.0, 2.0, -4.0, 1.0)
    assert close_vec(w, (-1.0, -2.0, 7.0, 0.0))


def test_vector4_component_multiply():
    v = Vector4(*TEST_V4)
    assert close_vec(v * Vector4(1.0, 2.0, -3.0, 1.0), (-1.0, 0.0, -9.0, 1.0))


def test_vector4_scalar_multiply():
    v = Vector4(*TEST_V4)
    assert close_vec(v * 2.0, (-2.0, 0.0, 6.0, 2.0))
    assert close_vec(0.5 * v, (-0.5, 0.0, 1.5, 0.5))
    w = Vector4(*TEST_V4)
    w *= -3.0
    assert close_vec(w, (3.0, 0.0, -9.0, -3.0))


def test_vector4_scalar_divide():
    v = Vector4(*TEST_V4)
    assert close_vec(v / 2.0, (-0.5, 0.0, 1.5, 0.5))
    w = Vector4(*TEST_V4)
    w /= -0.5
    assert close_vec(w, (2.0, 0.0, -6.0, -2.0))


def test_vector4_length():
    assert is_close_enough(Vector4(*TEST_V4).length_sq(), 11.0)
    assert is_close_enough(Vector4(4.0, 0.0, -3.0, 0.0).length(), 5.0)


def test_vector4_normalize():
    v = Vector4(*TEST_V4)
    v.normalize()
    assert close_vec(v, (-0.3015113445778, 0.0, 0.9045340337333, 0.3015113445778))
    assert close_vec(
        normalize(Vector4(0.0, -10.0, 10.0, 0.0)), (0.0, -0.70710678, 0.70710678, 0.0)
    )


@pytest.mark.parametrize(
    "f, expected",
    [
        (0.0, TEST_V4),
        (1.0, (0.0, 0.0, 0.0, 0.0)),
        (0.5, (-0.5, 0.0, 1.5, 0.5)),
        (2.0, (1.0, 0.0, -3.0, -1.0)),
    ],
)
def test_vector4_lerp(f, expected):
    assert close_vec(lerp(Vector4(*TEST_V4), Vector4(), f), expected)


def test_vector4_cross_ignores_w():
    result = cross(Vector4(1.0, 0.0, 0.0, 5.0), Vector4(0.0, 1.0, 0.0, 7.0))
    assert close_vec(result, (0.0, 0.0, 1.0, 0.0))


# ---- Matrix4 ----

def test_transform_position():
    result = transform(Vector3(100.0, -200.0, 300.0), Matrix4(TEST_MAT))
    assert close_vec(result, (60.0, 320.0, 170.0))


def test_transform_direction():
    result = transform(Vector3(-10.0, 20.0, -30.0), Matrix4(TEST_MAT), 0.0)
    assert close_vec(result, (-5.0, -30.0, -20.0))


def test_invert_and_multiply():
    expected = Matrix4(
        [
            [2.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, -1.0, 0.0, 0.0],
            [-20.0, -30.0, -20.0, 1.0],
        ]
    )
    test_mat = Matrix4(TEST_MAT)
    inv = Matrix4(TEST_MAT)
    inv.invert()
    assert inv.is_close(expected)
    assert (test_mat * inv).is_close(Matrix4.identity())
    assert (inv * test_mat).is_close(Matrix4.identity())


def test_invert_singular_raises():
    with pytest.raises(ValueError):
        Matrix4.zero().invert()


def test_create_translation():
    expected = Matrix4(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [100.0, -50.0, 0.5, 1.0],
        ]
    )
    mat = Matrix4.create_translation(Vector3(100.0, -50.0, 0.5))
    assert mat.is_close(expected)
    assert close_vec(mat.translation(), (100.0, -50.0, 0.5))


def test_create_rotation_x():
    expected = Matrix4(
        [[1, 0, 0, 0], [0, 0, 1, 0], [0, -1, 0, 0], [0, 0, 0, 1]]
    )
    assert Matrix4.create_rotation_x(to_radians(90.0)).is_close(expected)


def test_create_rotation_y():
    expected = Matrix4(
        [[0, 0, 1, 0], [0, 1, 0, 0], [-1, 0, 0, 0], [0, 0, 0, 1]]
    )
    assert Matrix4.create_rotation_y(to_radians(-90.0)).is_close(expected)


def test_create_rotation_z():
    expected = Matrix4(
        [[0, -1, 0, 0], [1, 0, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]
    )
    assert Matrix4.create_rotation_z(to_radians(-90.0)).is_close(expected)


def _ypr(pitch_deg, yaw_deg, roll_deg):
    return Matrix4.create_yaw_pitch_roll(
        to_radians(yaw_deg), to_radians(pitch_deg), to_radians(roll_deg)
    )


@pytest.mark.parametrize(
    "angles, expected",
    [
        ((90.0, 0.0, 0.0), [[1, 0, 0, 0], [0, 0, 1, 0], [0, -1, 0, 0], [0, 0, 0, 1]]),
        ((0.0, 90.0, 0.0), [[0, 0, -1, 0], [0, 1, 0, 0], [1, 0, 0, 0], [0, 0, 0, 1]]),
        ((0.0, 0.0, 90.0), [[0, 1, 0, 0], [-1, 0, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]),
        ((90.0, 90.0, 0.0), [[0, 0, -1, 0], [1, 0, 0, 0], [0, -1, 0, 0], [0, 0, 0, 1]]),
    ],
)
def test_create_yaw_pitch_roll(angles, expected):
    assert _ypr(*angles).is_close(Matrix4(expected))


def test_create_yaw_pitch_roll_combined():
    rot = Matrix4(
        [
            [0.42261824, 0.90630776, 0.0, 0.0],
            [0.0, 0.0, -1.0, 0.0],
            [-0.90630776, 0.42261824, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    assert _ypr(90.0, 45.0, -20.0).is_close(transpose(rot))


def test_create_scale_vector():
    expected = Matrix4(
        [[0, 0, 0, 0], [0, 2, 0, 0], [0, 0, -0.5, 0], [0, 0, 0, 1]]
    )
    assert Matrix4.create_scale(Vector3(0.0, 2.0, -0.5)).is_close(expected)


def test_create_scale_forms_agree():
    uniform = Matrix4.create_scale(3.0)
    assert uniform.is_close(Matrix4.create_scale(3.0, 3.0, 3.0))
    assert close_vec(Matrix4.create_scale(2.0, 3.0, 4.0).scale(), (2.0, 3.0, 4.0))


def test_create_scale_rejects_two_factors():
    with pytest.raises(TypeError):
        Matrix4.create_scale(1.0, 2.0)


def test_create_look_at():
    expected = Matrix4(
        [[0, 0, -1, 0], [0, 1, 0, 0], [1, 0, 0, 0], [10, 20, 30, 1]]
    )
    look = Matrix4.create_look_at(
        Vector3(10.0, 20.0, 30.0), Vector3(30.0, 20.0, 30.0), Vector3(0.0, 1.0, 0.0)
    )
    assert look.is_close(expected)
    assert close_vec(transform(Vector3(0.0, 0.0, 1.0), look, 0.0), (1.0, 0.0, 0.0))
    assert close_vec(transform(Vector3(0.0, 1.0, 0.0), look, 0.0), (0.0, 1.0, 0.0))
    assert close_vec(transform(Vector3(1.0, 0.0, 0.0), look, 0.0), (0.0, 0.0, -1.0))


def test_invert_composite():
    test = (
        Matrix4.create_translation(Vector3(-100.0, 200.0, 300.0))
        * Matrix4.create_scale(Vector3(0.5, 2.0, -3.0))
        * Matrix4.create_yaw_pitch_roll(0.2, -1.0, 0.1)
    )
    inv = Matrix4(test.to_list())
    inv.invert()
    assert (test * inv).is_close(Matrix4.identity())


def test_imul_in_place():
    mat = Matrix4.create_translation(Vector3(1.0, 2.0, 3.0))
    mat *= Matrix4.create_translation(Vector3(1.0, 1.0, 1.0))
    assert close_vec(mat.translation(), (2.0, 3.0, 4.0))


def test_matrix_multiply_bad_operand():
    with pytest.raises(TypeError):
        Matrix4.identity() * 2.0


def test_matrix_rejects_bad_shape():
    with pytest.raises(ValueError):
        Matrix4([[1.0, 2.0], [3.0, 4.0]])


def test_transpose_in_place_and_copy():
    mat = Matrix4(TEST_MAT)
    copy = transpose(mat)
    assert copy[0][3] == 10.0
    assert mat[3][0] == 10.0
    mat.transpose()
    assert mat == copy


def test_axes_are_normalized():
    mat = Matrix4.create_scale(2.0) * Matrix4.create_rotation_z(to_radians(90.0))
    assert close_vec(mat.x_axis(), (0.0, 1.0, 0.0))
    assert close_vec(mat.y_axis(), (-1.0, 0.0, 0.0))
    assert close_vec(mat.z_axis(), (0.0, 0.0, 1.0))


def test_scale_of_test_matrix():
    assert close_vec(Matrix4(TEST_MAT).scale(), (0.5, 1.0, 1.0))


def test_quaternion_identity():
    assert Matrix4.create_from_quaternion(Quat(0.0, 0.0, 0.0, 1.0)).is_close(
        Matrix4.identity()
    )


def test_quaternion_matches_rotation_z():
    half = to_radians(90.0) / 2.0
    q = Quat(0.0, 0.0, math.sin(half), math.cos(half))
    assert Matrix4.create_from_quaternion(q).is_close(
        Matrix4.create_rotation_z(to_radians(90.0))
    )


def test_create_ortho():
    expected = Matrix4(
        [[1, 0, 0, 0], [0, 0.5, 0, 0], [0, 0, 0.1, 0], [0, 0, 0, 1]]
    )
    assert Matrix4.create_ortho(2.0, 4.0, 0.0, 10.0).is_close(expected)


def test_create_perspective_fov():
    proj = Matrix4.create_perspective_fov(to_radians(90.0), 100.0, 100.0, 1.0, 10.0)
    assert is_close_enough(proj[0][0], 1.0)
    assert is_close_enough(proj[1][1], 1.0)
    assert proj[2][3] == 1.0
    near_point = transform(Vector3(0.0, 0.0, 1.0), proj)
    assert is_close_enough(near_point.z, 0.0)


def test_to_list_is_a_copy():
    mat = Matrix4.identity()
    data = mat.to_list()
    data[0][0] = 9.0
    assert mat[0][0] == 1.0