"""Tests for quaternion / matrix helpers"""

import math

import numpy as np
import pytest

from assetkit.animation.transforms import (
    compose_transform,
    compute_w,
    create_transform,
    decompose_transform,
    invert_transform,
    rotate_vector,
    rotation_from_matrix,
)


@pytest.mark.parametrize("xyz", [(0.0, 0.0, 0.0), (0.5, 0.5, 0.5), (0.1, -0.3, 0.2), (0.6, 0.0, -0.8)])
def test_compute_w_unit_quaternion(xyz):
    """Vector parts inside the unit ball give a non-positive w and a unit quaternion"""
    q = np.asarray(compute_w(*xyz))

    assert q[3] <= 0.0
    assert math.isclose(np.linalg.norm(q), 1.0, abs_tol=1e-6)


def test_compute_w_out_of_range():
    """Vector parts outside the unit ball give w = 0"""
    q = np.asarray(compute_w(0.9, 0.9, 0.0))

    assert q[3] == 0.0
    assert np.allclose(q[:3], [0.9, 0.9, 0.0])


def test_rotate_vector_quarter_turn():
    """(0, 0, sin 45) with the negative root is a -90 degree turn about z"""
    q = compute_w(0.0, 0.0, math.sqrt(0.5))

    rotated = rotate_vector(q, [1.0, 0.0, 0.0])

    assert np.allclose(rotated, [0.0, -1.0, 0.0], atol=1e-6)


def test_create_transform_rotates_then_translates():
    """Points are rotated about the origin, then moved"""
    q = compute_w(0.0, 0.0, math.sqrt(0.5))
    matrix = create_transform([1.0, 2.0, 3.0], q)

    point = np.array([1.0, 0.0, 0.0, 1.0]) @ matrix

    assert matrix.dtype == np.float32
    assert np.allclose(point[:3], [1.0, 1.0, 3.0], atol=1e-6)


def test_invert_transform():
    """A transform times its inverse is the identity"""
    matrix = create_transform([4.0, -2.0, 0.5], compute_w(0.2, 0.3, -0.1))

    assert np.allclose(invert_transform(matrix) @ matrix, np.eye(4), atol=1e-5)


def test_decompose_compose_round_trip():
    """Decomposing and recomposing a rigid transform gives it back"""
    rotation = compute_w(0.1, 0.4, -0.2)
    matrix = create_transform([3.0, 0.0, -1.0], rotation)

    translation, scale, extracted = decompose_transform(matrix)

    assert np.allclose(translation, [3.0, 0.0, -1.0], atol=1e-6)
    assert np.allclose(scale, [1.0, 1.0, 1.0], atol=1e-6)
    assert np.allclose(compose_transform(extracted, translation, scale), matrix, atol=1e-5)


def test_rotation_from_matrix_sign_independent():
    """q and -q describe the same rotation matrix"""
    q = np.asarray(compute_w(0.3, -0.2, 0.5))
    matrix = create_transform([0.0, 0.0, 0.0], q)

    extracted = np.asarray(rotation_from_matrix(matrix))

    assert math.isclose(abs(np.dot(extracted, q)), 1.0, abs_tol=1e-5)


def test_rotation_from_matrix_half_turn():
    """A half turn about x has a negative trace and extracts to +/- (1, 0, 0, 0)"""
    matrix = np.diag([1.0, -1.0, -1.0, 1.0])

    extracted = np.asarray(rotation_from_matrix(matrix))

    assert np.allclose(np.abs(extracted), [1.0, 0.0, 0.0, 0.0], atol=1e-6)
    assert np.allclose(create_transform([0.0, 0.0, 0.0], extracted), matrix, atol=1e-6)
