"""
Transforms

Quaternion and 4x4 matrix helpers shared by the importers and the
interpolation engine.

All matrices follow pyrr's row-vector layout: a point is transformed as
``p @ M``, translation lives in row 3, and "A then B" is ``A @ B``.
"""

import math
from typing import Tuple

import numpy as np
from pyrr import Matrix44, Quaternion, Vector3, matrix44, quaternion


def compute_w(x: float, y: float, z: float) -> Quaternion:
    """
    Rebuild a unit quaternion from its stored x/y/z components.

    id Tech 4 files only store the vector part; the scalar part is taken
    from the negative root. An out-of-range vector part yields w = 0.

    Args:
        x, y, z: Vector part of the rotation

    Returns:
        Quaternion [x, y, z, w]
    """
    t = 1.0 - (x * x) - (y * y) - (z * z)
    w = 0.0
    if t >= 0.0:
        w = -math.sqrt(t)
    return Quaternion([x, y, z, w])


def rotation_matrix(rotation) -> np.ndarray:
    """
    Build a 4x4 row-vector rotation matrix from a quaternion [x, y, z, w].

    ``v @ rotation_matrix(q)`` applies the Hamilton rotation ``q v q*``.
    pyrr returns the column-vector form, hence the transpose.
    """
    return np.asarray(Matrix44.from_quaternion(np.asarray(rotation, dtype='f8'))).T


def rotation_from_matrix(matrix) -> Quaternion:
    """Extract the rotation quaternion from an orthonormal row-vector matrix."""
    r = np.asarray(matrix, dtype='f8')[:3, :3].T
    return Quaternion(quaternion.create_from_matrix(r)).normalized


def create_transform(position, rotation) -> np.ndarray:
    """
    Rotate-then-translate transform for a bone.

    Args:
        position: Translation (3 floats)
        rotation: Quaternion [x, y, z, w]

    Returns:
        4x4 float32 matrix
    """
    translation = np.asarray(Matrix44.from_translation(Vector3(position)), dtype='f8')
    return (rotation_matrix(rotation) @ translation).astype('f4')


def compose_transform(rotation, translation, scale) -> np.ndarray:
    """Recompose rotation, then translation, then scale into one matrix."""
    translate = np.asarray(Matrix44.from_translation(Vector3(translation)), dtype='f8')
    scaling = np.asarray(Matrix44.from_scale(Vector3(scale)), dtype='f8')
    return (rotation_matrix(rotation) @ translate @ scaling).astype('f4')


def decompose_transform(matrix) -> Tuple[np.ndarray, np.ndarray, Quaternion]:
    """
    Split a transform into translation, scale and rotation.

    Scale is the length of each basis row; degenerate rows keep a scale
    of 1 so the rotation extraction stays defined.

    Returns:
        (translation, scale, rotation)
    """
    m = np.asarray(matrix, dtype='f8')
    translation = m[3, :3].copy()

    scale = np.linalg.norm(m[:3, :3], axis=1)
    safe_scale = np.where(scale > 1e-8, scale, 1.0)
    basis = m[:3, :3] / safe_scale[:, None]

    return translation, scale, rotation_from_matrix(basis)


def invert_transform(matrix) -> np.ndarray:
    """Full 4x4 inverse (used once per bone for the inverse bind pose)."""
    return np.asarray(matrix44.inverse(np.asarray(matrix, dtype='f8')), dtype='f4')


def rotate_vector(rotation, vector) -> np.ndarray:
    """Rotate a 3-vector by a quaternion [x, y, z, w]."""
    return np.asarray(vector, dtype='f8') @ rotation_matrix(rotation)[:3, :3]
