"""
Interpolation

Blends two precomputed frames of skinning matrices.
"""

import numpy as np
from pyrr import Quaternion, quaternion

from .transforms import compose_transform, decompose_transform


def interpolate_matrices(prev: np.ndarray, next: np.ndarray, blend: float) -> np.ndarray:
    """
    Interpolate between two arrays of bone matrices.

    Each matrix is decomposed into translation, scale and rotation.
    Translation and scale are interpolated linearly, rotation uses SLERP
    along the shortest arc. The result is recomposed as rotation, then
    translation, then scale.

    Args:
        prev: (num_bones, 4, 4) matrices at blend 0
        next: (num_bones, 4, 4) matrices at blend 1
        blend: Interpolation factor [0, 1]

    Returns:
        New (num_bones, 4, 4) float32 array
    """
    prev = np.asarray(prev)
    next = np.asarray(next)
    if prev.shape != next.shape:
        raise ValueError(f"cannot interpolate {prev.shape} with {next.shape}")

    result = np.empty(prev.shape, dtype='f4')

    for i in range(len(prev)):
        prev_translation, prev_scale, prev_rotation = decompose_transform(prev[i])
        next_translation, next_scale, next_rotation = decompose_transform(next[i])

        translation = prev_translation * (1.0 - blend) + next_translation * blend
        scale = prev_scale * (1.0 - blend) + next_scale * blend

        # q and -q are the same rotation; keep both on one hemisphere
        prev_rotation = np.asarray(prev_rotation)
        next_rotation = np.asarray(next_rotation)
        if np.dot(prev_rotation, next_rotation) < 0.0:
            next_rotation = -next_rotation
        rotation = Quaternion(quaternion.slerp(prev_rotation, next_rotation, blend))

        result[i] = compose_transform(rotation, translation, scale)

    return result
