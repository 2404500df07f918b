"""
Geometry utilities for building helper meshes from imported data.
"""

import numpy as np

from ..config.settings import SKELETON_MESH_BONE_OFFSET
from ..loaders.material import Material
from ..loaders.model import Mesh, RenderMode, SkinnedVertex, Weight


def generate_skeleton_mesh(skeleton, offset=SKELETON_MESH_BONE_OFFSET):
    """
    Generate a debug mesh visualising a skeleton's bind pose.

    Each bone contributes one triangle: the bone position, the bone
    position shifted by ``offset`` on every axis, and the parent position
    (bone 0 for roots). Every vertex is fully weighted to its bone, so the
    mesh follows the skinning matrices like the real geometry.

    Args:
        skeleton: Skeleton with a filled-in bind pose
        offset: Shift of the middle vertex

    Returns:
        Mesh named "Skeleton" with render mode NONE
    """
    def bone_vertex(bone_index, shift=0.0):
        position = skeleton.bind_pose.position(bone_index) + np.full(3, shift)
        return SkinnedVertex(position=position, weights=[Weight(bone_index, 1.0)])

    vertices = []
    elements = []

    for i, bone in enumerate(skeleton.bones):
        parent_index = bone.parent_index if bone.parent_index is not None else 0

        vertices.extend([
            bone_vertex(i),
            bone_vertex(i, offset),
            bone_vertex(parent_index),
        ])
        elements.extend([i * 3, i * 3 + 1, i * 3 + 2])

    return Mesh(
        name="Skeleton",
        material=Material.blank(),
        vertices=vertices,
        elements=elements,
        render_mode=RenderMode.NONE,
    )
