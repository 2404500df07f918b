"""
Model

Represents an imported model with meshes, materials and (optionally) a skeleton.
"""

from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from ..animation.animation import Animation
from ..animation.interpolation import interpolate_matrices
from ..animation.pose import Pose
from ..animation.skeleton import Skeleton
from ..animation.skinning import compute_skinning_matrices
from ..config.settings import (
    DEFAULT_POSE_NAME, MAXIMUM_WEIGHTS_PER_VERTEX,
    SKINNED_VERTEX_STRIDE, STATIC_VERTEX_STRIDE,
)
from ..errors import UnsupportedComplexityError
from .material import Material


class RenderMode(Enum):
    """How a consumer should draw a mesh (display concern only)."""
    NONE = "none"
    POINT = "point"
    EDGE = "edge"
    FACE = "face"
    TEXTURE = "texture"


class Vertex:
    """Position, normal and texture coordinates of one mesh vertex."""

    def __init__(self, position=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 0.0),
                 texture_coordinates=(0.0, 0.0)):
        self.position = tuple(float(v) for v in position)
        self.normal = tuple(float(v) for v in normal)
        self.texture_coordinates = tuple(float(v) for v in texture_coordinates)

    def key(self) -> tuple:
        """Attributes compared when welding identical vertices."""
        return (self.position, self.normal, self.texture_coordinates)

    def float_array(self) -> List[float]:
        """Interleaved attributes: position(3) + texcoord(2)."""
        return [*self.position, *self.texture_coordinates]

    def __eq__(self, other):
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"Vertex(P={self.position}, N={self.normal}, TC={self.texture_coordinates})"


class Weight:
    """One bone influence on a skinned vertex."""

    def __init__(self, bone_index: int, bias: float, position=(0.0, 0.0, 0.0)):
        """
        Args:
            bone_index: Influencing bone
            bias: Influence factor
            position: Offset from the bone in the bone's local space
        """
        self.bone_index = bone_index
        self.bias = bias
        self.position = tuple(float(v) for v in position)

    def __repr__(self):
        return f"Weight(bone={self.bone_index}, bias={self.bias:.3f})"


class SkinnedVertex(Vertex):
    """Vertex deformed by up to MAXIMUM_WEIGHTS_PER_VERTEX bones."""

    def __init__(self, position=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 0.0),
                 texture_coordinates=(0.0, 0.0), weights: Optional[List[Weight]] = None):
        super().__init__(position, normal, texture_coordinates)
        self.weights: List[Weight] = []
        for weight in weights or []:
            self.add_weight(weight)

    def add_weight(self, weight: Weight):
        """Attach a bone influence."""
        if len(self.weights) >= MAXIMUM_WEIGHTS_PER_VERTEX:
            raise UnsupportedComplexityError(
                f"vertices may have at most {MAXIMUM_WEIGHTS_PER_VERTEX} weights"
            )
        self.weights.append(weight)

    def float_array(self) -> List[float]:
        """
        Interleaved attributes for skinning.

        Layout: position(3), texcoord(2), bone indices(4), biases(4).
        Unused weight slots are zero.
        """
        values = [0.0] * SKINNED_VERTEX_STRIDE
        values[0:3] = self.position
        values[3:5] = self.texture_coordinates

        for i, weight in enumerate(self.weights):
            values[STATIC_VERTEX_STRIDE + i] = float(weight.bone_index)
            values[STATIC_VERTEX_STRIDE + MAXIMUM_WEIGHTS_PER_VERTEX + i] = weight.bias

        return values


class Mesh:
    """
    Single mesh with geometry and material.

    Elements form a triangle list (stride 3) indexing into vertices.
    """

    def __init__(self, name: str = "", material: Optional[Material] = None,
                 vertices: Optional[List[Vertex]] = None, elements: Optional[List[int]] = None,
                 render_mode: RenderMode = RenderMode.TEXTURE):
        """
        Initialize mesh.

        Args:
            name: Mesh name
            material: Material for this mesh
            vertices: Ordered vertices
            elements: Triangle list indices
            render_mode: Display hint for the renderer
        """
        self.name = name
        self.material = material
        self.vertices: List[Vertex] = vertices if vertices is not None else []
        self.elements: List[int] = elements if elements is not None else []
        self.render_mode = render_mode

        # Location inside the owning model's flattened element array
        self.element_offset = 0
        self.element_count = 0

    @property
    def triangle_count(self) -> int:
        return len(self.elements) // 3

    def __repr__(self):
        return f"Mesh(name='{self.name}', vertices={len(self.vertices)}, triangles={self.triangle_count})"


class Model:
    """
    Represents a complete imported model with multiple meshes.

    Static models only know the "Default" pose.
    """

    vertex_stride = STATIC_VERTEX_STRIDE

    def __init__(self, name: str, file: str, meshes: List[Mesh]):
        """
        Initialize model.

        Args:
            name: Model name (registry key)
            file: Source file name
            meshes: List of Mesh objects
        """
        self.name = name
        self.file = file
        self.meshes = meshes

        self.poses: List[Pose] = []
        self.animations: List[Animation] = []

    # ------------------------------------------------------------------
    # Flattening
    # ------------------------------------------------------------------

    def vertex_array(self) -> np.ndarray:
        """
        Interleaved vertex attributes of all meshes.

        Returns:
            Flat float32 array of len(vertices) * vertex_stride values
        """
        values = [
            value
            for mesh in self.meshes
            for vertex in mesh.vertices
            for value in vertex.float_array()
        ]
        return np.array(values, dtype='f4')

    def element_array(self) -> np.ndarray:
        """
        Triangle indices of all meshes, rebased onto the shared vertex array.

        Also records each mesh's element_offset / element_count.

        Returns:
            Flat uint32 index array
        """
        elements = []
        vertex_offset = 0
        for mesh in self.meshes:
            mesh.element_offset = len(elements)
            mesh.element_count = len(mesh.elements)
            elements.extend(index + vertex_offset for index in mesh.elements)
            vertex_offset += len(mesh.vertices)

        return np.array(elements, dtype='u4')

    # ------------------------------------------------------------------
    # Poses & animation
    # ------------------------------------------------------------------

    def add_pose(self, pose: Pose):
        """Track a pose."""
        self.poses.append(pose)

    def add_pose_by_name(self, name: str, registry):
        """Resolve a pose through the registry and track it."""
        pose = registry.retrieve(Pose, name)
        if pose is None:
            raise KeyError(f"pose '{name}' not found")
        self.add_pose(pose)

    def set_pose(self, name: str):
        """Select a pose for display."""
        if name != DEFAULT_POSE_NAME:
            raise NotImplementedError(f"static model '{self.name}' only supports the default pose")
        return None

    def add_animation(self, animation: Animation):
        """Track an animation."""
        self.animations.append(animation)

    def add_animation_by_name(self, name: str, registry):
        """Resolve an animation through the registry and track it."""
        animation = registry.retrieve(Animation, name)
        if animation is None:
            raise KeyError(f"animation '{name}' not found")
        self.add_animation(animation)

    def set_animation_frame(self, name: str, frame: float):
        """Select an animation frame for display."""
        raise NotImplementedError(f"static model '{self.name}' cannot be animated")

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}', meshes={len(self.meshes)})"


class SkeletalModel(Model):
    """
    Model skinned to a skeleton.

    Every attached pose and animation frame is turned into skinning
    matrices once, at attach time. The skeleton's bind pose is attached
    as "Default" on construction.
    """

    vertex_stride = SKINNED_VERTEX_STRIDE

    def __init__(self, name: str, file: str, skeleton: Skeleton, meshes: List[Mesh]):
        """
        Initialize skeletal model.

        Args:
            name: Model name (registry key)
            file: Source file name
            skeleton: Parsed skeleton with bind / inverse bind poses
            meshes: List of skinned Mesh objects
        """
        super().__init__(name, file, meshes)
        self.skeleton = skeleton

        # Precomputed skinning matrices
        self.pose_matrices: Dict[str, np.ndarray] = {}
        self.animation_matrices: Dict[str, List[np.ndarray]] = {}

        self.add_pose(skeleton.bind_pose.clone(DEFAULT_POSE_NAME))

        from ..core.geometry_utils import generate_skeleton_mesh
        self.skeleton_mesh = generate_skeleton_mesh(skeleton)

    def add_pose(self, pose: Pose):
        """
        Track a pose and precompute its skinning matrices.

        Args:
            pose: Model-space pose covering every bone of the skeleton
        """
        if pose.name in self.pose_matrices:
            raise ValueError(f"pose '{pose.name}' is already attached to '{self.name}'")

        matrices = compute_skinning_matrices(self.skeleton.inverse_bind_pose, pose)
        self.poses.append(pose)
        self.pose_matrices[pose.name] = matrices

    def add_animation(self, animation: Animation):
        """
        Track an animation and precompute skinning matrices for every frame.

        Args:
            animation: Animation whose frames cover every bone of the skeleton
        """
        if animation.name in self.animation_matrices:
            raise ValueError(f"animation '{animation.name}' is already attached to '{self.name}'")

        frames = [
            compute_skinning_matrices(self.skeleton.inverse_bind_pose, frame)
            for frame in animation.frames
        ]
        self.animations.append(animation)
        self.animation_matrices[animation.name] = frames

    def set_pose(self, name: str) -> np.ndarray:
        """
        Skinning matrices of an attached pose.

        Returns:
            (num_bones, 4, 4) float32 array
        """
        return self.pose_matrices[name]

    def set_animation_frame(self, name: str, frame: float) -> np.ndarray:
        """
        Skinning matrices at a (possibly fractional) frame of an attached animation.

        Whole frame numbers return the cached array itself. In between two
        frames the matrices are interpolated; past the last frame the
        animation wraps around to frame 0.

        Args:
            name: Attached animation name
            frame: Frame number, 0 <= frame < frame count

        Returns:
            (num_bones, 4, 4) float32 array
        """
        if frame < 0:
            raise ValueError(f"frame must be >= 0, got {frame}")

        frames = self.animation_matrices[name]
        prev_frame = int(np.floor(frame))
        next_frame = int(np.ceil(frame))
        if prev_frame >= len(frames):
            raise ValueError(f"frame {frame} is past the last of {len(frames)} frames in '{name}'")

        # Sitting exactly on a frame
        if prev_frame == next_frame:
            return frames[next_frame]

        if next_frame >= len(frames):
            next_frame = 0

        blend = frame % 1.0
        return interpolate_matrices(frames[prev_frame], frames[next_frame], blend)
