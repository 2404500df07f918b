"""
Pose

A named array of per-bone transforms.
"""

from typing import Optional

import numpy as np
from pyrr import Quaternion

from .transforms import create_transform, decompose_transform


class Pose:
    """
    Named, ordered array of per-bone 4x4 transforms.

    Transforms are stored as a single (bone_count, 4, 4) float32 array so
    they can be handed to a renderer without further packing. A pose that
    belongs to an Animation is one frame of it.
    """

    def __init__(self, bone_count: int, name: str = "", file: str = "",
                 matrices: Optional[np.ndarray] = None):
        """
        Initialize pose.

        Args:
            bone_count: Number of bones the pose covers
            name: Pose name (registry key)
            file: Source file name, empty for derived poses
            matrices: Optional initial (bone_count, 4, 4) transforms
        """
        self.name = name
        self.file = file

        if matrices is None:
            self.matrices = np.zeros((bone_count, 4, 4), dtype='f4')
        else:
            self.matrices = np.asarray(matrices, dtype='f4').reshape(bone_count, 4, 4)

    @classmethod
    def identity(cls, bone_count: int, name: str = "Identity") -> 'Pose':
        """Pose with every bone at the identity transform."""
        return cls(bone_count, name, matrices=np.tile(np.eye(4, dtype='f4'), (bone_count, 1, 1)))

    @property
    def bone_count(self) -> int:
        return len(self.matrices)

    def __len__(self):
        return len(self.matrices)

    def __getitem__(self, bone_index: int) -> np.ndarray:
        return self.matrices[bone_index]

    def __setitem__(self, bone_index: int, matrix):
        self.matrices[bone_index] = matrix

    def set(self, bone_index: int, position, rotation):
        """Set a bone's transform from a position and a rotation quaternion."""
        self.matrices[bone_index] = create_transform(position, rotation)

    def position(self, bone_index: int) -> np.ndarray:
        """Translation component of a bone's transform."""
        return self.matrices[bone_index][3, :3].astype('f8')

    def rotation(self, bone_index: int) -> Quaternion:
        """Rotation component of a bone's transform."""
        _, _, rotation = decompose_transform(self.matrices[bone_index])
        return rotation

    def clone(self, name: str) -> 'Pose':
        """Copy of this pose under a new name (no source file)."""
        return Pose(self.bone_count, name, matrices=self.matrices.copy())

    def as_array(self) -> np.ndarray:
        """Contiguous float32 array for upload."""
        return np.ascontiguousarray(self.matrices, dtype='f4')

    def __repr__(self):
        return f"Pose(name='{self.name}', bones={self.bone_count})"
