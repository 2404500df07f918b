"""
Skeleton

Represents a hierarchical skeleton structure with bones.
"""

from typing import Dict, List, Optional

from ..config.settings import MAXIMUM_BONES_PER_MODEL
from ..errors import MalformedCountError, MalformedHierarchyError, UnsupportedComplexityError
from .pose import Pose
from .transforms import invert_transform


class Bone:
    """
    Represents a single bone (joint) in a skeleton hierarchy.

    The parent is held as an index into the owning skeleton's bone list,
    never as an object reference, so bones never form reference cycles.
    """

    def __init__(self, name: str, index: int, parent_index: Optional[int] = None):
        """
        Initialize a bone.

        Args:
            name: Bone name
            index: Bone index in skeleton (dense, 0..N-1)
            parent_index: Index of the parent bone (None for root)
        """
        self.name = name
        self.index = index
        self.parent_index = parent_index

    @property
    def is_root(self) -> bool:
        return self.parent_index is None

    def __repr__(self):
        return f"Bone(name='{self.name}', index={self.index}, parent={self.parent_index})"


class Skeleton:
    """
    Ordered bone hierarchy with its bind pose.

    Owns:
    - Bones in declaration order (parents always precede children)
    - Identity pose
    - Bind pose (model-space rest transform per bone)
    - Inverse bind pose (per-bone inverse of the bind pose)
    """

    def __init__(self, bone_count: int, name: str = "Skeleton"):
        """
        Initialize skeleton.

        Args:
            bone_count: Declared number of bones
            name: Skeleton name for debugging

        Raises:
            UnsupportedComplexityError: bone_count exceeds MAXIMUM_BONES_PER_MODEL
        """
        if bone_count > MAXIMUM_BONES_PER_MODEL:
            raise UnsupportedComplexityError(
                f"only models with at most {MAXIMUM_BONES_PER_MODEL} bones are supported (got {bone_count})"
            )

        self.name = name
        self.bone_count = bone_count
        self.bones: List[Bone] = []
        self.bone_by_name: Dict[str, Bone] = {}

        self.identity = Pose.identity(bone_count)
        self.bind_pose = Pose(bone_count, "BindPose")
        self.inverse_bind_pose = Pose(bone_count, "InverseBindPose")

    def add_bone(self, name: str, parent_index: Optional[int] = None) -> Bone:
        """
        Append the next bone in hierarchical order.

        Args:
            name: Bone name
            parent_index: Index of an already-declared bone, or None/negative for a root

        Returns:
            The new Bone

        Raises:
            MalformedCountError: more bones than declared at construction
            MalformedHierarchyError: parent not declared before this bone
        """
        index = len(self.bones)
        if index >= self.bone_count:
            raise MalformedCountError(
                f"skeleton declared {self.bone_count} bones, got bone '{name}' at index {index}"
            )

        if parent_index is not None and parent_index < 0:
            parent_index = None
        if parent_index is not None and parent_index >= index:
            raise MalformedHierarchyError(
                f"bone '{name}' ({index}) references parent {parent_index} before it is declared"
            )

        bone = Bone(name, index, parent_index)
        self.bones.append(bone)
        self.bone_by_name[name] = bone
        return bone

    def get_bone(self, name: str) -> Optional[Bone]:
        """
        Find a bone by name.

        Args:
            name: Bone name

        Returns:
            Bone if found, None otherwise
        """
        return self.bone_by_name.get(name)

    def parent(self, bone: Bone) -> Optional[Bone]:
        """Resolve a bone's weak parent reference."""
        if bone.parent_index is None:
            return None
        return self.bones[bone.parent_index]

    def parent_indices(self) -> List[int]:
        """Parent index per bone in declaration order, -1 for roots."""
        return [-1 if b.parent_index is None else b.parent_index for b in self.bones]

    def set_bind_transform(self, bone_index: int, position, rotation):
        """Set a bone's bind transform and its cached inverse."""
        self.bind_pose.set(bone_index, position, rotation)
        self.inverse_bind_pose[bone_index] = invert_transform(self.bind_pose[bone_index])

    def __len__(self):
        return len(self.bones)

    def __repr__(self):
        roots = sum(1 for b in self.bones if b.is_root)
        return f"Skeleton(name='{self.name}', bones={len(self.bones)}, roots={roots})"
