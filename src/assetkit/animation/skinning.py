"""
Skinning

Precomputes the per-bone skinning matrices handed to the renderer.
"""

import numpy as np

from .pose import Pose


def compute_skinning_matrices(inverse_bind_pose: Pose, pose: Pose) -> np.ndarray:
    """
    Compute skinning matrices for one pose.

    Skinning matrix formula (row-vector form):
    skinningMatrix[i] = inverseBindPose[i] @ poseTransform[i]

    This moves a bind-space vertex into the bone's local space and then
    out again through the posed bone transform.

    Args:
        inverse_bind_pose: The skeleton's inverse bind pose
        pose: Model-space pose (bind pose or animation frame)

    Returns:
        Array of shape (num_bones, 4, 4) with dtype float32

    Raises:
        ValueError: Pose and skeleton cover a different number of bones
    """
    if pose.bone_count != inverse_bind_pose.bone_count:
        raise ValueError(
            f"pose '{pose.name}' has {pose.bone_count} bones, skeleton has {inverse_bind_pose.bone_count}"
        )

    return np.matmul(
        inverse_bind_pose.matrices.astype('f8'),
        pose.matrices.astype('f8'),
    ).astype('f4')
