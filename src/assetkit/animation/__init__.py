"""
Animation System

Skeletons, poses and frame-sampled animations with precomputed skinning.
"""

from .skeleton import Bone, Skeleton
from .pose import Pose
from .animation import Animation
from .animation_controller import AnimationController
from .interpolation import interpolate_matrices
from .skinning import compute_skinning_matrices

__all__ = [
    'Bone',
    'Skeleton',
    'Pose',
    'Animation',
    'AnimationController',
    'interpolate_matrices',
    'compute_skinning_matrices',
]
