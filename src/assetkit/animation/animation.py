"""
Animation

Frame-sampled skeletal animation.
"""

from typing import List, Optional

from .pose import Pose


class Animation:
    """
    Sequence of skeletal poses sampled at a fixed frame rate.

    Each frame is a Pose holding the model-space transform of every bone.
    """

    def __init__(self, name: str, file: str = "", frame_rate: int = 0,
                 frames: Optional[List[Pose]] = None):
        """
        Initialize animation.

        Args:
            name: Animation name (registry key)
            file: Source file name, empty for derived animations
            frame_rate: Frames per second
            frames: Ordered frames
        """
        self.name = name
        self.file = file
        self.frame_rate = frame_rate
        self.frames: List[Pose] = list(frames) if frames else []

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def duration(self) -> float:
        """Length in seconds (0 when the frame rate is unknown)."""
        if self.frame_rate <= 0:
            return 0.0
        return self.frame_count / self.frame_rate

    def extract_pose(self, name: str, frame: int, registry=None) -> Pose:
        """
        Copy one frame out as a standalone pose.

        Args:
            name: Name for the new pose
            frame: Frame index
            registry: AssetRegistry to register the pose into (optional)

        Returns:
            The new Pose
        """
        pose = self.frames[frame].clone(name)
        if registry is not None:
            registry.register(pose)
        return pose

    def extract_animation(self, name: str, start_frame: int, count: int, registry=None) -> 'Animation':
        """
        Copy a frame range out as a new animation.

        Args:
            name: Name for the new animation (frames are named "<name>.<i>")
            start_frame: First frame to copy
            count: Number of frames to copy
            registry: AssetRegistry to register the animation into (optional)

        Returns:
            The new Animation
        """
        selected = self.frames[start_frame:start_frame + count]
        animation = Animation(
            name,
            frame_rate=self.frame_rate,
            frames=[frame.clone(f"{name}.{i}") for i, frame in enumerate(selected)],
        )
        if registry is not None:
            registry.register(animation)
        return animation

    def __repr__(self):
        return f"Animation(name='{self.name}', frames={self.frame_count}, rate={self.frame_rate})"
