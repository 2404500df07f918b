"""
Animation Controller

Playback clock turning elapsed time into skinning matrices.
"""

from typing import Optional

import numpy as np

from ..config.settings import DEFAULT_POSE_NAME
from .animation import Animation


class AnimationController:
    """
    Controls animation playback for one model.

    Manages:
    - Current pose or animation
    - Playback time, speed and looping
    - Sampling the model's precomputed skinning matrices
    """

    def __init__(self, model):
        """
        Initialize animation controller.

        Args:
            model: Model (usually a SkeletalModel) to animate
        """
        self.model = model
        self.current_animation: Optional[Animation] = None
        self.current_pose: str = DEFAULT_POSE_NAME
        self.current_time: float = 0.0
        self.is_playing: bool = False
        self.loop: bool = True
        self.playback_speed: float = 1.0

    def play(self, animation_name: str, loop: bool = True):
        """
        Start playing an animation attached to the model.

        Args:
            animation_name: Name of an attached animation
            loop: Whether to wrap around after the last frame

        Raises:
            KeyError: The animation is not attached to the model
        """
        for animation in self.model.animations:
            if animation.name == animation_name:
                break
        else:
            raise KeyError(f"animation '{animation_name}' is not attached to '{self.model.name}'")

        self.current_animation = animation
        self.current_time = 0.0
        self.is_playing = True
        self.loop = loop

    def pose(self, pose_name: str = DEFAULT_POSE_NAME):
        """Stop any animation and hold a static pose."""
        self.current_animation = None
        self.current_pose = pose_name
        self.current_time = 0.0
        self.is_playing = False

    def pause(self):
        """Pause animation playback."""
        self.is_playing = False

    def resume(self):
        """Resume animation playback."""
        if self.current_animation is not None:
            self.is_playing = True

    def update(self, delta_time: float):
        """
        Advance playback.

        Args:
            delta_time: Time elapsed since last update (seconds)
        """
        if not self.is_playing or self.current_animation is None:
            return

        self.current_time += delta_time * self.playback_speed

        duration = self.current_animation.duration
        if not self.loop and duration > 0 and self.current_time >= duration:
            self.current_time = duration
            self.is_playing = False

    def current_frame(self) -> float:
        """Fractional frame number of the current animation (0 when idle)."""
        animation = self.current_animation
        if animation is None or animation.frame_count == 0:
            return 0.0

        frame = self.current_time * animation.frame_rate
        if self.loop:
            return frame % animation.frame_count
        return min(frame, animation.frame_count - 1)

    def current_matrices(self) -> Optional[np.ndarray]:
        """
        Skinning matrices to display right now.

        Returns:
            (num_bones, 4, 4) float32 array, or None for static models
        """
        if self.current_animation is None:
            return self.model.set_pose(self.current_pose)
        return self.model.set_animation_frame(self.current_animation.name, self.current_frame())

    def __repr__(self):
        anim_name = self.current_animation.name if self.current_animation else "None"
        return f"AnimationController(animation='{anim_name}', time={self.current_time:.2f}s, playing={self.is_playing})"
