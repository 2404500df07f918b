"""
id Tech 4 Animation Loader

Imports frame-sampled skeletal animations from .md5anim files.

Every frame line holds a bone transform relative to its parent; frames
are converted to model space while parsing, in a single forward pass
over the hierarchy.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import numpy as np

from ..animation.animation import Animation
from ..animation.pose import Pose
from ..animation.skeleton import Skeleton
from ..animation.transforms import compute_w
from ..config.settings import IDTECH4_VERSION
from ..errors import MalformedCountError, MalformedLineError, UnsupportedVersionError
from .base import AssetImporter, TokenLine

logger = logging.getLogger(__name__)


VERSION_FLAG = "MD5Version"
FRAME_COUNT_FLAG = "numFrames"
BONE_COUNT_FLAG = "numJoints"
FRAME_RATE_FLAG = "frameRate"
ANIMATED_COMPONENTS_FLAG = "numAnimatedComponents"

HIERARCHY_BLOCK_FLAG = "hierarchy"
BOUNDS_BLOCK_FLAG = "bounds"
BASE_FRAME_BLOCK_FLAG = "baseframe"
FRAME_BLOCK_FLAG = "frame"
BLOCK_END_FLAG = "}"


class ParseState(Enum):
    HEADER = "header"
    HIERARCHY = "hierarchy"
    BOUNDS = "bounds"
    BASE_FRAME = "baseframe"
    FRAME = "frame"


class IdTech4AnimationLoader(AssetImporter):
    """
    Streaming parser for .md5anim files.

    Produces one Animation named after the file stem whose frames are
    named "<stem>.<index>".
    """

    asset_type = Animation
    file_extensions = (".md5anim",)

    def parse(self, path: Path, registry) -> None:
        name = path.stem

        state = ParseState.HEADER
        declared_frames = 0
        frame_rate = 0

        skeleton: Optional[Skeleton] = None
        base_frame: Optional[Skeleton] = None
        frames: List[Pose] = []
        frame: Optional[Pose] = None
        frame_bone = 0

        for line in self.read_lines(path):
            keyword = line.keyword

            if state == ParseState.HIERARCHY:
                if keyword == BLOCK_END_FLAG:
                    if len(skeleton) != skeleton.bone_count:
                        raise MalformedCountError(
                            f"expected {skeleton.bone_count} joints, found {len(skeleton)}"
                        )
                    state = ParseState.HEADER
                else:
                    # "name" parent flags startIndex
                    skeleton.add_bone(line.as_text(0), line.as_int(1))

            elif state == ParseState.BOUNDS:
                if keyword == BLOCK_END_FLAG:
                    state = ParseState.HEADER

            elif state == ParseState.BASE_FRAME:
                if keyword == BLOCK_END_FLAG:
                    if len(base_frame) != len(skeleton):
                        raise MalformedCountError(
                            f"base frame holds {len(base_frame)} joints, expected {len(skeleton)}"
                        )
                    state = ParseState.HEADER
                else:
                    # ( px py pz ) ( rx ry rz )
                    index = len(base_frame)
                    if index >= len(skeleton):
                        raise MalformedCountError(
                            f"base frame has more entries than the {len(skeleton)} joints in the hierarchy"
                        )
                    bone = skeleton.bones[index]
                    base_frame.add_bone(bone.name, bone.parent_index)

            elif state == ParseState.FRAME:
                if keyword == BLOCK_END_FLAG:
                    if frame_bone != len(skeleton):
                        raise MalformedCountError(
                            f"frame '{frame.name}' holds {frame_bone} joints, expected {len(skeleton)}"
                        )
                    state = ParseState.HEADER
                else:
                    if frame_bone >= len(skeleton):
                        raise MalformedCountError(
                            f"frame '{frame.name}' holds more than {len(skeleton)} joints"
                        )
                    self._parse_frame_bone(line, skeleton, frame, frame_bone)
                    frame_bone += 1

            elif keyword == VERSION_FLAG:
                version = line.as_int(1)
                if version != IDTECH4_VERSION:
                    raise UnsupportedVersionError(
                        f"MD5Version {version} is not supported (expected {IDTECH4_VERSION})"
                    )

            elif keyword == FRAME_COUNT_FLAG:
                declared_frames = line.as_int(1)

            elif keyword == BONE_COUNT_FLAG:
                bone_count = line.as_int(1)
                skeleton = Skeleton(bone_count, name)
                base_frame = Skeleton(bone_count, f"{name}.base")

            elif keyword == FRAME_RATE_FLAG:
                frame_rate = line.as_int(1)

            elif keyword == ANIMATED_COMPONENTS_FLAG:
                pass

            elif keyword == BOUNDS_BLOCK_FLAG:
                state = ParseState.BOUNDS

            elif keyword in (HIERARCHY_BLOCK_FLAG, BASE_FRAME_BLOCK_FLAG, FRAME_BLOCK_FLAG):
                if skeleton is None:
                    raise line.error(f"'{keyword}' block before '{BONE_COUNT_FLAG}'")

                if keyword == HIERARCHY_BLOCK_FLAG:
                    state = ParseState.HIERARCHY
                elif keyword == BASE_FRAME_BLOCK_FLAG:
                    state = ParseState.BASE_FRAME
                else:
                    frame = Pose(skeleton.bone_count, f"{name}.{len(frames)}", path.name)
                    frames.append(frame)
                    frame_bone = 0
                    state = ParseState.FRAME

        if state != ParseState.HEADER:
            raise MalformedLineError(f"unterminated '{state.value}' block at end of file")

        if len(frames) != declared_frames:
            raise MalformedCountError(
                f"animation '{name}' declares {declared_frames} frames, found {len(frames)}"
            )

        animation = Animation(name, path.name, frame_rate, frames)
        registry.register(animation)
        logger.info(f"Imported {animation.name}: {animation.frame_count} frames @ {frame_rate} fps")

    def _parse_frame_bone(self, line: TokenLine, skeleton: Skeleton, frame: Pose, bone_index: int):
        """px py pz rx ry rz, converted to model space through the parent."""
        values = line.as_floats(0, 6)
        frame.set(bone_index, np.array(values[:3]), compute_w(*values[3:]))

        parent_index = skeleton.bones[bone_index].parent_index
        if parent_index is not None:
            local = frame[bone_index].astype('f8')
            parent = frame[parent_index].astype('f8')
            frame[bone_index] = local @ parent
