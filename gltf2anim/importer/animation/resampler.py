"""
Animation resampler for glTF files.

glTF stores animations as channels, each targeting one property of one
node. The output format stores one track per joint, so channels are
grouped by joint, converted by their sampler's interpolation mode, and
joints without data for a property get their bind pose as a single key.
"""

import logging
import numpy as np
from collections import defaultdict
from typing import Dict, List

from pygltflib import Animation, AnimationChannel, AnimationSampler

from .samplers import sample_linear, sample_step, sample_cubic_spline
from .track import Keyframe, JointTrack, RawAnimation
from ..common import (
    DEFAULT_SAMPLING_RATE,
    INTERPOLATION_LINEAR,
    INTERPOLATION_STEP,
    INTERPOLATION_CUBICSPLINE,
    TARGET_PATHS,
    TARGET_ROTATION,
    normalize_quaternion,
)
from ..glb import GLBParser
from ..skeleton import JointNameRegistry, RawSkeleton, create_node_transform
from ..exceptions import AnimationError, AnimationNotFoundError, AnimationValidationError

logger = logging.getLogger(__name__)

INTERPOLATIONS = (INTERPOLATION_LINEAR, INTERPOLATION_STEP, INTERPOLATION_CUBICSPLINE)


class AnimationResampler:
    """
    Converts named glTF animations into per-joint tracks.
    """

    def __init__(self, parser: GLBParser, registry: JointNameRegistry):
        """
        Initialize animation resampler.

        Args:
            parser: glTF parser instance
            registry: Joint names assigned while building the skeleton
        """
        self.parser = parser
        self.registry = registry
        self._sampling_rate_warned = False

    def resolve_sampling_rate(self, sampling_rate: float) -> float:
        """
        Resolve the requested sampling rate.

        glTF carries no frame rate, so the automatic rate (0) falls back to
        DEFAULT_SAMPLING_RATE.

        Args:
            sampling_rate: Requested rate in Hz, 0 for automatic

        Returns:
            Rate in Hz
        """
        if sampling_rate < 0:
            raise AnimationError(f"Invalid sampling rate {sampling_rate}")

        if sampling_rate == 0:
            if not self._sampling_rate_warned:
                logger.warning(
                    "The animation sampling rate is set to 0 (automatic) but glTF does not carry "
                    f"scene frame rate information. Assuming a sampling rate of {DEFAULT_SAMPLING_RATE:g}hz"
                )
                self._sampling_rate_warned = True
            return DEFAULT_SAMPLING_RATE

        return float(sampling_rate)

    def resample(self, animation_name: str, skeleton: RawSkeleton,
                 sampling_rate: float = 0.0) -> RawAnimation:
        """
        Import one animation.

        Args:
            animation_name: Name of the glTF animation
            skeleton: Skeleton built from the same file
            sampling_rate: Rate used for CUBICSPLINE channels, 0 for automatic

        Returns:
            Validated raw animation with one track per skeleton joint

        Raises:
            AnimationNotFoundError: If no animation has this name
            AnimationError: If a channel cannot be converted
            AnimationValidationError: If the result breaks animation invariants
        """
        sampling_rate = self.resolve_sampling_rate(sampling_rate)

        gltf_animation = self.parser.get_animation(animation_name)
        if gltf_animation is None:
            raise AnimationNotFoundError(
                f"Animation '{animation_name}' requested but not found in glTF"
            )

        animation = RawAnimation(name=animation_name, duration=0.0)

        joint_names = skeleton.joint_names()
        channels_per_joint = self.group_channels(gltf_animation)

        for joint_name in joint_names:
            track = JointTrack()

            for channel in channels_per_joint.get(joint_name, []):
                sampler = self._get_sampler(gltf_animation, channel)
                self.sample_channel(sampler, channel.target.path, animation, track, sampling_rate)

            self.pad_bind_pose(joint_name, track)
            animation.tracks.append(track)

        logger.info(
            f"Processed animation '{animation.name}' "
            f"(tracks: {animation.num_tracks}, duration: {animation.duration}s)"
        )

        try:
            animation.validate(len(joint_names))
        except AnimationValidationError as e:
            logger.error(f"Animation '{animation.name}' failed validation: {e}")
            raise

        return animation

    def group_channels(self, gltf_animation: Animation) -> Dict[str, List[AnimationChannel]]:
        """
        Group an animation's channels by target joint name.

        Channels without a target node, or targeting nodes outside the
        skeleton, are dropped.

        Args:
            gltf_animation: glTF animation

        Returns:
            Mapping of joint name to channels, in declaration order
        """
        channels_per_joint = defaultdict(list)

        for channel in gltf_animation.channels:
            if channel.target is None or channel.target.node is None:
                continue

            if channel.target.node not in self.registry:
                logger.debug(
                    f"Channel targets node #{channel.target.node} which is not a skeleton joint, skipping"
                )
                continue

            joint_name = self.registry.name_of(channel.target.node)
            channels_per_joint[joint_name].append(channel)

        return channels_per_joint

    def channel_duration(self, sampler: AnimationSampler, times: np.ndarray) -> float:
        """
        Duration of a channel, from the declared maximum of its input accessor.

        Args:
            sampler: glTF animation sampler
            times: Timestamps read from the input accessor

        Returns:
            Duration in seconds
        """
        accessor = self.parser.accessor_reader.get_accessor(sampler.input)

        if accessor.max:
            return float(np.float32(accessor.max[0]))

        duration = float(times[-1]) if len(times) > 0 else 0.0
        logger.warning(
            f"Input accessor {sampler.input} has no max property, using last timestamp {duration}s"
        )
        return duration

    def sample_channel(self, sampler: AnimationSampler, target_path: str,
                       animation: RawAnimation, track: JointTrack, sampling_rate: float):
        """
        Convert one channel and append its keys to a joint track.

        Args:
            sampler: Sampler backing the channel
            target_path: 'translation', 'rotation' or 'scale'
            animation: Animation whose duration is extended to cover the channel
            track: Track receiving the keys
            sampling_rate: Rate used for CUBICSPLINE channels
        """
        interpolation = sampler.interpolation or INTERPOLATION_LINEAR

        if interpolation not in INTERPOLATIONS:
            raise AnimationError(f"Invalid or unknown interpolation type '{interpolation}'")

        if target_path not in TARGET_PATHS:
            raise AnimationError(f"Invalid or unknown channel target path '{target_path}'")

        reader = self.parser.accessor_reader
        times = reader.read_typed(sampler.input, 'SCALAR')
        values = reader.read_typed(sampler.output, 'VEC4' if target_path == TARGET_ROTATION else 'VEC3')

        duration = self.channel_duration(sampler, times)
        if duration > animation.duration:
            animation.duration = duration

        if interpolation == INTERPOLATION_LINEAR:
            keyframes = sample_linear(times, values)
        elif interpolation == INTERPOLATION_STEP:
            keyframes = sample_step(times, values)
        else:
            keyframes = sample_cubic_spline(times, values, sampling_rate, duration)

            # Spline evaluation does not preserve unit length
            if target_path == TARGET_ROTATION:
                for key in keyframes:
                    key.value = normalize_quaternion(key.value)

        keys = track.keys_for(target_path)
        if keys:
            logger.warning(
                f"Animation '{animation.name}' has several {target_path} channels for the same "
                "joint, only the last one is kept"
            )
            keys.clear()
        keys.extend(keyframes)

    def pad_bind_pose(self, joint_name: str, track: JointTrack):
        """
        Give empty key sequences a single bind pose key at time 0.

        Args:
            joint_name: Joint the track belongs to
            track: Track to pad
        """
        node_idx = self.registry.node_of(joint_name)
        if node_idx is None:
            raise AnimationError(f"Joint '{joint_name}' does not match any glTF node")

        bind = create_node_transform(self.parser.get_node(node_idx), node_idx)

        if not track.translations:
            track.translations.append(Keyframe(0.0, bind.translation))
        if not track.rotations:
            track.rotations.append(Keyframe(0.0, bind.rotation))
        if not track.scales:
            track.scales.append(Keyframe(0.0, bind.scale))

    def _get_sampler(self, gltf_animation: Animation, channel: AnimationChannel) -> AnimationSampler:
        if channel.sampler is None or not 0 <= channel.sampler < len(gltf_animation.samplers):
            raise AnimationError(
                f"Channel of animation '{gltf_animation.name}' references missing sampler {channel.sampler}"
            )
        return gltf_animation.samplers[channel.sampler]
