"""Baked animation inspector."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core.baking import AnimationBaker, BakedAnimation
from ..core.exceptions import BakeError
from ..core.session import SceneContext, SceneInspector
from ..models import Animation, Keyframe

logger = logging.getLogger(__name__)


class AnimationInspector(SceneInspector):
    """Bake every animation stack into keyframes at a fixed sample rate.

    ``sample_rate`` overrides the rate from the context's config.
    """

    id = "animations"

    def __init__(self, sample_rate: Optional[float] = None) -> None:
        self.sample_rate = sample_rate

    def collect(self, context: SceneContext) -> List[Animation]:
        rate = self.sample_rate if self.sample_rate is not None else context.config.sample_rate
        baker = AnimationBaker(context.scene, rate)

        animations = []
        for stack_id, stack in context.identifiers.animations:
            name = stack.GetName() or ""
            try:
                baked = baker.bake(stack, context.identifiers.nodes)
            except BakeError as exc:
                logger.warning("Dropping animation stack '%s': %s", name, exc)
                continue
            animations.append(Animation(id=stack_id, name=name, keyframes=baked_keyframes(baked)))
        return animations


def baked_keyframes(baked: BakedAnimation) -> List[Keyframe]:
    """Flatten a bake into keyframes: per node, translation then rotation then scale."""

    keyframes: List[Keyframe] = []
    for baked_node in baked.nodes:
        for channel, keys in (
            ("translation", baked_node.translation_keys),
            ("rotation", baked_node.rotation_keys),
            ("scale", baked_node.scale_keys),
        ):
            keyframes.extend(
                Keyframe(node_id=baked_node.node_id, time=time, channel=channel, value=value)
                for time, value in keys
            )
    return keyframes
