"""Resample animated node transforms into fixed-rate keyframes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from ..config import DEFAULT_SAMPLE_RATE
from ..utils import Vector3, Vector4, vector_to_tuple
from . import sdk, traversal
from .exceptions import BakeError
from .identifiers import IdentifierTable

logger = logging.getLogger(__name__)

# Tolerance, in seconds, when deciding whether the stop time needs its own sample.
_TIME_EPSILON = 1e-9


@dataclass
class BakedNode:
    node_id: int
    translation_keys: List[Tuple[float, Vector3]] = field(default_factory=list)
    rotation_keys: List[Tuple[float, Vector4]] = field(default_factory=list)
    scale_keys: List[Tuple[float, Vector3]] = field(default_factory=list)


@dataclass
class BakedAnimation:
    start: float
    stop: float
    nodes: List[BakedNode] = field(default_factory=list)


@dataclass(frozen=True)
class AnimatedChannels:
    translation: bool = False
    rotation: bool = False
    scale: bool = False

    def __bool__(self) -> bool:
        return self.translation or self.rotation or self.scale


class AnimationBaker:
    """Sample every animated node of an animation stack at a fixed rate."""

    def __init__(self, scene, sample_rate: float = DEFAULT_SAMPLE_RATE) -> None:
        self.scene = scene
        self.sample_rate = float(sample_rate)

    def sample_times(self, start: float, stop: float) -> List[float]:
        """Return uniformly spaced sample times covering ``[start, stop]``.

        The stop time is always the final sample even when the span is not a
        whole number of sample intervals.
        """

        if not self.sample_rate > 0 or not math.isfinite(self.sample_rate):
            raise BakeError(f"Sample rate must be positive, got {self.sample_rate}")
        if not stop > start:
            raise BakeError(f"Degenerate animation range [{start}, {stop}]")

        steps = int(math.floor((stop - start) * self.sample_rate + _TIME_EPSILON))
        times = [start + step / self.sample_rate for step in range(steps + 1)]
        if stop - times[-1] > _TIME_EPSILON:
            times.append(stop)
        else:
            times[-1] = stop
        return times

    def bake(self, stack, nodes: IdentifierTable) -> BakedAnimation:
        fbx, _ = sdk.import_fbx_module()

        span = stack.GetLocalTimeSpan()
        start = span.GetStart().GetSecondDouble()
        stop = span.GetStop().GetSecondDouble()
        times = self.sample_times(start, stop)

        layers = list(traversal.iter_anim_layers(stack))
        self.scene.SetCurrentAnimationStack(stack)

        baked = BakedAnimation(start=start, stop=stop)
        for node_id, node in nodes:
            channels = animated_channels(node, layers)
            if not channels:
                continue
            baked.nodes.append(self._sample_node(fbx, node_id, node, channels, times))

        logger.debug(
            "Baked stack '%s': %d node(s), %d sample(s) over [%g, %g]",
            stack.GetName(),
            len(baked.nodes),
            len(times),
            start,
            stop,
        )
        return baked

    def _sample_node(self, fbx_module, node_id: int, node, channels: AnimatedChannels, times: List[float]) -> BakedNode:
        baked_node = BakedNode(node_id=node_id)
        for seconds in times:
            time = fbx_module.FbxTime()
            time.SetSecondDouble(seconds)
            matrix = node.EvaluateLocalTransform(time)
            if channels.translation:
                baked_node.translation_keys.append((seconds, vector_to_tuple(matrix.GetT(), 3)))
            if channels.rotation:
                baked_node.rotation_keys.append((seconds, vector_to_tuple(matrix.GetQ(), 4)))
            if channels.scale:
                baked_node.scale_keys.append((seconds, vector_to_tuple(matrix.GetS(), 3)))
        return baked_node


def animated_channels(node, layers) -> AnimatedChannels:
    """Report which local transform properties of ``node`` carry curves on ``layers``."""

    def has_curves(prop) -> bool:
        return any(prop.GetCurveNode(layer) is not None for layer in layers)

    return AnimatedChannels(
        translation=has_curves(node.LclTranslation),
        rotation=has_curves(node.LclRotation),
        scale=has_curves(node.LclScaling),
    )
