"""Public load/write operations.

Every call owns one :class:`~fbx_bridge.core.session.FBXSession` and converts
the package's failure exceptions into ``("error", reason)`` outcomes, so none
of them escape to the caller.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from . import result
from .config import BridgeConfig
from .core.builder import SceneBuilder
from .core.exceptions import (
    FBXAllocationError,
    FBXLoadError,
    FBXSaveError,
    FBXSDKNotAvailableError,
    UnresolvedReferenceError,
)
from .core.sdk import SaveFormat
from .core.session import FBXSession, PathLike
from .inspectors import AnimationInspector, MaterialInspector, MeshInspector, NodeInspector, TextureInspector
from .models import Scene
from .utils import format_version

logger = logging.getLogger(__name__)

FormatToken = Union[SaveFormat, str, bytes, None]

_BOUNDARY_ERRORS = (
    FBXSDKNotAvailableError,
    FBXLoadError,
    FBXSaveError,
    FBXAllocationError,
    UnresolvedReferenceError,
)


def _as_location(path: Any) -> Optional[str]:
    try:
        return os.fsdecode(path)
    except TypeError:
        return None


def extract_scene(session: FBXSession, sample_rate: Optional[float] = None) -> Scene:
    """Run the extraction inspectors over a loaded session."""

    inspectors = [
        NodeInspector(),
        MeshInspector(),
        MaterialInspector(),
        TextureInspector(),
        AnimationInspector(sample_rate),
    ]
    results = session.run(inspectors)
    return Scene(
        version=format_version(session.version_code),
        nodes=results["nodes"],
        meshes=results["meshes"],
        materials=results["materials"],
        textures=results["textures"],
        animations=results["animations"],
    )


def load_fbx(path: PathLike, config: Optional[BridgeConfig] = None) -> result.Outcome:
    """Load the FBX file at ``path`` and return its scene term."""

    location = _as_location(path)
    if location is None:
        return result.error(f"Invalid path: {path!r}")

    try:
        with FBXSession(config) as session:
            session.load(location)
            scene = extract_scene(session)
    except _BOUNDARY_ERRORS as exc:
        logger.debug("Load of %r failed: %s", path, exc)
        return result.error(str(exc))

    logger.info("Loaded %s: %s", location, scene.counts)
    return result.ok(scene.to_term())


def load_fbx_binary(data: bytes, config: Optional[BridgeConfig] = None) -> result.Outcome:
    """Load an in-memory FBX document and return its scene term."""

    try:
        with FBXSession(config) as session:
            session.load_bytes(data)
            scene = extract_scene(session)
    except _BOUNDARY_ERRORS as exc:
        logger.debug("Load of %d byte(s) failed: %s", len(data), exc)
        return result.error(str(exc))

    logger.info("Loaded %d byte(s): %s", len(data), scene.counts)
    return result.ok(scene.to_term())


def write_fbx(
    path: PathLike,
    term: Any,
    format: FormatToken = SaveFormat.BINARY,
    config: Optional[BridgeConfig] = None,
) -> result.Outcome:
    """Build a scene from ``term`` and save it to ``path``.

    ``format`` is ``"binary"`` or ``"ascii"``; any other token writes binary.
    Malformed parts of ``term`` are dropped rather than reported unless
    ``config.strict_references`` is set.
    """

    location = _as_location(path)
    if location is None:
        return result.error(f"Invalid path: {path!r}")

    config = config or BridgeConfig()
    save_format = SaveFormat.parse(format)
    document = Scene.from_term(term)

    try:
        with FBXSession(config) as session:
            SceneBuilder(session.scene, strict_references=config.strict_references).build(document)
            destination = session.save(location, save_format)
    except _BOUNDARY_ERRORS as exc:
        logger.debug("Write to %r failed: %s", path, exc)
        return result.error(str(exc))

    logger.info("Saved %s (%s): %s", destination, save_format.value, document.counts)
    return result.ok(path)


def write_fbx_binary(
    term: Any,
    format: FormatToken = SaveFormat.BINARY,
    config: Optional[BridgeConfig] = None,
) -> result.Outcome:
    """Like :func:`write_fbx` but return the encoded document as ``bytes``."""

    handle = tempfile.NamedTemporaryFile(suffix=".fbx", delete=False)
    handle.close()
    staging = Path(handle.name)
    try:
        outcome = write_fbx(staging, term, format=format, config=config)
        if not outcome.is_ok:
            return outcome
        return result.ok(staging.read_bytes())
    finally:
        staging.unlink()
