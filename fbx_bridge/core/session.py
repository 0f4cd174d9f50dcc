"""FBX manager/scene lifetime and inspector orchestration."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Protocol, Union

from ..config import BridgeConfig
from . import sdk
from .identifiers import IdentifierRegistry

logger = logging.getLogger(__name__)

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


class SceneInspector(Protocol):
    """Protocol defining how inspectors gather data from an FBX scene."""

    id: str

    def collect(self, context: "SceneContext") -> Any:
        """Return extracted information from the scene."""


@dataclass
class SceneContext:
    """Holds the FBX manager, scene, id tables and settings for one extraction."""

    path: Optional[str]
    manager: Any
    scene: Any
    root_node: Any
    version_code: int
    identifiers: IdentifierRegistry
    config: BridgeConfig


class FBXSession(contextlib.AbstractContextManager["FBXSession"]):
    """Owns one FBX manager and its scene for the duration of a single call.

    Closing the session destroys the manager, which releases the scene and
    every object created in it.
    """

    def __init__(self, config: Optional[BridgeConfig] = None) -> None:
        self.config = config or BridgeConfig()
        self._path: Optional[str] = None
        self._manager: Optional[Any] = None
        self._scene: Optional[Any] = None
        self._version_code = 0

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def manager(self) -> Any:
        if self._manager is None:
            raise RuntimeError("Session not open. Call open() before accessing the manager.")
        return self._manager

    @property
    def scene(self) -> Any:
        if self._scene is None:
            raise RuntimeError("Session not open. Call open() before accessing the scene.")
        return self._scene

    @property
    def version_code(self) -> int:
        return self._version_code

    @property
    def context(self) -> SceneContext:
        scene = self.scene
        return SceneContext(
            path=self._path,
            manager=self._manager,
            scene=scene,
            root_node=scene.GetRootNode(),
            version_code=self._version_code,
            identifiers=IdentifierRegistry.index_scene(scene),
            config=self.config,
        )

    def open(self) -> "FBXSession":
        if self._manager is not None:
            return self

        manager = sdk.create_manager()
        try:
            sdk.create_io_settings(manager)
            scene = sdk.create_scene(manager)
        except Exception:
            sdk.destroy_manager(manager)
            raise

        self._manager = manager
        self._scene = scene
        return self

    def load(self, path: PathLike) -> "FBXSession":
        """Import the FBX file at ``path`` into this session's scene."""

        self.open()
        self._path = os.fsdecode(path)
        self._version_code = sdk.load_scene(self._manager, self._scene, self._path)
        logger.debug("Loaded '%s' (version code %d)", self._path, self._version_code)
        return self

    def load_bytes(self, data: bytes) -> "FBXSession":
        """Import an in-memory FBX document.

        The SDK importer only reads from files, so the bytes are staged in a
        temporary file that is removed before returning.
        """

        handle = tempfile.NamedTemporaryFile(suffix=".fbx", delete=False)
        try:
            with handle:
                handle.write(bytes(data))
            self.load(handle.name)
        finally:
            os.unlink(handle.name)
        self._path = None
        return self

    def save(self, path: PathLike, save_format: sdk.SaveFormat = sdk.SaveFormat.BINARY) -> str:
        """Export this session's scene to ``path`` and return the path written."""

        destination = os.fsdecode(path)
        sdk.save_scene(
            self.manager,
            self.scene,
            destination,
            save_format=save_format,
            version=self.config.export_version,
        )
        logger.debug("Saved '%s' (%s, %s)", destination, save_format.value, self.config.export_version)
        return destination

    def close(self) -> None:
        if self._manager is not None:
            sdk.destroy_manager(self._manager)
            self._manager = None
            self._scene = None

    def __enter__(self) -> "FBXSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None

    def run(self, inspectors: Iterable[SceneInspector]) -> Dict[str, Any]:
        """Execute inspectors against one shared context and return their results."""

        results: Dict[str, Any] = {}
        ctx = self.context
        for inspector in inspectors:
            results[inspector.id] = inspector.collect(ctx)
        return results
