"""Autodesk FBX SDK helpers."""

from __future__ import annotations

import enum
import logging
from typing import Any, Union

from ..config import DEFAULT_EXPORT_VERSION
from ..utils import resolve_enum_value
from .exceptions import FBXAllocationError, FBXLoadError, FBXSaveError, FBXSDKNotAvailableError

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 255


class SaveFormat(str, enum.Enum):
    """Writer encodings supported by :func:`save_scene`."""

    BINARY = "binary"
    ASCII = "ascii"

    @classmethod
    def parse(cls, token: Union["SaveFormat", str, bytes, None]) -> "SaveFormat":
        """Map a format token to a member; anything unrecognised is binary."""

        if isinstance(token, cls):
            return token
        if isinstance(token, bytes):
            token = token.decode("latin-1")
        if isinstance(token, str) and token.strip().lower() == cls.ASCII.value:
            return cls.ASCII
        return cls.BINARY


def import_fbx_module():
    """Import the Autodesk FBX SDK Python module.

    Encapsulates the import so code can provide a helpful error when it is
    missing instead of failing at module import time.
    """

    try:
        import fbx  # type: ignore
        import FbxCommon  # type: ignore
    except ImportError as exc:  # pragma: no cover - dependent on external SDK
        raise FBXSDKNotAvailableError(
            "Autodesk FBX SDK Python bindings are not available. "
            "Install the SDK and ensure the 'fbx' and 'FbxCommon' modules are on PYTHONPATH."
        ) from exc

    return fbx, FbxCommon


def create_manager():
    """Create and return an `fbx.FbxManager` instance."""

    fbx, _ = import_fbx_module()
    manager = fbx.FbxManager.Create()
    if manager is None:
        raise FBXAllocationError("Failed to create FBX manager")
    return manager


def create_io_settings(manager):
    """Create default IO settings for the provided manager."""

    fbx, _ = import_fbx_module()
    ios = fbx.FbxIOSettings.Create(manager, fbx.IOSROOT)
    manager.SetIOSettings(ios)
    return ios


def create_scene(manager, name: str = "Scene"):
    """Create a new scene using the provided manager."""

    fbx, _ = import_fbx_module()
    scene = fbx.FbxScene.Create(manager, name)
    if scene is None:
        raise FBXAllocationError("Failed to create FBX scene")
    return scene


def destroy_manager(manager):
    """Destroy the manager and free SDK resources."""

    manager.Destroy()


def load_scene(manager, scene, path: str) -> int:
    """Load an FBX file located at `path` into `scene`.

    Returns the file's version code (``7400`` for FBX 7.4). The importer's
    own diagnostic is raised verbatim as :class:`FBXLoadError`.
    """

    fbx, _ = import_fbx_module()
    importer = fbx.FbxImporter.Create(manager, "")
    try:
        if not importer.Initialize(path, -1, manager.GetIOSettings()):
            raise FBXLoadError(_status_message(importer, f"Failed to open FBX file '{path}'"))
        if not importer.Import(scene):
            raise FBXLoadError(_status_message(importer, f"Failed to import FBX scene from '{path}'"))
        major, minor, revision = importer.GetFileVersion()
        return int(major) * 1000 + int(minor) * 100 + int(revision)
    finally:
        importer.Destroy()


def resolve_writer_format(manager, save_format: SaveFormat) -> int:
    """Return the writer plug-in index for ``save_format``."""

    registry = manager.GetIOPluginRegistry()
    if save_format is SaveFormat.ASCII:
        for index in range(registry.GetWriterFormatCount()):
            if not registry.WriterIsFBX(index):
                continue
            description = str(registry.GetWriterFormatDescription(index))
            if "ascii" in description.lower():
                return index
        logger.debug("No ASCII FBX writer registered; falling back to the native writer")
    return registry.GetNativeWriterFormat()


def save_scene(
    manager,
    scene,
    path: str,
    save_format: SaveFormat = SaveFormat.BINARY,
    version: str = DEFAULT_EXPORT_VERSION,
) -> None:
    """Save the provided FBX scene to ``path``."""

    fbx, _ = import_fbx_module()
    exporter = fbx.FbxExporter.Create(manager, "")
    try:
        file_format = resolve_writer_format(manager, save_format)
        if not exporter.Initialize(path, file_format, manager.GetIOSettings()):
            raise FBXSaveError(_save_error_message(exporter))
        exporter.SetFileExportVersion(version, _renamer_mode(fbx))
        if not exporter.Export(scene):
            raise FBXSaveError(_save_error_message(exporter))
    finally:
        exporter.Destroy()


def _renamer_mode(fbx_module) -> Any:
    return resolve_enum_value(fbx_module.FbxSceneRenamer, "eNone")


def _status_message(io_object, fallback: str) -> str:
    status = io_object.GetStatus()
    message = str(status.GetErrorString()) if status is not None else ""
    return message or fallback


def _save_error_message(exporter) -> str:
    message = f"Failed to save FBX: {_status_message(exporter, 'unknown error')}"
    return message[:MAX_ERROR_LENGTH]
