"""Core FBX session management and scene marshaling utilities."""

from .exceptions import (
    ArityError,
    BakeError,
    FBXAllocationError,
    FBXLoadError,
    FBXSaveError,
    FBXSDKNotAvailableError,
    MalformedInputError,
    UnresolvedReferenceError,
)
from .session import FBXSession, SceneContext, SceneInspector

__all__ = [
    "ArityError",
    "BakeError",
    "FBXAllocationError",
    "FBXLoadError",
    "FBXSaveError",
    "FBXSDKNotAvailableError",
    "FBXSession",
    "MalformedInputError",
    "SceneContext",
    "SceneInspector",
    "UnresolvedReferenceError",
]
