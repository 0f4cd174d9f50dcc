"""Project-specific exception types."""


class FBXSDKNotAvailableError(ImportError):
    """Raised when the Autodesk FBX SDK Python bindings are missing."""


class FBXLoadError(RuntimeError):
    """Raised when the SDK importer rejects a file."""


class FBXSaveError(RuntimeError):
    """Raised when the SDK exporter fails to write a scene."""


class FBXAllocationError(RuntimeError):
    """Raised when an SDK manager or scene container cannot be created."""


class BakeError(RuntimeError):
    """Raised when an animation stack cannot be resampled."""


class MalformedInputError(ValueError):
    """A scene term field is wrongly shaped or sized."""


class ArityError(MalformedInputError):
    """A flat numeric sequence does not split into groups of the expected size."""


class UnresolvedReferenceError(MalformedInputError):
    """A foreign key names an entity that does not exist (strict mode only)."""
