"""Exception types raised while patching scaffolded projects."""
from typing import Optional


class OcpInitError(Exception):
    """Base class for all ocpinit failures."""


class SubstitutionError(OcpInitError):
    """Raised when image/version substitution fails for a file."""

    action = "processing"

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"error {self.action} file for substitution: {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ReadError(SubstitutionError):
    """Raised when a substitution target cannot be read."""

    action = "reading"


class StatError(SubstitutionError):
    """Raised when a substitution target's mode bits cannot be read."""

    action = "reading info for"


class WriteError(SubstitutionError):
    """Raised when a substituted file cannot be written back."""

    action = "writing"


class MarkerPersistError(OcpInitError):
    """Raised when the plugin marker cannot be stored in the project config."""

    def __init__(self, key: str, cause: Optional[BaseException] = None):
        self.key = key
        self.cause = cause
        super().__init__(f"error writing plugin config for {key}: {cause}")


class ProjectConfigError(OcpInitError):
    """Raised when the project configuration document is invalid or unusable."""


class UnsupportedFieldError(ProjectConfigError):
    """Raised when the project config version has no room for a field.

    Callers that treat a missing feature as success catch this type
    explicitly rather than inspecting messages.
    """

    def __init__(self, version: str, field: str):
        self.version = version
        self.field = field
        super().__init__(f"project version {version} does not support the {field!r} field")


class PluginKeyNotFoundError(ProjectConfigError):
    """Raised when no config is stored for a plugin key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"no plugin config found for {key}")
