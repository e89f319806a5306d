"""
Exception types for blueprint parsing and configuration.

Every structural problem found while reading a document raises a subclass of
BlueprintError. The `path` attribute points at the offending value using a
dotted/indexed notation, e.g. ``blueprint.entities[2].tags``.
"""

from typing import Optional


class BlueprintError(ValueError):
    """Base class for all document parsing errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path or ""
        super().__init__(f"{self.path}: {message}" if self.path else message)


class InvalidKeyError(BlueprintError):
    """IndexedVec key is not a positive integer."""


class DuplicateKeyError(BlueprintError):
    """Explicit insert collides with an existing IndexedVec key."""


class ShapeMismatchError(BlueprintError):
    """A value has a different JSON shape than the schema expects."""


class MissingFieldError(ShapeMismatchError):
    """A required field is absent."""


class InvalidVersionError(ShapeMismatchError):
    """A version string is not in X.Y.Z form."""


class UnknownFieldError(BlueprintError):
    """Strict parsing found a field that is not part of the schema."""


class ConfigError(Exception):
    """The settings store cannot be opened or holds unusable values."""
