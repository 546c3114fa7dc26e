"""
Exceptions raised while filling ODT templates.

All expected errors that should be displayed to the user
as clean messages (without stack traces) inherit from OdtFillUserError.

Programming errors and broken invariants (MarkerInvariantError) do NOT
inherit from OdtFillUserError; they propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class OdtFillUserError(Exception):
    """
    Base class for all user-facing errors of odtfill.

    These errors indicate problems the template author or the caller
    can fix: unbalanced markers, bad expressions, malformed containers,
    invalid configuration or data files.
    """
    pass


@dataclass
class TemplateStructureError(OdtFillUserError):
    """Block markers are unbalanced or nested incorrectly."""
    marker: str
    message: str

    def __str__(self) -> str:
        return f"Invalid template structure at '{self.marker}': {self.message}"


@dataclass
class TemplateEvaluationError(OdtFillUserError):
    """The evaluator failed on a marker expression."""
    expression: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        reason = f": {self.cause}" if self.cause is not None else ""
        return f"Failed to evaluate '{self.expression}'{reason}"


@dataclass
class ImageValueError(OdtFillUserError):
    """{#image} marker cannot be turned into an image."""
    expression: str
    value_type: str
    reason: Optional[str] = None

    def __str__(self) -> str:
        if self.reason:
            return f"Cannot insert image '{self.expression}': {self.reason}"
        return f"Expression '{self.expression}' in {{#image}} produced {self.value_type}, expected an image"


@dataclass
class MissingEntryError(OdtFillUserError):
    """Required archive entry is absent from the template."""
    entry: str

    def __str__(self) -> str:
        return f"'{self.entry}' zip entry missing"


class PackageError(OdtFillUserError):
    """Bytes given as an ODT are not a zip container."""
    pass


class ManifestError(OdtFillUserError):
    """META-INF/manifest.xml is malformed."""
    pass


class ConfigError(OdtFillUserError):
    """Options file is malformed."""
    pass


class DataFileError(OdtFillUserError):
    """Data file cannot be used as a fill scope."""
    pass


class MarkerInvariantError(RuntimeError):
    """
    Consolidation or isolation found the tree in a state that cannot happen
    for a well-formed document (a located marker has no owning text node).
    """
    pass


__all__ = [
    "OdtFillUserError",
    "TemplateStructureError",
    "TemplateEvaluationError",
    "ImageValueError",
    "MissingEntryError",
    "PackageError",
    "ManifestError",
    "ConfigError",
    "DataFileError",
    "MarkerInvariantError",
]
