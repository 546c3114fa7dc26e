from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Tuple


# ---- Archive defaults ----
ODT_MIMETYPE = "application/vnd.oasis.opendocument.text"
DEFAULT_KEPT_ENTRIES: Tuple[str, ...] = (
    "/content.xml",
    "/styles.xml",
    "/mimetype",
    "/META-INF/manifest.xml",
    "/Pictures/**",
)
DEFAULT_PICTURES_DIR = "Pictures"
# Paragraph-like elements within which formatting splits text into runs
DEFAULT_MARKER_CONTAINERS: Tuple[str, ...] = ("text:p", "text:h")


@dataclass(frozen=True)
class OdfImage:
    """
    Binary image to insert through an {#image ...} marker.

    width/height are ODF lengths ("4cm", "2in"); when omitted the frame
    is written without explicit size.
    """
    content: bytes
    file_name: str
    media_type: str
    width: Optional[str] = None
    height: Optional[str] = None

    def __repr__(self) -> str:
        return f"OdfImage({self.file_name!r}, {self.media_type!r}, {len(self.content)} bytes)"


@dataclass(frozen=True)
class FillOptions:
    # gitwildmatch patterns of archive entries copied to the output
    kept_entries: Tuple[str, ...] = DEFAULT_KEPT_ENTRIES
    pictures_dir: str = DEFAULT_PICTURES_DIR
    marker_containers: Tuple[str, ...] = DEFAULT_MARKER_CONTAINERS

    def with_extra_entries(self, patterns: Tuple[str, ...]) -> FillOptions:
        return FillOptions(
            kept_entries=self.kept_entries + tuple(p for p in patterns if p not in self.kept_entries),
            pictures_dir=self.pictures_dir,
            marker_containers=self.marker_containers,
        )


# Registers an image in the output container, returns its href
AddImage = Callable[[OdfImage], str]


class Evaluator(Protocol):
    """Anything able to evaluate a marker expression against a scope."""

    def evaluate(self, expression: str, scope: Any) -> Any:
        ...


__all__ = [
    "ODT_MIMETYPE",
    "DEFAULT_KEPT_ENTRIES",
    "DEFAULT_PICTURES_DIR",
    "DEFAULT_MARKER_CONTAINERS",
    "OdfImage",
    "FillOptions",
    "AddImage",
    "Evaluator",
]
