from __future__ import annotations

from typing import Sequence

from ..types import DEFAULT_MARKER_CONTAINERS
from .consolidate import consolidate_markers
from .isolate import isolate_markers


def prepare_template_tree(document, containers: Sequence[str] = DEFAULT_MARKER_CONTAINERS) -> None:
    """
    Puts every marker of the document into a text node of its own.

    Markers that formatting split across several runs are merged first
    (consolidation), then text nodes mixing markers with literal text are
    split (isolation). The filler relies on this property: a text node is
    either a whole marker or plain text.
    """
    consolidate_markers(document, containers)
    isolate_markers(document)


__all__ = ["prepare_template_tree"]
