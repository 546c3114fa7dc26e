"""
Template marker vocabulary.

Markers are curly-brace tokens written in the document text:

    {expr}                      variable
    {#each iterable as item}    loop open
    {/each}                     loop close
    {#if condition}             conditional open
    {:else}                     conditional else
    {/if}                       conditional close
    {#image expr}               image

Patterns are compiled once and used through re.match/finditer only, which
keep no state between calls, so they are safe to share across nodes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class MarkerKind(Enum):
    VARIABLE = "variable"
    EACH_OPEN = "each-open"
    EACH_CLOSE = "each-close"
    IF_OPEN = "if-open"
    ELSE = "else"
    IF_CLOSE = "if-close"
    IMAGE = "image"


EACH_OPEN_RE = re.compile(r"\{#each\s+([^}]+?)\s+as\s+([^}]+?)\s*\}")
EACH_CLOSE = "{/each}"
IF_OPEN_RE = re.compile(r"\{#if\s+([^}]+?)\s*\}")
ELSE = "{:else}"
IF_CLOSE = "{/if}"
IMAGE_RE = re.compile(r"\{#image\s+([^}]+?)\s*\}")
# any {...} not starting with #, / or : and holding a non-blank expression
VARIABLE_RE = re.compile(r"\{(?![#/:])([^{}]*[^{}\s][^{}]*)\}")

BLOCK_KINDS = frozenset({
    MarkerKind.EACH_OPEN,
    MarkerKind.EACH_CLOSE,
    MarkerKind.IF_OPEN,
    MarkerKind.ELSE,
    MarkerKind.IF_CLOSE,
})

_PATTERNS = (
    (MarkerKind.EACH_OPEN, EACH_OPEN_RE),
    (MarkerKind.EACH_CLOSE, re.compile(re.escape(EACH_CLOSE))),
    (MarkerKind.IF_OPEN, IF_OPEN_RE),
    (MarkerKind.ELSE, re.compile(re.escape(ELSE))),
    (MarkerKind.IF_CLOSE, re.compile(re.escape(IF_CLOSE))),
    (MarkerKind.IMAGE, IMAGE_RE),
    (MarkerKind.VARIABLE, VARIABLE_RE),
)


@dataclass(frozen=True)
class Marker:
    """
    Marker located in a string.

    Attributes:
        kind: Marker kind
        text: Exact matched text
        start: Offset of the first character
        end: Offset after the last character
        expression: Evaluated expression (iterable for each, condition for if)
        item_name: Loop variable name, for each-open only
    """
    kind: MarkerKind
    text: str
    start: int
    end: int
    expression: Optional[str] = None
    item_name: Optional[str] = None

    @property
    def is_block(self) -> bool:
        return self.kind in BLOCK_KINDS


def _make_marker(kind: MarkerKind, match: re.Match) -> Marker:
    expression = None
    item_name = None
    if kind == MarkerKind.EACH_OPEN:
        expression, item_name = match.group(1).strip(), match.group(2).strip()
    elif kind in (MarkerKind.IF_OPEN, MarkerKind.IMAGE, MarkerKind.VARIABLE):
        expression = match.group(1).strip()
    return Marker(
        kind=kind,
        text=match.group(0),
        start=match.start(),
        end=match.end(),
        expression=expression,
        item_name=item_name,
    )


def find_markers(text: str) -> List[Marker]:
    """All markers in text, ordered by offset, never overlapping."""
    found: List[Marker] = []
    for kind, pattern in _PATTERNS:
        for match in pattern.finditer(text):
            found.append(_make_marker(kind, match))

    # earliest first, longest first on ties
    found.sort(key=lambda m: (m.start, -(m.end - m.start)))

    markers: List[Marker] = []
    last_end = 0
    for marker in found:
        if marker.start >= last_end:
            markers.append(marker)
            last_end = marker.end
    return markers


def find_first_marker(text: str) -> Optional[Marker]:
    markers = find_markers(text)
    return markers[0] if markers else None


def parse_marker(text: str) -> Optional[Marker]:
    """Marker occupying the whole text, if any."""
    for kind, pattern in _PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            return _make_marker(kind, match)
    return None


__all__ = [
    "MarkerKind",
    "Marker",
    "BLOCK_KINDS",
    "EACH_OPEN_RE",
    "EACH_CLOSE",
    "IF_OPEN_RE",
    "ELSE",
    "IF_CLOSE",
    "IMAGE_RE",
    "VARIABLE_RE",
    "find_markers",
    "find_first_marker",
    "parse_marker",
]
