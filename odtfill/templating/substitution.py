"""
Variable and image substitution in text nodes and attributes.
"""

from __future__ import annotations

from typing import Any, List, Union

from xml.dom import Node

from ..errors import ImageValueError
from ..odf.images import make_image_frame
from ..types import OdfImage
from .markers import MarkerKind, find_markers

_TEXT_MARKERS = (MarkerKind.VARIABLE, MarkerKind.IMAGE)


def render_value(value: Any) -> str:
    """
    Text rendering of an evaluated value.

    None renders as nothing, booleans as true/false, integral floats
    without their fractional part.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def substitute_text(filler, node: Node, scope) -> bool:
    """
    Replaces the variable and image markers of a text node.

    The node is replaced by fresh nodes (text, image frames) which are
    recorded as rendered by the filler.

    Returns:
        True when the node held markers and has been replaced
    """
    text = node.data
    markers = [m for m in find_markers(text) if m.kind in _TEXT_MARKERS]
    if not markers:
        return False

    document = node.ownerDocument
    pieces: List[Union[str, Node]] = []
    position = 0
    for marker in markers:
        pieces.append(text[position:marker.start])
        value = filler.evaluate(marker.expression, scope)
        if marker.kind == MarkerKind.IMAGE:
            frame = _image_piece(filler, document, marker.expression, value)
            if frame is not None:
                pieces.append(frame)
        else:
            pieces.append(render_value(value))
        position = marker.end
    pieces.append(text[position:])

    parent = node.parentNode
    for piece in _merge_text_pieces(pieces):
        new_node = document.createTextNode(piece) if isinstance(piece, str) else piece
        parent.insertBefore(new_node, node)
        filler.mark_rendered(new_node)
    parent.removeChild(node)
    return True


def substitute_attributes(filler, element: Node, scope) -> int:
    """Fills variable markers found in attribute values. Returns the number of changed attributes."""
    changed = 0
    attributes = element.attributes
    for index in range(attributes.length):
        attribute = attributes.item(index)
        if filler.is_rendered(attribute):
            continue

        value = attribute.value
        markers = [m for m in find_markers(value) if m.kind == MarkerKind.VARIABLE]
        if not markers:
            continue

        parts: List[str] = []
        position = 0
        for marker in markers:
            parts.append(value[position:marker.start])
            parts.append(render_value(filler.evaluate(marker.expression, scope)))
            position = marker.end
        parts.append(value[position:])

        attribute.value = "".join(parts)
        filler.mark_rendered(attribute)
        changed += 1
    return changed


def _image_piece(filler, document, expression: str, value: Any):
    if value is None:
        return None
    if not isinstance(value, OdfImage):
        raise ImageValueError(expression, type(value).__name__)
    if filler.add_image is None:
        raise ImageValueError(expression, type(value).__name__, "no image registration callback was given")

    href = filler.add_image(value)
    return make_image_frame(document, href, value)


def _merge_text_pieces(pieces: List[Union[str, Node]]) -> List[Union[str, Node]]:
    merged: List[Union[str, Node]] = []
    for piece in pieces:
        if isinstance(piece, str):
            if not piece:
                continue
            if merged and isinstance(merged[-1], str):
                merged[-1] += piece
                continue
        merged.append(piece)
    return merged or [""]


__all__ = ["render_value", "substitute_text", "substitute_attributes"]
