"""
Plain-text rendering of an ODT body, used to inspect filled documents.
"""

from __future__ import annotations

from xml.dom import Node

from ..dom import text_content
from .package import get_content_document


def _element_text(element) -> str:
    name = element.tagName
    if name in ("text:p", "text:h"):
        return text_content(element) + "\n"
    if name == "text:list-item":
        return "- " + _children_text(element)
    return _children_text(element)


def _children_text(element) -> str:
    return "".join(
        _element_text(child)
        for child in element.childNodes
        if child.nodeType == Node.ELEMENT_NODE
    )


def get_odt_text_content(odt: bytes) -> str:
    """
    Text of the office:text body: one line per paragraph or heading,
    list items prefixed with "- ".
    """
    document = get_content_document(odt)
    bodies = document.getElementsByTagName("office:text")
    if not bodies:
        return ""
    return _children_text(bodies[0])


__all__ = ["get_odt_text_content"]
