"""
XML parser/serializer adapter.

The engine works on xml.dom.minidom documents: they carry the parent,
sibling, cloning and text splitting primitives the templating passes need.
"""

from __future__ import annotations

from typing import Union
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from ..errors import OdtFillUserError


class XmlParseError(OdtFillUserError):
    """Archive entry is not well-formed XML."""

    def __init__(self, name: str, cause: ExpatError):
        self.name = name
        self.cause = cause
        super().__init__(f"Cannot parse '{name}': {cause}")


def parse_xml(data: Union[bytes, str], name: str = "<xml>") -> minidom.Document:
    try:
        return minidom.parseString(data)
    except ExpatError as e:
        raise XmlParseError(name, e) from e


def serialize_xml(document: minidom.Document) -> bytes:
    return document.toxml(encoding="UTF-8")


__all__ = ["parse_xml", "serialize_xml", "XmlParseError"]
