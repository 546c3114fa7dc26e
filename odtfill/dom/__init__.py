"""
Document tree access for the template engine.
"""

from .navigation import (
    ancestors,
    common_ancestor,
    branch_anchor,
    is_attached,
    traverse,
    iter_text_nodes,
    text_content,
    child_path,
    node_at_path,
    detach,
    insert_after,
)
from .xmlio import parse_xml, serialize_xml, XmlParseError

__all__ = [
    "ancestors",
    "common_ancestor",
    "branch_anchor",
    "is_attached",
    "traverse",
    "iter_text_nodes",
    "text_content",
    "child_path",
    "node_at_path",
    "detach",
    "insert_after",
    "parse_xml",
    "serialize_xml",
    "XmlParseError",
]
