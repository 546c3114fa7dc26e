"""
Tree navigation helpers over xml.dom.minidom nodes.

minidom implements the DOM level needed by the template engine
(parent/sibling links, cloneNode, Text.splitText) but lacks a few
traversal conveniences; this module provides them.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Sequence

from xml.dom import Node


def ancestors(node: Node, stop_at: Optional[Node] = None) -> List[Node]:
    """
    Chain from node up to the root (or up to stop_at, inclusive), nearest first.

    The node itself is the first element of the result.
    """
    chain: List[Node] = []
    current: Optional[Node] = node
    while current is not None:
        chain.append(current)
        if current is stop_at:
            break
        current = current.parentNode
    return chain


def common_ancestor(node1: Node, node2: Node) -> Node:
    """
    Nearest node present in both ancestor chains.

    Raises:
        ValueError: nodes belong to disjoint trees
    """
    others = {id(n) for n in ancestors(node2)}
    for ancestor in ancestors(node1):
        if id(ancestor) in others:
            return ancestor
    raise ValueError("node1 and node2 do not have a common ancestor")


def branch_anchor(node: Node, ancestor: Node) -> Node:
    """Direct child of ancestor whose subtree contains node (node itself if it is a child)."""
    current = node
    while current.parentNode is not ancestor:
        if current.parentNode is None:
            raise ValueError("node is not a descendant of ancestor")
        current = current.parentNode
    return current


def is_attached(node: Node, root: Node) -> bool:
    """True while node is still reachable from root through parent links."""
    current: Optional[Node] = node
    while current is not None:
        if current is root:
            return True
        current = current.parentNode
    return False


def traverse(node: Node, visit: Callable[[Node], None]) -> None:
    """
    Depth-first traversal, children before their parent.

    Children are snapshotted before descending so visit() may detach
    or insert nodes; callers are responsible for skipping nodes that
    a previous visit has detached.
    """
    for child in list(node.childNodes):
        traverse(child, visit)
    visit(node)


def iter_text_nodes(node: Node) -> Iterator[Node]:
    """Text descendants of node in document order."""
    if node.nodeType == Node.TEXT_NODE:
        yield node
        return
    for child in list(node.childNodes):
        yield from iter_text_nodes(child)


def text_content(node: Node) -> str:
    if node.nodeType in (Node.TEXT_NODE, Node.CDATA_SECTION_NODE):
        return node.data
    return "".join(text_content(child) for child in node.childNodes)


def child_path(node: Node, base: Node) -> List[int]:
    """Child indexes leading from base down to node."""
    path: List[int] = []
    current = node
    while current is not base:
        parent = current.parentNode
        if parent is None:
            raise ValueError("node is not a descendant of base")
        path.append(_index_in_parent(current, parent))
        current = parent
    path.reverse()
    return path


def node_at_path(base: Node, path: Sequence[int]) -> Node:
    current = base
    for index in path:
        current = current.childNodes[index]
    return current


def detach(node: Node) -> Node:
    if node.parentNode is not None:
        node.parentNode.removeChild(node)
    return node


def insert_after(new_node: Node, reference: Node) -> None:
    parent = reference.parentNode
    if reference.nextSibling is new_node:
        return
    # minidom treats a None reference as append
    parent.insertBefore(new_node, reference.nextSibling)


def _index_in_parent(node: Node, parent: Node) -> int:
    for i, child in enumerate(parent.childNodes):
        if child is node:
            return i
    raise ValueError("Could not find node in its parent's childNodes")


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
]
