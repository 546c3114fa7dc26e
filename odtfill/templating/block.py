"""
Template blocks: the part of the tree between two marker nodes.

An opening marker and its closing marker may sit in different branches
of the tree ("{#each}" alone in one paragraph, "{/each}" in a table row
three levels below). A block is described by the nearest common ancestor
of both markers and, for each marker, the branch of ancestors leading
from that common ancestor down to it:

    common ancestor
    ├── start branch anchor ... start marker, then "right content"
    ├── middle content (siblings between the two anchors)
    └── end branch anchor ... "left content", then end marker

The block content is the right content of the start branch, the middle
content and the left content of the end branch.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from xml.dom import Node

from ..dom import ancestors, child_path, common_ancestor, detach, is_attached, node_at_path

logger = logging.getLogger(__name__)

# Descendants that make an element worth keeping even without text
CONTENT_ELEMENT_PREFIXES = ("draw:",)
CONTENT_ELEMENTS = frozenset({
    "table:table",
    "text:note",
    "office:annotation",
    "text:bookmark-ref",
})

TABLE_CELL = "table:table-cell"
TABLE_ROW = "table:table-row"


def is_blank(node: Node) -> bool:
    """
    True when the node renders as nothing: whitespace-only text and no
    drawing, frame, table or note anywhere below it. Formatting elements
    (spans, spaces, tabs, line breaks, bookmarks) do not count as content.
    """
    if node.nodeType == Node.TEXT_NODE:
        return node.data.strip() == ""
    if node.nodeType != Node.ELEMENT_NODE:
        return True
    name = node.tagName
    if name in CONTENT_ELEMENTS or name.startswith(CONTENT_ELEMENT_PREFIXES):
        return False
    return all(is_blank(child) for child in node.childNodes)


class TemplateBranch:
    """
    Chain of nodes from a base node (the block's common ancestor) down to a leaf.

    at(0) is the base, at(1) the branch anchor, at(-1) the leaf.
    """

    def __init__(self, base: Node, leaf: Node):
        self.base = base
        self.leaf = leaf
        self._chain: List[Node] = list(reversed(ancestors(leaf, stop_at=base)))

    def at(self, index: int) -> Optional[Node]:
        try:
            return self._chain[index]
        except IndexError:
            return None

    def remove_leaf_and_empty_ancestors(self) -> None:
        """
        Removes the leaf, then every ancestor left blank by its removal,
        stopping at the base.

        The leaf or some of its ancestors may already have been removed
        as part of another block (an {:else} marker is the end of the then
        block and the start of the else block); the chain is cut at the
        first detached node.
        """
        leaf_removed = False
        for i, node in enumerate(self._chain[1:], start=1):
            if node.parentNode is None:
                self._chain = self._chain[:i]
                leaf_removed = True
                break
        current = self._chain[-1]

        if not leaf_removed and current is not self.base:
            parent = current.parentNode
            parent.removeChild(current)
            current = parent

        while current is not self.base and is_blank(current):
            if current.nodeType == Node.ELEMENT_NODE and current.tagName == TABLE_CELL:
                # a row keeps all of its cells or goes away as a whole
                row = current.parentNode
                if row is self.base or not is_blank(row):
                    break
                current = row
            parent = current.parentNode
            parent.removeChild(current)
            current = parent

        self.leaf = current
        self._chain = list(reversed(ancestors(current, stop_at=self.base)))

    def remove_right_content(self, start_index: int = 0) -> None:
        """Removes the next siblings of every branch node from start_index down."""
        for node in self._chain[start_index:]:
            sibling = node.nextSibling
            while sibling is not None:
                following = sibling.nextSibling
                detach(sibling)
                sibling = following

    def remove_left_content(self, start_index: int = 0) -> None:
        for node in self._chain[start_index:]:
            sibling = node.previousSibling
            while sibling is not None:
                preceding = sibling.previousSibling
                detach(sibling)
                sibling = preceding

    def __len__(self) -> int:
        return len(self._chain)

    def get_branch_path(self) -> List[int]:
        """Child indexes from the base down to the leaf."""
        return child_path(self.leaf, self.base)

    def __repr__(self) -> str:
        names = [n.nodeName for n in self._chain]
        return f"TemplateBranch({' > '.join(names)})"


class TemplateBlock:
    """
    Block delimited by two marker nodes.

    The start node must precede the end node in document order.
    """

    def __init__(self, start_node: Node, end_node: Node):
        self.common_ancestor = common_ancestor(start_node, end_node)
        self.start_branch = TemplateBranch(self.common_ancestor, start_node)
        self.end_branch = TemplateBranch(self.common_ancestor, end_node)

        self.middle_content: List[Node] = []
        end_anchor = self.end_branch.at(1)
        content = self.start_branch.at(1).nextSibling
        while content is not None and content is not end_anchor:
            self.middle_content.append(content)
            content = content.nextSibling

    def remove_markers_and_empty_ancestors(self) -> None:
        self.start_branch.remove_leaf_and_empty_ancestors()
        self.end_branch.remove_leaf_and_empty_ancestors()

    def extract_content(self):
        """
        Detaches the block content into a new document fragment, in
        document order. Markers and branch anchors stay in place.
        """
        document = self.common_ancestor.ownerDocument or self.common_ancestor
        fragment = document.createDocumentFragment()

        for node in self._right_content(self.start_branch):
            fragment.appendChild(node)
        for node in self.middle_content:
            fragment.appendChild(node)
        for node in self._left_content(self.end_branch):
            fragment.appendChild(node)

        self.middle_content = []
        return fragment

    def remove_content(self) -> None:
        self.extract_content()

    def clone_and_insert_before(self) -> TemplateBlock:
        """
        Deep-copies the block (branch anchors, middle content and markers),
        inserts the copy right before the start branch anchor and returns
        the block describing the copy.
        """
        start_anchor = self.start_branch.at(1)
        end_anchor = self.end_branch.at(1)

        start_path = self.start_branch.get_branch_path()[1:]
        end_path = self.end_branch.get_branch_path()[1:]

        start_clone = start_anchor.cloneNode(True)
        middle_clones = [node.cloneNode(True) for node in self.middle_content]
        end_clone = end_anchor.cloneNode(True)

        for clone in [start_clone, *middle_clones, end_clone]:
            self.common_ancestor.insertBefore(clone, start_anchor)

        return TemplateBlock(node_at_path(start_clone, start_path), node_at_path(end_clone, end_path))

    def content_nodes(self) -> List[Node]:
        """
        Top-level nodes of the block content in document order: nothing
        before the start marker or after the end marker is included.
        """
        return [
            *self._right_content(self.start_branch),
            *self.middle_content,
            *self._left_content(self.end_branch),
        ]

    def branch_elements(self) -> List[Node]:
        """Elements of both branches between the common ancestor and the markers."""
        elements: List[Node] = []
        for branch in (self.start_branch, self.end_branch):
            for index in range(1, len(branch)):
                node = branch.at(index)
                if node.nodeType == Node.ELEMENT_NODE:
                    elements.append(node)
        return elements

    def fill_content(self, filler, scope, roots: Iterable[Node]) -> None:
        """
        Runs the filler over the given content nodes as a single scan,
        skipping those that marker removal has detached.
        """
        filler.fill([node for node in roots if is_attached(node, self.common_ancestor)], scope)

    @staticmethod
    def _right_content(branch: TemplateBranch) -> Iterable[Node]:
        # siblings of deeper branch nodes come first in document order
        collected: List[Node] = []
        for index in range(2, len(branch)):
            node = branch.at(index)
            siblings: List[Node] = []
            sibling = node.nextSibling
            while sibling is not None:
                siblings.append(sibling)
                sibling = sibling.nextSibling
            collected[0:0] = siblings
        return collected

    @staticmethod
    def _left_content(branch: TemplateBranch) -> Iterable[Node]:
        collected: List[Node] = []
        for index in range(2, len(branch)):
            node = branch.at(index)
            siblings: List[Node] = []
            sibling = node.previousSibling
            while sibling is not None:
                siblings.insert(0, sibling)
                sibling = sibling.previousSibling
            collected.extend(siblings)
        return collected

    def __repr__(self) -> str:
        return (
            f"TemplateBlock(common={self.common_ancestor.nodeName}, "
            f"start={self.start_branch!r}, end={self.end_branch!r}, "
            f"middle={len(self.middle_content)})"
        )


__all__ = ["TemplateBranch", "TemplateBlock", "is_blank"]
