"""
Marker consolidation pass.

Word processors split paragraph text into several runs whenever the
formatting changes, so a marker typed as "{#each xs as x}" may end up as
"{#ea" in a bold span followed by "ch xs as x}" in plain text. This pass
rewrites every paragraph-like container so that each marker lies within
a single text node. The formatting of the marker itself is dropped; the
text before and after the marker keeps its formatting.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from xml.dom import Node

from ..dom import ancestors, branch_anchor, common_ancestor, detach, iter_text_nodes
from ..errors import MarkerInvariantError
from ..types import DEFAULT_MARKER_CONTAINERS
from .markers import Marker, find_markers

logger = logging.getLogger(__name__)


def consolidate_markers(document, containers: Sequence[str] = DEFAULT_MARKER_CONTAINERS) -> int:
    """
    Merges fragmented markers of every container element of the document.

    Returns:
        Number of markers that were fragmented and have been merged
    """
    merged = 0
    for tag_name in containers:
        for container in list(document.getElementsByTagName(tag_name)):
            merged += consolidate_container(container)
    return merged


def consolidate_container(container) -> int:
    text_nodes = _text_nodes(container)
    full_text = "".join(node.data for node in text_nodes)

    merged = 0
    for marker in find_markers(full_text):
        # the tree changes after every merge, offsets of the full text don't
        text_nodes = _text_nodes(container)
        (start_node, start_offset), (end_node, end_offset) = _locate(marker, text_nodes)
        if start_node is end_node:
            continue

        _merge(start_node, start_offset, end_node, end_offset, marker.text)
        merged += 1
        logger.debug("Consolidated marker %r", marker.text)

    return merged


def _text_nodes(container) -> List[Node]:
    return list(iter_text_nodes(container))


def _locate(marker: Marker, text_nodes: List[Node]) -> Tuple[Tuple[Node, int], Tuple[Node, int]]:
    """Text nodes (and offsets within them) holding the first and last marker characters."""
    start: Optional[Tuple[Node, int]] = None
    end: Optional[Tuple[Node, int]] = None

    position = 0
    for node in text_nodes:
        node_start = position
        node_end = node_start + len(node.data)

        if start is None and node_start <= marker.start < node_end:
            start = (node, marker.start - node_start)

        if start is not None and node_start < marker.end <= node_end:
            end = (node, marker.end - node_start)
            break

        position = node_end

    if start is None:
        raise MarkerInvariantError(f"Could not find the text node where marker {marker.text!r} starts")
    if end is None:
        raise MarkerInvariantError(f"Could not find the text node where marker {marker.text!r} ends")
    return start, end


def _merge(start_node: Node, start_offset: int, end_node: Node, end_offset: int, text: str) -> None:
    """
    Replaces the marker span running from start_node to end_node with one text node.

    The new node is a direct child of the nearest common ancestor of both
    fragments; every node lying strictly inside the span is removed.
    """
    common = common_ancestor(start_node, end_node)

    marker_start = start_node.splitText(start_offset) if start_offset > 0 else start_node
    if end_offset < len(end_node.data):
        end_node.splitText(end_offset)
    marker_end = end_node

    start_anchor = branch_anchor(marker_start, common)
    end_anchor = branch_anchor(marker_end, common)

    start_chain = ancestors(marker_start, stop_at=start_anchor)
    end_chain = ancestors(marker_end, stop_at=end_anchor)

    doomed: List[Node] = [marker_start, marker_end]
    for node in start_chain:
        if node is start_anchor:
            break
        sibling = node.nextSibling
        while sibling is not None:
            doomed.append(sibling)
            sibling = sibling.nextSibling
    for node in end_chain:
        if node is end_anchor:
            break
        sibling = node.previousSibling
        while sibling is not None:
            doomed.append(sibling)
            sibling = sibling.previousSibling
    sibling = start_anchor.nextSibling
    while sibling is not None and sibling is not end_anchor:
        doomed.append(sibling)
        sibling = sibling.nextSibling

    common.insertBefore(common.ownerDocument.createTextNode(text), end_anchor)

    start_parents = start_chain[1:]
    end_parents = end_chain[1:]
    for node in doomed:
        detach(node)

    # formatting elements that only held marker fragments
    _prune_emptied(start_parents)
    _prune_emptied(end_parents)


def _prune_emptied(chain: List[Node]) -> None:
    for element in chain:
        if element.hasChildNodes() or element.parentNode is None:
            return
        detach(element)


__all__ = ["consolidate_markers", "consolidate_container"]
