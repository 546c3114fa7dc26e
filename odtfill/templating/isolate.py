"""
Marker isolation pass.

After consolidation every marker lies within one text node, possibly
together with literal text or other markers. Isolation splits such nodes
so that each marker ends up in a text node of its own.
"""

from __future__ import annotations

import logging
from typing import List

from xml.dom import Node

from ..dom import iter_text_nodes
from .markers import find_first_marker

logger = logging.getLogger(__name__)


def isolate_markers(root) -> List[Node]:
    """
    Splits text nodes under root around their markers.

    Returns:
        Text nodes holding exactly one marker, in document order
    """
    marker_nodes: List[Node] = []

    for node in list(iter_text_nodes(root)):
        current = node
        while current is not None and current.data:
            marker = find_first_marker(current.data)
            if marker is None:
                break

            # leading / marker / trailing
            if marker.start > 0:
                current = current.splitText(marker.start)
            rest = None
            if len(marker.text) < len(current.data):
                rest = current.splitText(len(marker.text))

            marker_nodes.append(current)
            current = rest

    logger.debug("Isolated %d marker nodes", len(marker_nodes))
    return marker_nodes


__all__ = ["isolate_markers"]
