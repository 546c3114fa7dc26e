"""
Loop expansion: {#each iterable as item} ... {/each}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, List

from xml.dom import Node

from .block import TemplateBlock
from .substitution import substitute_attributes

logger = logging.getLogger(__name__)


def materialize_items(value: Any) -> List[Any]:
    """
    Items of a loop, as a list.

    Missing or non-iterable values give an empty loop rather than an
    error: optional repeated sections simply render nothing. Mappings are
    not iterated over their keys.
    """
    if value is None or isinstance(value, Mapping):
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Iterable):
        return list(value)
    return []


def fill_each_block(filler, start_node: Node, iterable_expression: str, item_name: str, end_node: Node, scope) -> None:
    """
    Repeats the block between start_node and end_node once per item.

    Copies of the template block are made before anything is filled and
    inserted before it; the template block itself becomes the last
    iteration, so whatever follows the closing marker stays where the
    enclosing scan will reach it. Content sharing a branch with the
    markers, before the opening marker or after the closing one, belongs
    to the enclosing scope and is kept by the first and the last
    iteration only.
    """
    block = TemplateBlock(start_node, end_node)
    for element in block.branch_elements():
        substitute_attributes(filler, element, scope)

    items = materialize_items(filler.evaluate(iterable_expression, scope))
    logger.debug("{#each %s as %s}: %d item(s)", iterable_expression, item_name, len(items))

    if not items:
        block.remove_content()
        block.remove_markers_and_empty_ancestors()
        return

    iterations = [block.clone_and_insert_before() for _ in items[1:]]
    iterations.append(block)

    last_index = len(items) - 1
    for index, (item, current) in enumerate(zip(items, iterations)):
        if index > 0:
            current.start_branch.remove_left_content(2)
        if index < last_index:
            current.end_branch.remove_right_content(2)

        # collected while the markers still delimit the content
        content = current.content_nodes()
        current.remove_markers_and_empty_ancestors()
        current.fill_content(filler, scope.bind(item_name, item), content)


__all__ = ["fill_each_block", "materialize_items"]
