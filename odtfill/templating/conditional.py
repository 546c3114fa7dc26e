"""
Conditional selection: {#if condition} ... [{:else} ...] {/if}
"""

from __future__ import annotations

import logging
from typing import Optional

from xml.dom import Node

from .block import TemplateBlock
from .substitution import substitute_attributes

logger = logging.getLogger(__name__)


def fill_if_block(
    filler,
    open_node: Node,
    condition_expression: str,
    else_node: Optional[Node],
    close_node: Node,
    scope,
) -> None:
    """
    Keeps the then branch when the condition is truthy, the else branch
    (if any) otherwise. The discarded branch is removed without being
    evaluated; the content of the kept one is filled with the current scope.
    """
    if else_node is not None:
        then_block = TemplateBlock(open_node, else_node)
        else_block: Optional[TemplateBlock] = TemplateBlock(else_node, close_node)
        blocks = [then_block, else_block]
    else:
        then_block = TemplateBlock(open_node, close_node)
        else_block = None
        blocks = [then_block]

    for block in (TemplateBlock(open_node, close_node), *blocks):
        for element in block.branch_elements():
            substitute_attributes(filler, element, scope)

    condition = filler.evaluate(condition_expression, scope)

    # content goes first: marker removal reshapes the branches
    if condition:
        kept = then_block
        if else_block is not None:
            else_block.remove_content()
    else:
        kept = else_block
        then_block.remove_content()

    logger.debug("{#if %s} is %s", condition_expression, "true" if condition else "false")

    content = kept.content_nodes() if kept is not None else []
    for block in blocks:
        block.remove_markers_and_empty_ancestors()

    if kept is not None:
        kept.fill_content(filler, scope, content)


__all__ = ["fill_if_block"]
