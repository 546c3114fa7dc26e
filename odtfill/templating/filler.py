"""
Block filler: the entry point of template execution.

A fill is one depth-first scan, in document order, over one or more root
nodes. Block markers are tracked on a stack of open block kinds so that
markers of nested blocks are left alone until the outermost block is
closed; the closed block is then handed to loop expansion or conditional
selection, which fill their content with a fresh scan of their own.
Text nodes and attributes met outside of any open block get their
variables substituted.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Set, Tuple, Union

from xml.dom import Node

from ..dom import ancestors, is_attached, traverse
from ..expressions import ExpressionEvaluator
from ..errors import OdtFillUserError, TemplateEvaluationError, TemplateStructureError
from ..types import DEFAULT_MARKER_CONTAINERS, AddImage, Evaluator
from .conditional import fill_if_block
from .loop import fill_each_block
from .markers import Marker, MarkerKind, parse_marker
from .prepare import prepare_template_tree
from .scope import Scope
from .substitution import substitute_attributes, substitute_text

logger = logging.getLogger(__name__)


class BlockKind(Enum):
    EACH = "each"
    IF = "if"


class TemplateFiller:
    """
    Fills prepared template trees.

    Keeps the set of nodes and attributes produced by substitution during
    its lifetime: they hold data, not template text, and are never filled
    a second time when an enclosing block scans them again.
    """

    def __init__(self, evaluator: Evaluator, add_image: Optional[AddImage] = None):
        self.evaluator = evaluator
        self.add_image = add_image
        self._rendered: Set[Any] = set()

    def fill(self, roots: Union[Node, Sequence[Node]], scope: Union[Scope, Mapping]) -> None:
        """
        Fills the given roots as a single scan.

        Raises:
            TemplateStructureError: unbalanced or mismatched block markers
            TemplateEvaluationError: the evaluator failed on an expression
            ImageValueError: an {#image} marker did not produce an image
        """
        if isinstance(roots, Node):
            roots = [roots]
        if not isinstance(scope, Scope):
            scope = Scope(scope)

        scan = _BlockScan(self, scope)
        for root in roots:
            scan.run(root)
        scan.finish()

    def evaluate(self, expression: str, scope: Scope) -> Any:
        try:
            return self.evaluator.evaluate(expression, scope)
        except OdtFillUserError:
            raise
        except Exception as e:
            raise TemplateEvaluationError(expression, e) from e

    def mark_rendered(self, node: Any) -> None:
        self._rendered.add(node)

    def is_rendered(self, node: Any) -> bool:
        return node in self._rendered


class _BlockScan:
    """State of one fill scan: the open-block stack and the outermost open block."""

    def __init__(self, filler: TemplateFiller, scope: Scope):
        self.filler = filler
        self.scope = scope
        self.open_blocks: List[BlockKind] = []

        self.each_open: Optional[Tuple[Node, Marker]] = None
        self.if_open: Optional[Tuple[Node, Marker]] = None
        self.if_else: Optional[Node] = None

    def run(self, root: Node) -> None:
        tree_root = ancestors(root)[-1]

        def visit(node: Node) -> None:
            # earlier blocks may have removed or replaced nodes of the snapshot
            if not is_attached(node, tree_root) or self.filler.is_rendered(node):
                return
            if node.nodeType == Node.TEXT_NODE:
                self._visit_text(node)
            elif node.nodeType == Node.ELEMENT_NODE and not self.open_blocks:
                substitute_attributes(self.filler, node, self.scope)

        traverse(root, visit)

    def finish(self) -> None:
        if not self.open_blocks:
            return
        opener = self.each_open if self.open_blocks[0] == BlockKind.EACH else self.if_open
        marker_text = opener[1].text if opener is not None else self.open_blocks[0].value
        raise TemplateStructureError(marker_text, "block is never closed")

    def _visit_text(self, node: Node) -> None:
        marker = parse_marker(node.data)
        if marker is not None and marker.is_block:
            self._on_block_marker(node, marker)
        elif not self.open_blocks:
            substitute_text(self.filler, node, self.scope)

    def _on_block_marker(self, node: Node, marker: Marker) -> None:
        kind = marker.kind
        stack = self.open_blocks

        if kind == MarkerKind.EACH_OPEN:
            if not stack:
                self.each_open = (node, marker)
            stack.append(BlockKind.EACH)

        elif kind == MarkerKind.IF_OPEN:
            if not stack:
                self.if_open = (node, marker)
                self.if_else = None
            stack.append(BlockKind.IF)

        elif kind == MarkerKind.EACH_CLOSE:
            if not stack:
                raise TemplateStructureError(marker.text, "found without a matching {#each ... as ...}")
            if stack[-1] != BlockKind.EACH:
                raise TemplateStructureError(marker.text, "the innermost open block is an {#if}")
            stack.pop()
            if not stack:
                open_node, open_marker = self.each_open
                self.each_open = None
                self._fill_each(open_node, open_marker, node)

        elif kind == MarkerKind.ELSE:
            if not stack:
                raise TemplateStructureError(marker.text, "found without a matching {#if}")
            if stack[-1] != BlockKind.IF:
                raise TemplateStructureError(marker.text, "found inside an {#each} without a matching {#if}")
            if len(stack) == 1:
                if self.if_else is not None:
                    raise TemplateStructureError(marker.text, "an {#if} block has a single {:else}")
                self.if_else = node

        elif kind == MarkerKind.IF_CLOSE:
            if not stack:
                raise TemplateStructureError(marker.text, "found without a matching {#if}")
            if stack[-1] != BlockKind.IF:
                raise TemplateStructureError(marker.text, "the innermost open block is an {#each}")
            stack.pop()
            if not stack:
                open_node, open_marker = self.if_open
                else_node = self.if_else
                self.if_open = None
                self.if_else = None
                self._fill_if(open_node, open_marker, else_node, node)

    def _fill_each(self, open_node: Node, open_marker: Marker, close_node: Node) -> None:
        logger.debug("Resolving %s", open_marker.text)
        fill_each_block(
            self.filler,
            open_node,
            open_marker.expression,
            open_marker.item_name,
            close_node,
            self.scope,
        )

    def _fill_if(self, open_node: Node, open_marker: Marker, else_node: Optional[Node], close_node: Node) -> None:
        logger.debug("Resolving %s", open_marker.text)
        fill_if_block(self.filler, open_node, open_marker.expression, else_node, close_node, self.scope)


def fill_document(
    document,
    data: Mapping,
    *,
    evaluator: Optional[Evaluator] = None,
    add_image: Optional[AddImage] = None,
    containers: Sequence[str] = DEFAULT_MARKER_CONTAINERS,
) -> None:
    """
    Fills a parsed document in place: prepares its markers, then runs the filler.

    Args:
        document: DOM document (content.xml of an ODT)
        data: Root scope of the template expressions
        evaluator: Expression evaluator, the default ExpressionEvaluator when omitted
        add_image: Image registration callback, required by {#image} markers
        containers: Paragraph-like elements inside which markers are consolidated
    """
    if evaluator is None:
        evaluator = ExpressionEvaluator()

    prepare_template_tree(document, containers)
    TemplateFiller(evaluator, add_image).fill(document, Scope(data))


__all__ = ["BlockKind", "TemplateFiller", "fill_document"]
