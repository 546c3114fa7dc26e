"""
Template execution engine.

Preparation (consolidation + isolation of markers), block extraction,
and the filler that resolves loops, conditionals, variables and images.
"""

from .block import TemplateBlock, TemplateBranch, is_blank
from .conditional import fill_if_block
from .consolidate import consolidate_markers
from .filler import BlockKind, TemplateFiller, fill_document
from .isolate import isolate_markers
from .loop import fill_each_block, materialize_items
from .markers import Marker, MarkerKind, find_markers, parse_marker
from .prepare import prepare_template_tree
from .scope import Scope
from .substitution import render_value

__all__ = [
    "TemplateBlock",
    "TemplateBranch",
    "is_blank",
    "fill_if_block",
    "consolidate_markers",
    "BlockKind",
    "TemplateFiller",
    "fill_document",
    "isolate_markers",
    "fill_each_block",
    "materialize_items",
    "Marker",
    "MarkerKind",
    "find_markers",
    "parse_marker",
    "prepare_template_tree",
    "Scope",
    "render_value",
]
