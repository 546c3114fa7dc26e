"""
odtfill: fills OpenDocument Text templates with data.

Templates are ordinary .odt documents whose text carries markers:
{expression}, {#each list as item}...{/each},
{#if condition}...{:else}...{/if} and {#image expression}.
"""

from .errors import (
    OdtFillUserError,
    TemplateStructureError,
    TemplateEvaluationError,
    ImageValueError,
    MissingEntryError,
    PackageError,
    ManifestError,
)
from .expressions import ExpressionEvaluator
from .odf.package import fill_odt_template, get_content_document
from .odf.text_content import get_odt_text_content
from .templating import Scope, TemplateFiller, fill_document, prepare_template_tree
from .types import FillOptions, OdfImage

__all__ = [
    "fill_odt_template",
    "fill_document",
    "get_odt_text_content",
    "get_content_document",
    "OdfImage",
    "FillOptions",
    "ExpressionEvaluator",
    "Scope",
    "TemplateFiller",
    "prepare_template_tree",
    "OdtFillUserError",
    "TemplateStructureError",
    "TemplateEvaluationError",
    "ImageValueError",
    "MissingEntryError",
    "PackageError",
    "ManifestError",
]
