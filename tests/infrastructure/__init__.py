"""
Shared test helpers: in-memory ODT templates and archive inspection.
"""

from .odt_builders import (
    DEFAULT_ENTRIES, NAMESPACES, ODT_MIMETYPE, PNG_BYTES,
    content_xml, make_odt, manifest_xml, office_text, paragraph_texts, parse_body,
    zip_info, zip_names, zip_read,
)

__all__ = [
    "DEFAULT_ENTRIES", "NAMESPACES", "ODT_MIMETYPE", "PNG_BYTES",
    "content_xml", "make_odt", "manifest_xml", "office_text", "paragraph_texts", "parse_body",
    "zip_info", "zip_names", "zip_read",
]
