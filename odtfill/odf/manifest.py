"""
META-INF/manifest.xml model.

The manifest lists every entry of an OpenDocument package with its media
type. It is read from the template, synchronized with the entries actually
written to the output and serialized again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from xml.sax.saxutils import quoteattr

from ..dom import parse_xml
from ..errors import ManifestError
from ..types import ODT_MIMETYPE
from .namespaces import MANIFEST_NS

MANIFEST_PATH = "META-INF/manifest.xml"
ROOT_ENTRY = "/"


@dataclass
class ManifestFileEntry:
    full_path: str
    media_type: str
    version: Optional[str] = None


@dataclass
class Manifest:
    version: str
    media_type: Optional[str] = None
    # keyed by full path, in manifest order
    file_entries: Dict[str, ManifestFileEntry] = field(default_factory=dict)

    def add(self, full_path: str, media_type: str, version: Optional[str] = None) -> None:
        self.file_entries[full_path] = ManifestFileEntry(full_path, media_type, version)

    def sync(self, present_paths: Iterable[str]) -> List[str]:
        """
        Drops entries whose file is not in the package.

        The root entry is kept: it describes the package itself.

        Returns:
            Removed full paths
        """
        present = set(present_paths)
        removed = [
            path for path in self.file_entries
            if path != ROOT_ENTRY and path not in present
        ]
        for path in removed:
            del self.file_entries[path]
        return removed


def parse_manifest(data: bytes) -> Manifest:
    """
    Reads a manifest.xml document.

    Raises:
        XmlParseError: not well-formed XML
        ManifestError: missing version, full-path or media-type
    """
    document = parse_xml(data, MANIFEST_PATH)
    roots = document.getElementsByTagName("manifest:manifest")
    if not roots:
        raise ManifestError("No manifest:manifest element in manifest.xml")
    root = roots[0]

    version = root.getAttribute("manifest:version")
    if not version:
        raise ManifestError("Missing version attribute in manifest:manifest element of manifest.xml")

    manifest = Manifest(version=version)
    for element in root.getElementsByTagName("manifest:file-entry"):
        full_path = element.getAttribute("manifest:full-path")
        if not full_path:
            raise ManifestError("Missing manifest:full-path attribute in manifest entry")
        if not element.hasAttribute("manifest:media-type"):
            raise ManifestError(f"Missing manifest:media-type attribute in manifest entry for '{full_path}'")
        media_type = element.getAttribute("manifest:media-type")

        if full_path == ROOT_ENTRY:
            manifest.media_type = media_type

        entry_version = element.getAttribute("manifest:version") or None
        manifest.add(full_path, media_type, entry_version)

    return manifest


def make_manifest_file(manifest: Manifest, media_type: str = ODT_MIMETYPE) -> bytes:
    """
    Serializes a manifest. The root entry is regenerated with the given
    package media type and the manifest version.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<manifest:manifest xmlns:manifest="{MANIFEST_NS}" manifest:version={quoteattr(manifest.version)}>',
        f' <manifest:file-entry manifest:full-path="/" manifest:version={quoteattr(manifest.version)}'
        f' manifest:media-type={quoteattr(media_type)}/>',
    ]
    for entry in manifest.file_entries.values():
        if entry.full_path == ROOT_ENTRY:
            continue
        version = f" manifest:version={quoteattr(entry.version)}" if entry.version else ""
        lines.append(
            f" <manifest:file-entry manifest:full-path={quoteattr(entry.full_path)}"
            f"{version} manifest:media-type={quoteattr(entry.media_type)}/>"
        )
    lines.append("</manifest:manifest>")
    return ("\n".join(lines) + "\n").encode("utf-8")


__all__ = [
    "MANIFEST_PATH",
    "Manifest",
    "ManifestFileEntry",
    "parse_manifest",
    "make_manifest_file",
]
