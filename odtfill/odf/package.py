"""
Package-level fill of an ODT template.

Reads the template container, fills content.xml and writes a new
container: mimetype first and uncompressed, kept template entries in
their original order, images added by {#image} markers, and the manifest
last, synchronized with what was actually written.
"""

from __future__ import annotations

import io
import logging
import time
import zipfile
from typing import List, Mapping, Optional

import pathspec

from ..dom import parse_xml, serialize_xml
from ..errors import MissingEntryError, PackageError
from ..templating import fill_document
from ..types import ODT_MIMETYPE, Evaluator, FillOptions
from .images import ImageRegistry
from .manifest import MANIFEST_PATH, make_manifest_file, parse_manifest

logger = logging.getLogger(__name__)

CONTENT_PATH = "content.xml"
MIMETYPE_PATH = "mimetype"


def _kept_spec(options: FillOptions) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", options.kept_entries)


def _entry_info(name: str, date_time=None, compress_type: int = zipfile.ZIP_DEFLATED) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=date_time or time.localtime()[:6])
    info.compress_type = compress_type
    return info


def _open_archive(odt: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(odt))
    except zipfile.BadZipFile as e:
        raise PackageError(f"Not an OpenDocument container: {e}") from e


def get_content_document(odt: bytes):
    """
    Parsed content.xml of an ODT.

    Raises:
        PackageError: the bytes are not a zip container
        MissingEntryError: the container has no content.xml
    """
    with _open_archive(odt) as archive:
        if CONTENT_PATH not in archive.namelist():
            raise MissingEntryError(CONTENT_PATH)
        return parse_xml(archive.read(CONTENT_PATH), CONTENT_PATH)


def fill_odt_template(
    template: bytes,
    data: Mapping,
    *,
    evaluator: Optional[Evaluator] = None,
    options: Optional[FillOptions] = None,
) -> bytes:
    """
    Fills an ODT template with data.

    Args:
        template: Bytes of the .odt template
        data: Root scope of the template expressions
        evaluator: Expression evaluator, the default ExpressionEvaluator when omitted
        options: Archive and preparation options

    Returns:
        Bytes of the filled .odt document

    Raises:
        PackageError: the template is not a zip container
        MissingEntryError: content.xml or META-INF/manifest.xml is missing
        ManifestError: the manifest is malformed
        OdtFillUserError: template structure or evaluation errors
    """
    options = options or FillOptions()
    kept_spec = _kept_spec(options)

    with _open_archive(template) as source:
        infos = [info for info in source.infolist() if not info.is_dir()]
        names = [info.filename for info in infos]

        if CONTENT_PATH not in names:
            raise MissingEntryError(CONTENT_PATH)
        if MANIFEST_PATH not in names:
            raise MissingEntryError(MANIFEST_PATH)

        manifest = parse_manifest(source.read(MANIFEST_PATH))

        kept = []
        for info in infos:
            if kept_spec.match_file(info.filename):
                kept.append(info)
            else:
                logger.debug("Dropping archive entry %s", info.filename)

        content_info = source.getinfo(CONTENT_PATH)
        content_document = parse_xml(source.read(CONTENT_PATH), CONTENT_PATH)
        images = ImageRegistry(options.pictures_dir, taken=names)
        fill_document(
            content_document,
            data,
            evaluator=evaluator,
            add_image=images,
            containers=options.marker_containers,
        )

        buffer = io.BytesIO()
        written: List[str] = []
        with zipfile.ZipFile(buffer, "w") as target:
            mimetype_date = source.getinfo(MIMETYPE_PATH).date_time if MIMETYPE_PATH in names else None
            target.writestr(_entry_info(MIMETYPE_PATH, mimetype_date, zipfile.ZIP_STORED), ODT_MIMETYPE)
            written.append(MIMETYPE_PATH)

            for info in kept:
                name = info.filename
                if name in (MIMETYPE_PATH, MANIFEST_PATH):
                    continue
                if name == CONTENT_PATH:
                    target.writestr(
                        _entry_info(CONTENT_PATH, content_info.date_time),
                        serialize_xml(content_document),
                        compresslevel=9,
                    )
                else:
                    target.writestr(_entry_info(name, info.date_time, info.compress_type), source.read(info))
                written.append(name)

            for path, image in images.images:
                target.writestr(_entry_info(path, compress_type=zipfile.ZIP_STORED), image.content)
                manifest.add(path, image.media_type)
                written.append(path)

            for path in manifest.sync(written):
                logger.debug("Removed %s from manifest", path)
            target.writestr(_entry_info(MANIFEST_PATH), make_manifest_file(manifest))

    return buffer.getvalue()


__all__ = ["fill_odt_template", "get_content_document"]
