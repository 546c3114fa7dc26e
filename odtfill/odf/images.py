"""
Images inserted through {#image} markers.

ImageRegistry collects the images of one fill and hands out their paths
inside the output container; make_image_frame builds the markup that
references them from content.xml.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Iterable, List, Set, Tuple

from ..types import DEFAULT_PICTURES_DIR, OdfImage
from .namespaces import DRAW_NS, SVG_NS, TEXT_NS, XLINK_NS

logger = logging.getLogger(__name__)


class ImageRegistry:
    """
    Registration callback for images found while filling a document.

    Every image is stored under <pictures_dir>/<file name>; a name already
    taken (by a template picture or an earlier image) gets a numeric suffix.
    """

    def __init__(self, pictures_dir: str = DEFAULT_PICTURES_DIR, taken: Iterable[str] = ()):
        self.pictures_dir = pictures_dir.strip("/")
        self._taken: Set[str] = set(taken)
        self.images: List[Tuple[str, OdfImage]] = []

    def add(self, image: OdfImage) -> str:
        path = self._unique_path(image.file_name)
        self._taken.add(path)
        self.images.append((path, image))
        logger.debug("Registered image %s (%s, %d bytes)", path, image.media_type, len(image.content))
        return path

    __call__ = add

    def _unique_path(self, file_name: str) -> str:
        name = PurePosixPath(file_name.replace("\\", "/")).name or "image"
        candidate = f"{self.pictures_dir}/{name}" if self.pictures_dir else name
        if candidate not in self._taken:
            return candidate

        stem = PurePosixPath(name).stem
        suffix = PurePosixPath(name).suffix
        counter = 1
        while True:
            numbered = f"{stem}-{counter}{suffix}"
            candidate = f"{self.pictures_dir}/{numbered}" if self.pictures_dir else numbered
            if candidate not in self._taken:
                return candidate
            counter += 1


def make_image_frame(document, href: str, image: OdfImage):
    """
    <draw:frame text:anchor-type="as-char" svg:width=.. svg:height=..>
        <draw:image xlink:href=.. xlink:type="simple" xlink:show="embed" xlink:actuate="onLoad"/>
    </draw:frame>
    """
    frame = document.createElementNS(DRAW_NS, "draw:frame")
    frame.setAttributeNS(TEXT_NS, "text:anchor-type", "as-char")
    if image.width:
        frame.setAttributeNS(SVG_NS, "svg:width", image.width)
    if image.height:
        frame.setAttributeNS(SVG_NS, "svg:height", image.height)

    picture = document.createElementNS(DRAW_NS, "draw:image")
    picture.setAttributeNS(XLINK_NS, "xlink:href", href)
    picture.setAttributeNS(XLINK_NS, "xlink:type", "simple")
    picture.setAttributeNS(XLINK_NS, "xlink:show", "embed")
    picture.setAttributeNS(XLINK_NS, "xlink:actuate", "onLoad")

    frame.appendChild(picture)
    return frame


__all__ = ["ImageRegistry", "make_image_frame"]
