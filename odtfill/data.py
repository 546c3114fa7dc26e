"""
Data files for the command line.

YAML or JSON documents whose top-level mapping becomes the root scope of a
fill. Images are described inline:

    photo:
      $image: pictures/photo.png
      width: 4cm
      height: 3cm

and are read relative to the data file.
"""

from __future__ import annotations

import mimetypes
import sys
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import DataFileError
from .types import OdfImage

_yaml = YAML(typ="safe")

IMAGE_KEY = "$image"
_IMAGE_KEYS = {IMAGE_KEY, "width", "height"}


def _load_image(description: Dict[str, Any], base_dir: Path) -> OdfImage:
    unknown = sorted(set(description) - _IMAGE_KEYS)
    if unknown:
        raise DataFileError(f"Unknown key(s) in image description: {', '.join(map(str, unknown))}")

    ref = description[IMAGE_KEY]
    if not isinstance(ref, str) or not ref:
        raise DataFileError(f"'{IMAGE_KEY}' must be a file path")

    path = base_dir / ref
    try:
        content = path.read_bytes()
    except OSError as e:
        raise DataFileError(f"Cannot read image {path}: {e}") from e

    media_type, _ = mimetypes.guess_type(path.name)
    if media_type is None or not media_type.startswith("image/"):
        raise DataFileError(f"Cannot determine the image type of {path}")

    sizes = {}
    for key in ("width", "height"):
        if key in description:
            value = description[key]
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                value = f"{value}cm"
            if not isinstance(value, str):
                raise DataFileError(f"'{key}' of image {ref} must be a length such as '4cm'")
            sizes[key] = value

    return OdfImage(content=content, file_name=path.name, media_type=media_type, **sizes)


def resolve_images(value: Any, base_dir: Path) -> Any:
    """Replaces image descriptions with OdfImage values, recursively."""
    if isinstance(value, dict):
        if IMAGE_KEY in value:
            return _load_image(value, base_dir)
        return {k: resolve_images(v, base_dir) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_images(v, base_dir) for v in value]
    return value


def load_data(path: str) -> Dict[str, Any]:
    """
    Loads the data of a fill from a YAML or JSON file, or from stdin with "-".

    Raises:
        DataFileError: unreadable file, invalid syntax, non-mapping document
            or broken image description
    """
    try:
        if path == "-":
            raw = _yaml.load(sys.stdin.read())
            base_dir = Path.cwd()
        else:
            file_path = Path(path)
            with file_path.open(encoding="utf-8") as f:
                raw = _yaml.load(f)
            base_dir = file_path.parent
    except OSError as e:
        raise DataFileError(f"Cannot read data file {path}: {e}") from e
    except YAMLError as e:
        raise DataFileError(f"Invalid data file {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DataFileError(f"Data file {path} must contain a mapping at the top level")

    return resolve_images(raw, base_dir)


__all__ = ["load_data", "resolve_images", "IMAGE_KEY"]
