from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .types import FillOptions

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")

_KNOWN_KEYS = ("keep", "pictures-dir", "marker-containers")


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _string_list(raw: Dict[str, Any], key: str, path: Path) -> Tuple[str, ...]:
    value = raw[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' in {path} must be a list of strings")
    return tuple(value)


def options_from_mapping(raw: Dict[str, Any], path: Path, base: Optional[FillOptions] = None) -> FillOptions:
    """Applies the keys of an options mapping on top of base options."""
    unknown = sorted(k for k in raw if k not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown option(s) in {path}: {', '.join(map(str, unknown))}")

    options = base or FillOptions()

    if "keep" in raw:
        options = options.with_extra_entries(_string_list(raw, "keep", path))

    pictures_dir = options.pictures_dir
    if "pictures-dir" in raw:
        pictures_dir = raw["pictures-dir"]
        if not isinstance(pictures_dir, str) or not pictures_dir.strip("/"):
            raise ConfigError(f"'pictures-dir' in {path} must be a non-empty string")
        pictures_dir = pictures_dir.strip("/")

    containers = options.marker_containers
    if "marker-containers" in raw:
        containers = _string_list(raw, "marker-containers", path)

    return FillOptions(
        kept_entries=options.kept_entries,
        pictures_dir=pictures_dir,
        marker_containers=containers,
    )


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_options(path: Path) -> FillOptions:
    """
    Load a fill options file.

    • An empty file gives the default options.
    • Extra `keep` patterns are added to the default kept entries.
    • Unknown keys and values of the wrong type raise ConfigError.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read options file {path}: {e}") from e
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Options file {path} must contain a mapping")

    return options_from_mapping(raw, path)


__all__ = ["load_options", "options_from_mapping"]
