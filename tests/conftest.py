import json
import logging
from pathlib import Path

import pytest

from tests.infrastructure.odt_builders import PNG_BYTES, make_odt


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    """Template with a variable, a loop and an image marker."""
    path = tmp_path / "modèle.odt"
    path.write_bytes(make_odt(
        "<text:h>{titre}</text:h>"
        "<text:p>{#each lignes as l}</text:p>"
        "<text:p>{l}</text:p>"
        "<text:p>{/each}</text:p>"
        "<text:p>{#image logo}</text:p>"
    ))
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data file directory holding pictures/logo.png."""
    root = tmp_path / "données"
    (root / "pictures").mkdir(parents=True)
    (root / "pictures" / "logo.png").write_bytes(PNG_BYTES)
    return root


@pytest.fixture
def yaml_data_file(data_dir: Path) -> Path:
    path = data_dir / "data.yaml"
    path.write_text(
        "titre: Rapport\n"
        "lignes:\n"
        "  - un\n"
        "  - deux\n"
        "logo:\n"
        "  $image: pictures/logo.png\n"
        "  width: 2cm\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def json_data_file(data_dir: Path) -> Path:
    path = data_dir / "data.json"
    path.write_text(json.dumps({"titre": "JSON", "lignes": [1, 2, 3], "logo": None}), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_odtfill_logging():
    # the CLI installs its own handler on the package logger
    yield
    logger = logging.getLogger("odtfill")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
