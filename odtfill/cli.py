from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_options
from .data import load_data
from .errors import OdtFillUserError
from .odf.package import fill_odt_template
from .odf.text_content import get_odt_text_content
from .types import FillOptions
from .version import tool_version

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="odtfill",
        description="Fill OpenDocument Text templates with data",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_fill = sub.add_parser("fill", help="Fill a template, write the resulting .odt")
    sp_fill.add_argument("template", help="path to the .odt template")
    sp_fill.add_argument("data", help="YAML or JSON data file, - for stdin")
    sp_fill.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="output .odt (stdout when omitted)",
    )
    sp_fill.add_argument(
        "--config",
        metavar="FILE",
        help="YAML options file (keep, pictures-dir, marker-containers)",
    )
    sp_fill.add_argument(
        "--keep",
        action="append",
        metavar="PATTERN",
        help="additional archive entry to keep, gitwildmatch pattern (repeatable)",
    )

    sp_text = sub.add_parser("text", help="Print the plain text of an .odt")
    sp_text.add_argument("file", help="path to the .odt document")

    return p


def _setup_logging(debug: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("odtfill")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)


def _opts(ns: argparse.Namespace) -> FillOptions:
    options = load_options(Path(ns.config)) if ns.config else FillOptions()
    if ns.keep:
        options = options.with_extra_entries(tuple(ns.keep))
    return options


def _read_bytes(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e}") from e


def _run_fill(ns: argparse.Namespace) -> int:
    options = _opts(ns)
    template = _read_bytes(ns.template)
    data = load_data(ns.data)

    result = fill_odt_template(template, data, options=options)

    if ns.output:
        Path(ns.output).write_bytes(result)
        logger.debug("Wrote %s (%d bytes)", ns.output, len(result))
    else:
        sys.stdout.buffer.write(result)
        sys.stdout.flush()
    return 0


def _run_text(ns: argparse.Namespace) -> int:
    sys.stdout.write(get_odt_text_content(_read_bytes(ns.file)))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.debug)

    try:
        if ns.cmd == "fill":
            return _run_fill(ns)
        if ns.cmd == "text":
            return _run_text(ns)
    except OdtFillUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
