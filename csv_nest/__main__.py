"""Interface for ``python -m csv_nest``."""

from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser
from functools import partial
from typing import TYPE_CHECKING

import httpx

from ._version import version
from .errors import CSVNestError
from .parser import CSVOptions, CSVParser
from .readers import CSVReader


if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = ["main"]

logger = logging.getLogger(__name__)


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="csv_nest", description="Convert flat CSV columns into nested JSON.")
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument("source", help="CSV file path or http(s) URL")
    _ = parser.add_argument("--delimiter", default=".", help="array column delimiter (default: %(default)s)")
    _ = parser.add_argument("--index-pos", type=int, default=1, help="segment holding the array index")
    _ = parser.add_argument("--indent", type=int, default=None, help="indent the JSON output")
    _ = parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: %(default)s)",
    )
    return parser


def main(args: Sequence[str] | None = None) -> int:
    """Convert a CSV file or URL to nested JSON and return the exit status."""
    parser = _build_parser()
    options = parser.parse_args(args)
    logging.basicConfig(level=options.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        csv_options = CSVOptions(delimiter=options.delimiter, index_pos=options.index_pos)
    except ValueError as error:
        parser.error(str(error))

    csv_parser = CSVParser(csv_options, json_encoder=partial(json.dumps, indent=options.indent))
    try:
        with CSVReader() as reader:
            if options.source.startswith(("http://", "https://")):
                records = reader.from_url(options.source)
            else:
                records = reader.from_path(options.source)
        output = csv_parser.to_json(records)
    except (CSVNestError, OSError, httpx.HTTPError) as error:
        logger.debug("Conversion failed", exc_info=True)
        print(f"csv_nest: error: {error}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
