#!/usr/bin/env python
"""Command line access to the SGF tools.

Usage:
    sgf-service serve --port 8002
    sgf-service info game.sgf
    sgf-service diagram game.sgf --move 50 --format svg -o move50.svg
    sgf-service diagram game.sgf --range 10 20 --theme modern -o range.png
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import load_settings
from .errors import ConfigurationError
from .models import ImageFormat, Theme
from .tools import handle_get_sgf_diagram, handle_get_sgf_info

logger = logging.getLogger(__name__)


def _read_sgf(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _diagram_arguments(args: argparse.Namespace, sgf_content: str) -> dict[str, Any]:
    arguments: dict[str, Any] = {"sgfContent": sgf_content}
    if args.move is not None:
        arguments["moveNumber"] = args.move
    if args.range is not None:
        arguments["startMove"], arguments["endMove"] = args.range
    for key, value in (
        ("width", args.width),
        ("height", args.height),
        ("theme", args.theme),
        ("format", args.format),
    ):
        if value is not None:
            arguments[key] = value
    if args.no_coords:
        arguments["coordLabels"] = False
    if args.no_numbers:
        arguments["moveNumbers"] = False
    return arguments


def _print_error(result: dict[str, Any]) -> int:
    error = result["error"]
    print(f"Error [{error['type']}]: {error['message']}", file=sys.stderr)
    return 1


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = load_settings()
    port = args.port if args.port is not None else settings.port
    uvicorn.run("sgf_service.main:app", host=args.host, port=port)
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    result = handle_get_sgf_info({"sgfContent": _read_sgf(args.file)})
    if not result["success"]:
        return _print_error(result)
    print(json.dumps(result["data"], indent=2, ensure_ascii=False))
    return 0


def cmd_diagram(args: argparse.Namespace) -> int:
    arguments = _diagram_arguments(args, _read_sgf(args.file))
    result = asyncio.run(handle_get_sgf_diagram(arguments))
    if not result["success"]:
        return _print_error(result)

    data = result["data"]
    Path(args.output).write_bytes(base64.b64decode(data["imageData"]))
    print(
        f"Wrote {args.output} ({data['mimeType']}, {data['width']}x{data['height']}, "
        f"{data['movesCovered']} moves covered)"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sgf-service",
        description="SGF game information and board diagrams",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: SGF_SERVICE_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    info = subparsers.add_parser("info", help="Print game information as JSON")
    info.add_argument("file", help="SGF file path, or - for stdin")
    info.set_defaults(func=cmd_info)

    diagram = subparsers.add_parser("diagram", help="Render a board diagram")
    diagram.add_argument("file", help="SGF file path, or - for stdin")
    selector = diagram.add_mutually_exclusive_group()
    selector.add_argument("--move", type=int, help="Position to show (0-based)")
    selector.add_argument(
        "--range",
        type=int,
        nargs=2,
        metavar=("START", "END"),
        help="Move range to show (0-based positions)",
    )
    diagram.add_argument("--width", type=int)
    diagram.add_argument("--height", type=int)
    diagram.add_argument("--theme", choices=[t.value for t in Theme])
    diagram.add_argument("--format", choices=[f.value for f in ImageFormat])
    diagram.add_argument("--no-coords", action="store_true", help="Hide coordinate labels")
    diagram.add_argument("--no-numbers", action="store_true", help="Hide move numbers")
    diagram.add_argument("-o", "--output", required=True, help="Output image path")
    diagram.set_defaults(func=cmd_diagram)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = args.log_level or load_settings().log_level
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        return args.func(args)
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
