#!/usr/bin/env python3
"""
Render Scene Script.

Render a YAML scene file to PostScript / EPS, or check an emitted file.

Usage:
    python -m pslib.scripts.render_scene render poster.yaml -o poster.ps
    python -m pslib.scripts.render_scene render badge.yaml -o badge.eps --kind eps
    python -m pslib.scripts.render_scene check poster.ps

The ``check`` command scans the file with the markup checker and exits
with status 1 if any gsave / grestore violation is found.
"""

from __future__ import annotations

import argparse
import dataclasses
import io
import logging
import sys
from pathlib import Path

from pslib.configs.loader import load_config
from pslib.document.document import DocumentKind
from pslib.errors import PSLibError
from pslib.scene import load_scene, render_scene
from pslib.utils.fs import atomic_write_text
from pslib.utils.logging_config import push_context, setup_logging
from pslib.utils.markup_vm import MarkupVM

logger = logging.getLogger(__name__)


def _kind_from_args(args: argparse.Namespace) -> DocumentKind | None:
    if args.kind:
        return DocumentKind(args.kind)
    if args.output.suffix.lower() == ".eps":
        return DocumentKind.EPS
    return None


def cmd_render(args: argparse.Namespace, settings) -> int:
    push_context(scene=args.scene.name)
    scene = load_scene(args.scene)

    buf = io.StringIO()
    count = render_scene(
        scene,
        buf,
        settings,
        base_dir=args.scene.parent,
        kind=_kind_from_args(args),
    )
    try:
        atomic_write_text(args.output, buf.getvalue(), encoding="latin-1")
    except UnicodeEncodeError as exc:
        raise PSLibError(f"Output is not latin-1 text: {exc}") from exc
    logger.info("Wrote %d page(s) to %s", count, args.output)
    return 0


def cmd_check(args: argparse.Namespace, settings) -> int:
    vm = MarkupVM()
    vm.load_file(args.file)
    result = vm.run()

    print(f"File:        {args.file}")
    print(f"Pages:       {len(result['pages']) or result['showpages']}")
    print(f"Max depth:   {result['max_depth']}")
    print(f"Final depth: {result['final_depth']}")
    if result['violations']:
        print(f"Violations ({len(result['violations'])}):")
        for msg in result['violations']:
            print(f"  - {msg}")
        return 1
    print("OK: graphics state balanced")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pslib-render",
        description="Render scene files to PostScript / EPS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Settings file path (default: bundled pslib.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a scene file")
    render.add_argument("scene", type=Path, help="Scene YAML file")
    render.add_argument(
        "--output",
        "-o",
        type=Path,
        required=True,
        help="Output .ps / .eps file",
    )
    render.add_argument(
        "--kind",
        choices=[k.value for k in DocumentKind],
        help="Output kind (default: from file suffix, scene, then settings)",
    )
    render.set_defaults(func=cmd_render)

    check = sub.add_parser("check", help="Check gsave/grestore balance of a file")
    check.add_argument("file", type=Path, help="PostScript file")
    check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_config(args.config)
    except (PSLibError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    log = settings.logging
    setup_logging(
        "DEBUG" if args.verbose else log.level,
        log.file,
        json=log.json,
        color=log.color,
        console=log.console,
        rotate=dataclasses.asdict(log.rotate) if log.rotate else None,
        context={"app": "pslib-render"},
    )

    try:
        return args.func(args, settings)
    except (PSLibError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
