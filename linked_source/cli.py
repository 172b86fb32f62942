# -*- coding: utf-8 -*-

"""
Command-line entry point for inspecting and exporting linked documents.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import lxml.html
from lxml import etree as ET

from linked_source.config import ConfigManager
from linked_source.core.context import build_index_for_file, visual_state_from_config
from linked_source.core.exceptions import DuplicateIdentifier
from linked_source.core.index import DUPLICATE_POLICIES
from linked_source.core.models import ShareState
from linked_source.core.services import ExportService, HighlightCoordinator
from linked_source.core.uri import DocumentLocation
from linked_source.logging_config import setup_logging
from linked_source.version import get_app_version

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linked-source",
        description="Inspect definition/reference links in rendered source documents.",
    )
    parser.add_argument("--version", action="version", version=f"linked-source {get_app_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    p_index = sub.add_parser("index", help="List identifiers with their reference counts")
    _add_index_options(p_index)

    p_export = sub.add_parser("export", help="Print the embeddable iframe snippet")
    _add_index_options(p_export)
    p_export.add_argument("--uri", required=True, help="Published URI of the document")
    p_export.add_argument("--id", dest="identifier", help="Definition to select")
    p_export.add_argument("--width", type=int, help="Frame width")
    p_export.add_argument("--height", type=int, help="Frame height")

    p_highlight = sub.add_parser("highlight", help="Mark a definition and its references")
    _add_index_options(p_highlight)
    p_highlight.add_argument("--id", dest="identifier", required=True, help="Definition to highlight")
    p_highlight.add_argument("-o", "--output", help="Output file (default: stdout)")
    return parser


def _add_index_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="HTML document")
    parser.add_argument("--document-path", help="Canonical path link targets are matched against")
    parser.add_argument("--scope", help="XPath limiting which subtrees are annotated")
    parser.add_argument("--duplicates", choices=DUPLICATE_POLICIES, help="Duplicate identifier policy")


def _cmd_index(args: argparse.Namespace) -> int:
    tree, index = build_index_for_file(args.file, args.document_path, args.scope, args.duplicates)
    for identifier in index:
        print(f"{identifier}\t{len(index.references_of(identifier))}")
    for record in index.duplicates:
        print(
            f"duplicate: {record.identifier} (kept line {record.kept.sourceline}, "
            f"discarded line {record.discarded.sourceline})",
            file=sys.stderr,
        )
    for identifier, references in index.dangling_references().items():
        print(f"dangling: {identifier} ({len(references)} references)", file=sys.stderr)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    tree, index = build_index_for_file(args.file, args.document_path, args.scope, args.duplicates)
    if args.identifier and args.identifier not in index:
        print(f"Unknown identifier: {args.identifier}", file=sys.stderr)
        return 1
    export_cfg = ConfigManager().get_export_config()
    share = ShareState(
        identifier=args.identifier,
        width=args.width or int(export_cfg.get("default_width", 700)),
        height=args.height or int(export_cfg.get("default_height", 500)),
    )
    exporter = ExportService()
    if export_cfg.get("iframe_template"):
        exporter.template = export_cfg["iframe_template"]
    base = DocumentLocation(args.uri).base
    print(exporter.snippet(base, share))
    return 0


def _cmd_highlight(args: argparse.Namespace) -> int:
    tree, index = build_index_for_file(args.file, args.document_path, args.scope, args.duplicates)
    definition = index.definition_of(args.identifier)
    if definition is None:
        print(f"Unknown identifier: {args.identifier}", file=sys.stderr)
        return 1
    coordinator = HighlightCoordinator(index, visual_state_from_config(ConfigManager().get_highlight_config()))
    coordinator.highlight_pair(definition)
    html = lxml.html.tostring(tree.getroot(), encoding="unicode", doctype=tree.docinfo.doctype or None)
    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        logger.info("Highlighted document written to %s", args.output)
    else:
        print(html)
    return 0


_COMMANDS = {
    "index": _cmd_index,
    "export": _cmd_export,
    "highlight": _cmd_highlight,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Configure logging, parse arguments and dispatch the sub-command.
    """
    setup_logging()
    args = _build_parser().parse_args(argv)
    try:
        return _COMMANDS[args.command](args)
    except DuplicateIdentifier as exc:
        print(f"Duplicate identifier: {exc}", file=sys.stderr)
        return 1
    except (OSError, ET.ParserError) as exc:
        print(f"Cannot read {args.file}: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
