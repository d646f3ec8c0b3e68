"""Main CLI entry point for the xmlpicker command-line tool.

Streams one or more XML documents and writes every selected sub-document
either as JSON (one object per line) or as a standalone XML fragment.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, TextIO

from xmlpicker import __version__
from xmlpicker.api import XMLPicker
from xmlpicker.export import SimpleMapper, XMLExporter, XMLWriter
from xmlpicker.shared import (
    ConfigError,
    NamespaceMode,
    PickerConfig,
    PickerError,
    configure_logging,
    get_logger,
)
from xmlpicker.tree import Node

ERROR_PREFIX = "xmlpicker: "


class JSONProcessor:
    """Writes each match as a JSON object followed by a newline."""

    def __init__(self, out: TextIO, pretty: bool = False) -> None:
        self.out = out
        self.indent = 2 if pretty else None
        self.mapper = SimpleMapper()

    def process(self, node: Node) -> None:
        self.out.write(json.dumps(self.mapper.from_node(node), indent=self.indent,
                                  ensure_ascii=False))
        self.out.write("\n")

    def finish(self) -> None:
        self.out.flush()


class XMLProcessor:
    """Writes each match wrapped in its ancestors, one fragment per line."""

    def __init__(self, out: TextIO, namespace_mode: NamespaceMode) -> None:
        self.writer = XMLWriter(out)
        self.exporter = XMLExporter(self.writer, namespace_mode)

    def process(self, node: Node) -> None:
        self.exporter.encode_match(node)
        self.writer.write_raw("\n")

    def finish(self) -> None:
        self.writer.flush()


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xmlpicker",
        description="Stream XML documents and extract the sub-documents a path selects",
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Output format")
    for command, help_text in (
        ("json", "Write each match as a JSON object"),
        ("xml", "Write each match as an XML fragment"),
    ):
        command_parser = subparsers.add_parser(command, help=help_text)
        command_parser.add_argument(
            "files",
            nargs="*",
            default=["-"],
            help="Input files, optionally gzip compressed (default: - for stdin)"
        )
        command_parser.add_argument(
            "--selector", "-s",
            help="Path selector such as /feed/entry or /*/ (default: root element)"
        )
        command_parser.add_argument(
            "--namespace", "-n",
            choices=[mode.value for mode in NamespaceMode],
            help="Namespace handling (default: prefix)"
        )
        command_parser.add_argument(
            "--pretty",
            action="store_true",
            help="Indent JSON output"
        )
        command_parser.add_argument(
            "--max-depth",
            type=int,
            help="Maximum element nesting depth"
        )
        command_parser.add_argument(
            "--max-children",
            type=int,
            help="Maximum number of retained children per element"
        )
        command_parser.add_argument(
            "--max-tokens",
            type=int,
            help="Maximum number of tokens per document"
        )
        command_parser.add_argument(
            "--config", "-c",
            type=Path,
            help="JSON configuration file path"
        )

    return parser


def build_config(args: argparse.Namespace) -> PickerConfig:
    """Combine an optional configuration file with command line options.

    Options given on the command line win over the file.
    """
    if args.config:
        config = PickerConfig.from_json(args.config.read_text())
    else:
        config = PickerConfig.default()

    overrides: dict = {}
    if args.selector is not None:
        overrides["selector"] = args.selector
    if args.namespace is not None:
        overrides["namespace_mode"] = args.namespace
    if args.max_depth is not None:
        overrides["limits__max_depth"] = args.max_depth
    if args.max_children is not None:
        overrides["limits__max_children"] = args.max_children
    if args.max_tokens is not None:
        overrides["limits__max_tokens"] = args.max_tokens
    return config.override(**overrides) if overrides else config


def format_error(error: Exception) -> str:
    """Render an error for stderr with the tool's message prefix."""
    message = str(error)
    if message.startswith(ERROR_PREFIX):
        return message
    return ERROR_PREFIX + message


def cmd_pick(args: argparse.Namespace) -> int:
    """Handle the json and xml commands."""
    logger = get_logger(__name__, None, "cli")
    try:
        config = build_config(args)
    except (ConfigError, OSError) as e:
        print(format_error(e), file=sys.stderr)
        return 1

    processor: Any
    if args.command == "json":
        processor = JSONProcessor(sys.stdout, args.pretty)
    else:
        processor = XMLProcessor(sys.stdout, config.namespace_mode)

    picker = XMLPicker(config)
    try:
        for name in args.files:
            logger.info("Processing input", extra={"file": name})
            for node in picker.pick_file(name):
                processor.process(node)
    except (PickerError, OSError, EOFError) as e:
        processor.finish()
        print(format_error(e), file=sys.stderr)
        return 1

    processor.finish()
    logger.info("Processing finished", extra=picker.statistics)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose, args.quiet)

    try:
        return cmd_pick(args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
