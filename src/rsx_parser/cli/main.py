"""Main CLI entry point for the rsx-parse command-line tool.

Parses files containing rsx markup and prints the resulting node trees, or
dumps the token stream the parser sees.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rsx_parser import __version__
from rsx_parser.api import RsxParser
from rsx_parser.shared import ConfigError, ParserConfig, RsxSyntaxError
from rsx_parser.shared.logging import get_logger
from rsx_parser.tokenization import RsxTokenizer, Token
from rsx_parser.tree import Node

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE_ERROR = 2

logger = get_logger(__name__, None, "cli")


def load_config(config_path: Optional[Path], flatten: bool = False) -> ParserConfig:
    """Load parser configuration from a JSON file, then apply CLI flags.

    Raises:
        ConfigError: When the file is missing, unreadable or invalid
    """
    data: Dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must hold a JSON object")
    if flatten:
        data["flatten"] = True
    return ParserConfig.from_dict(data)


def parse_file(parser: RsxParser, file_path: Path) -> Dict[str, Any]:
    """Parse a single file and return a JSON-ready result."""
    try:
        source = file_path.read_text(encoding="utf-8")
        nodes = parser.parse(source)
    except RsxSyntaxError as e:
        position = e.position
        return {
            "file": str(file_path),
            "success": False,
            "error": e.message,
            "line": position.line if position else None,
            "column": position.column if position else None,
        }
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read file", extra={"file": str(file_path)})
        return {"file": str(file_path), "success": False, "error": str(e)}

    return {
        "file": str(file_path),
        "success": True,
        "nodes": [node.to_dict() for node in nodes],
        "_nodes": nodes,
    }


def render_outline(nodes: List[Node], indent: int = 0) -> List[str]:
    """Render nodes as an indented outline, one node per line."""
    lines: List[str] = []
    pad = "  " * indent
    for node in nodes:
        kind = node.node_type.name.lower()
        if node.is_element:
            attrs = "".join(
                f" {a.name_as_string()}" + (f"={a.value}" if a.value is not None else "")
                for a in node.attributes
            )
            lines.append(f"{pad}{kind} <{node.name_as_string()}{attrs}>")
            lines.extend(render_outline(node.children, indent + 1))
        else:
            lines.append(f"{pad}{kind} {node.value}")
    return lines


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format parse results for output."""
    if format_type == "json":
        public = [
            {key: value for key, value in result.items() if not key.startswith("_")}
            for result in results
        ]
        return json.dumps(public, indent=2)

    lines: List[str] = []
    for result in results:
        lines.append(f"== {result['file']}")
        if result["success"]:
            lines.extend(render_outline(result["_nodes"]))
        else:
            location = ""
            if result.get("line") is not None:
                location = f" (line {result['line']}, column {result['column']})"
            lines.append(f"error: {result['error']}{location}")
    return "\n".join(lines)


def format_tokens(tokens: List[Token], indent: int = 0) -> List[str]:
    """Render a token tree, one token per line."""
    lines: List[str] = []
    pad = "  " * indent
    for token in tokens:
        where = f"{token.position.line}:{token.position.column}"
        if token.is_group():
            assert token.delimiter is not None
            lines.append(f"{pad}{where} GROUP {token.delimiter.open}{token.delimiter.close}")
            lines.extend(format_tokens(list(token.stream), indent + 1))
        else:
            detail = token.type.name
            if token.literal_kind is not None:
                detail += f"({token.literal_kind.name})"
            if token.is_joint:
                detail += " joint"
            lines.append(f"{pad}{where} {detail} {token.value}")
    return lines


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="rsx-parse",
        description="Parse JSX-like markup embedded in host-language tokens"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse markup files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to parse"
    )
    parse_parser.add_argument(
        "--flatten",
        action="store_true",
        help="Return a flat pre-order node list instead of a tree"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file path"
    )

    # Tokens command
    tokens_parser = subparsers.add_parser("tokens", help="Dump the token stream of a file")
    tokens_parser.add_argument("path", type=Path, help="File to tokenize")

    return parser


def cmd_parse(args: argparse.Namespace) -> int:
    """Execute parse command."""
    try:
        config = load_config(args.config, flatten=args.flatten)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    parser = RsxParser(config)
    results = [parse_file(parser, path) for path in args.paths]
    output = format_results(results, args.format)

    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)

    return EXIT_OK if all(r["success"] for r in results) else EXIT_PARSE_ERROR


def cmd_tokens(args: argparse.Namespace) -> int:
    """Execute tokens command."""
    try:
        source = args.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        stream = RsxTokenizer().tokenize(source)
    except RsxSyntaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR

    print("\n".join(format_tokens(list(stream))))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.command == "parse":
        return cmd_parse(args)
    if args.command == "tokens":
        return cmd_tokens(args)

    parser.print_help()
    return EXIT_USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
