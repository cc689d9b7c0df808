"""
CLI interface for msgtree.

Renders indented report text from a file or stdin as a box-drawing tree.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import LOG_LEVELS, ConfigError, get_config
from .forest import Forest, create_forest
from .logging import configure_logging, get_logger
from .outline import OutlineError, build_forest
from .render import Renderer
from .styles import COLOR_MODES, make_styler

logger = get_logger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="msgtree",
        description="Render indented report text as a box-drawing tree",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input file (reads from stdin if not provided)",
    )

    parser.add_argument(
        "--title",
        "-t",
        type=str,
        help="Title of the root node (default: file name, or 'stdin')",
    )

    parser.add_argument(
        "--color",
        "-c",
        choices=COLOR_MODES,
        help="Colour output: auto, always or never (default from config: auto)",
    )

    parser.add_argument(
        "--indent",
        "-i",
        type=int,
        help="Spaces per nesting level in the input (default from config: 2)",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostics level on stderr (default from config: WARNING)",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Render a built-in example tree and exit",
    )

    return parser.parse_args(args)


def read_input(filepath: str | None) -> tuple[str, str | None]:
    """Read from file or stdin, return (content, filename)."""
    if filepath:
        with open(filepath, encoding="utf-8") as f:
            return f.read(), filepath
    return sys.stdin.read(), None


def demo_forest() -> Forest:
    """Example forest using every node kind."""
    forest, root = create_forest("Example Tree")

    forest.add_info(root, "I am an info branch!")
    forest.add_messages(root, ["Or we can use plain messages!", "And more plain messages"])

    debug = forest.add_debug(root, "I am a debug branch!")
    forest.add_message(debug, "plain messages can be added to info/debug/warn/error branches too")
    forest.add_break(debug)
    warn = forest.add_warn(debug, "branches nest")
    forest.add_error(warn, "as deep as you need")

    forest.add_break(root)
    forest.add_message(root, "Done")
    return forest


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    try:
        cfg = get_config()
    except ConfigError as e:
        configure_logging("ERROR")
        logger.error("invalid configuration: %s", e)
        return 1

    configure_logging(parsed.log_level or cfg.logging.level)

    indent = parsed.indent if parsed.indent is not None else cfg.output.indent
    if indent < 1:
        logger.error("--indent must be >= 1, got %d", indent)
        return 1

    if parsed.demo:
        forest = demo_forest()
    else:
        try:
            content, filename = read_input(parsed.file)
        except FileNotFoundError:
            logger.error("file not found: %s", parsed.file)
            return 1
        except (OSError, UnicodeDecodeError) as e:
            logger.error("error reading input: %s", e)
            return 1

        title = parsed.title or (Path(filename).name if filename else "stdin")
        try:
            forest = build_forest(title, content.splitlines(), indent=indent)
        except OutlineError as e:
            logger.error("%s: %s", filename or "stdin", e)
            return 1

    if parsed.title and parsed.demo:
        logger.warning("--title is ignored with --demo")

    styler = make_styler(parsed.color or cfg.output.color)
    Renderer(styler=styler).render(forest)
    return 0


if __name__ == "__main__":
    sys.exit(main())
