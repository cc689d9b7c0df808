"""
Tree renderer for msgtree.

Walks each root of a forest depth-first and turns it into terminal lines.
The shape of the tree lives entirely in the prefix string threaded through
the traversal:

- a child of a group or a non-final child of a message list extends the
  prefix with "   │"
- the final child of a message list extends it with "   └─"
- a line's own connector comes from rewriting the rightmost " │" in its
  prefix, into " ├─" for a branch or " │ " for a bar-only line
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from .forest import Category, Forest, Node
from .logging import get_logger
from .styles import StyleTag, Styler

logger = get_logger(__name__)

ROOT_PREFIX = " "
CONTINUATION = " │"
BRANCH = " ├─"
SPACER = " │ "
OPEN_CHILD = "   │"
LAST_CHILD = "   └─"
CLOSE_MARK = "←"

Sink = Callable[[str], None]


def replace_last(text: str, old: str, new: str) -> str:
    """Replace the rightmost occurrence of `old` in `text` with `new`."""
    pos = text.rfind(old)
    if pos == -1:
        return text
    return text[:pos] + new + text[pos + len(old):]


def stdout_sink(line: str) -> None:
    sys.stdout.write(line + "\n")


class Renderer:
    """Renders a forest through an injected styler and output sink."""

    def __init__(self, styler: Styler | None = None, sink: Sink | None = None):
        self.styler = styler if styler is not None else Styler()
        self.sink = sink if sink is not None else stdout_sink

    def render(self, forest: Forest) -> None:
        """Write every line of the forest to the sink."""
        for line in self.lines(forest):
            self.sink(line)

    def lines(self, forest: Forest) -> list[str]:
        """Render the forest to a list of lines without writing anything."""
        out: list[str] = []
        roots = list(forest.roots())
        logger.debug("rendering %d root(s) from %d node(s)", len(roots), len(forest))
        for index in roots:
            self._render_tree(forest, index, out)
        return out

    def _structure(self, text: str) -> str:
        return self.styler.style(text, StyleTag.STRUCTURE)

    def _heading(self, node: Node) -> str:
        if node.level is None:
            return node.heading
        label = self.styler.style(node.level.label, StyleTag.for_level(node.level))
        return f"{label} {node.heading}"

    def _render_tree(self, forest: Forest, root: int, out: list[str]) -> None:
        # Explicit stack so tree depth is not bounded by the recursion limit.
        # Entries are (index, prefix) for a node, or (None, line) for a
        # closing line that must follow a group's children.
        stack: list[tuple[int | None, str]] = [(root, ROOT_PREFIX)]

        while stack:
            index, prefix = stack.pop()
            if index is None:
                out.append(prefix)
                continue

            # Raises NodeIndexError for a reference past the end of the forest
            node = forest[index]

            if node.category is Category.BREAK:
                out.append(self._structure(replace_last(prefix, CONTINUATION, SPACER)))

            elif node.category is Category.GROUP:
                connector = replace_last(prefix, CONTINUATION, BRANCH)
                out.append(f"{self._structure(connector)} {self._heading(node)}")

                if node.children:
                    stack.append((None, f"{self._structure(prefix + LAST_CHILD)} {CLOSE_MARK}"))
                for child in reversed(node.children):
                    stack.append((child, prefix + OPEN_CHILD))

            elif node.category is Category.MESSAGES:
                for i, message in enumerate(node.messages):
                    replacement = BRANCH if i == 0 else SPACER
                    line_prefix = replace_last(prefix, CONTINUATION, replacement)
                    out.append(f"{self._structure(line_prefix)} {message}")

                last = len(node.children) - 1
                for i in range(last, -1, -1):
                    extension = LAST_CHILD if i == last else OPEN_CHILD
                    stack.append((node.children[i], prefix + extension))


def render_lines(forest: Forest, styler: Styler | None = None) -> list[str]:
    """Render a forest to lines using `styler` (default: basic colours)."""
    return Renderer(styler=styler).lines(forest)


def render(forest: Forest, styler: Styler | None = None, sink: Sink | None = None) -> None:
    """Render a forest and write each line to `sink` (default: stdout)."""
    Renderer(styler=styler, sink=sink).render(forest)
