"""
Outline input for msgtree.

Builds a forest from indented report text, one entry per line:

    info: build started
      compiled 12 modules
      2 warnings
    error: tests failed
      test_forest.py::test_insert

Indentation sets the parent. A line with deeper lines under it becomes a
group, "info:", "debug:", "warn:" and "error:" lines become severity groups,
and a blank line becomes a spacer. Adjacent plain leaf lines are kept together
as one multi-line message node.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .forest import Forest, Level, MsgTreeError, create_forest
from .logging import get_logger

logger = get_logger(__name__)


class OutlineError(MsgTreeError, ValueError):
    """Outline text whose indentation can't be turned into a tree."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}")


@dataclass
class OutlineEntry:
    """A single non-blank outline line, or a blank spacer."""
    line_number: int
    depth: int
    text: str
    blank: bool = False

    @property
    def level(self) -> Level | None:
        return None if self.blank else Level.from_label(self.text)

    @property
    def message(self) -> str:
        level = self.level
        if level is None:
            return self.text
        return self.text[len(level.label):].strip()


def parse_outline(lines: Iterable[str], indent: int = 2) -> list[OutlineEntry]:
    """Split raw lines into entries, dropping trailing blank lines."""
    entries: list[OutlineEntry] = []
    for i, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n").expandtabs(indent)
        text = line.strip()
        if not text:
            entries.append(OutlineEntry(line_number=i, depth=0, text="", blank=True))
            continue
        leading = len(line) - len(line.lstrip(" "))
        entries.append(OutlineEntry(line_number=i, depth=leading // indent, text=text))

    while entries and entries[-1].blank:
        entries.pop()
    return entries


class _Builder:
    """Stateful walk over outline entries."""

    def __init__(self, title: str):
        self.forest, root = create_forest(title)
        # parents[d] is the identity new nodes at depth d attach to
        self.parents: list[int] = [root]
        self.pending: list[str] = []
        self.pending_parent: int | None = None

    def flush(self) -> None:
        if self.pending:
            self.forest.add_messages(self.pending_parent, self.pending)
            self.pending = []
            self.pending_parent = None

    def add_break(self, following: OutlineEntry) -> None:
        """Spacer under the parent the next line will attach to."""
        self.flush()
        depth = min(following.depth, len(self.parents) - 1)
        self.forest.add_break(self.parents[depth])

    def add(self, entry: OutlineEntry, has_children: bool) -> None:
        if entry.depth > len(self.parents) - 1:
            raise OutlineError(
                entry.line_number,
                f"indented {entry.depth} levels but the line above allows at most {len(self.parents) - 1}",
            )
        del self.parents[entry.depth + 1:]
        parent = self.parents[entry.depth]

        level = entry.level
        if level is None and not has_children:
            if self.pending and self.pending_parent != parent:
                self.flush()
            self.pending.append(entry.message)
            self.pending_parent = parent
            return

        self.flush()
        if level is not None:
            index = self.forest.add_level(parent, level, entry.message)
        else:
            index = self.forest.add_group(parent, entry.message)
        self.parents.append(index)


def build_forest(title: str, lines: Iterable[str], indent: int = 2) -> Forest:
    """Build a forest titled `title` from indented outline lines."""
    if indent < 1:
        raise ValueError(f"indent must be >= 1, got {indent}")

    entries = parse_outline(lines, indent=indent)
    builder = _Builder(title)

    # following_entries[i] is the first non-blank entry after entries[i]
    following_entries: list[OutlineEntry | None] = [None] * len(entries)
    upcoming: OutlineEntry | None = None
    for i in range(len(entries) - 1, -1, -1):
        following_entries[i] = upcoming
        if not entries[i].blank:
            upcoming = entries[i]

    for entry, following in zip(entries, following_entries):
        if entry.blank:
            # A blank with nothing after it adds no spacing
            if following is not None:
                builder.add_break(following)
            continue
        has_children = following is not None and following.depth > entry.depth
        builder.add(entry, has_children)

    builder.flush()
    logger.debug("outline of %d line(s) built into %d node(s)", len(entries), len(builder.forest))
    return builder.forest
