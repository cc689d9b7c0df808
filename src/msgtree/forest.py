"""
Forest - the node store for msgtree.

A forest is an append-only list of nodes. A node's position in the list is its
identity: parents and children refer to each other by index, never by object.

Key invariant: a node can only name a parent that already exists, so the
structure can never contain a cycle or a forward reference.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from .logging import get_logger

logger = get_logger(__name__)

# Parent reference of a root node
NO_PARENT: int | None = None


class MsgTreeError(Exception):
    """Base class for msgtree errors."""


class DanglingParentError(MsgTreeError, ValueError):
    """A node was added under a parent that does not exist yet."""

    def __init__(self, parent: int, size: int):
        self.parent = parent
        self.size = size
        super().__init__(
            f"Failed to build tree: parent {parent} does not exist "
            f"(forest holds {size} node{'s' if size != 1 else ''}). "
            "Child nodes can't be added before their parent."
        )


class NodeIndexError(MsgTreeError, IndexError):
    """A child reference points past the end of the forest."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Node {index} out of range for forest of {size} nodes")


class Category(Enum):
    """What kind of line(s) a node renders as."""
    GROUP = "group"  # labelled branch, heading in messages[0]
    MESSAGES = "messages"  # one or more plain lines
    BREAK = "break"  # blank spacer line


class Level(Enum):
    """Severity attached to a group heading."""
    INFO = "info"
    DEBUG = "debug"
    WARN = "warn"
    ERROR = "error"

    @property
    def label(self) -> str:
        return f"{self.value}:"

    @classmethod
    def from_label(cls, text: str) -> Level | None:
        """Return the level whose label starts `text`, if any."""
        for level in cls:
            if text.startswith(level.label):
                return level
        return None


@dataclass
class Node:
    """A single entry in the forest."""
    category: Category
    messages: tuple[str, ...]
    parent: int | None = NO_PARENT
    children: list[int] = field(default_factory=list)
    level: Level | None = None

    @property
    def is_root(self) -> bool:
        return self.parent is NO_PARENT

    @property
    def heading(self) -> str:
        """First message, the title of a group."""
        return self.messages[0]


class Forest:
    """Append-only, index-addressed collection of nodes."""

    def __init__(self):
        self._nodes: list[Node] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Node:
        """Look up a node by identity. Negative indices are not identities."""
        if not 0 <= index < len(self._nodes):
            raise NodeIndexError(index, len(self._nodes))
        return self._nodes[index]

    def roots(self) -> Iterator[int]:
        """Identities of all top-level nodes, in append order."""
        for index, node in enumerate(self._nodes):
            if node.is_root:
                yield index

    def exists(self, index: int) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self._nodes)

    def insert(
        self,
        category: Category,
        parent: int | None,
        messages: Iterable[str],
        level: Level | None = None,
    ) -> int:
        """
        Append a node under `parent` and return its identity.

        Validation happens before anything is mutated, so a failed insert
        leaves the forest exactly as it was.
        """
        if parent is not NO_PARENT and not self.exists(parent):
            raise DanglingParentError(parent, len(self._nodes))

        if isinstance(messages, str):
            raise TypeError("messages must be a sequence of strings, not a single str")
        messages = tuple(messages)
        if not messages:
            raise ValueError(f"A {category.value} node needs at least one message")
        if category is Category.GROUP and len(messages) != 1:
            raise ValueError(f"A group node has exactly one heading, got {len(messages)} messages")
        if category is Category.BREAK and messages != ("",):
            raise ValueError("A break node carries no text")
        if level is not None and category is not Category.GROUP:
            raise ValueError(f"Only group nodes carry a level, got {category.value}")

        index = len(self._nodes)
        self._nodes.append(Node(category=category, messages=messages, parent=parent, level=level))
        if parent is not NO_PARENT:
            self._nodes[parent].children.append(index)

        logger.debug("node %d (%s) added under %s", index, category.value, parent)
        return index

    # Convenience wrappers

    def add_group(self, parent: int | None, message: str) -> int:
        return self.insert(Category.GROUP, parent, [message])

    def add_level(self, parent: int | None, level: Level, message: str) -> int:
        """Add a group headed by a severity label."""
        return self.insert(Category.GROUP, parent, [message], level=level)

    def add_info(self, parent: int | None, message: str) -> int:
        return self.add_level(parent, Level.INFO, message)

    def add_debug(self, parent: int | None, message: str) -> int:
        return self.add_level(parent, Level.DEBUG, message)

    def add_warn(self, parent: int | None, message: str) -> int:
        return self.add_level(parent, Level.WARN, message)

    def add_error(self, parent: int | None, message: str) -> int:
        return self.add_level(parent, Level.ERROR, message)

    def add_message(self, parent: int | None, message: str) -> int:
        return self.insert(Category.MESSAGES, parent, [message])

    def add_messages(self, parent: int | None, messages: Iterable[str]) -> int:
        return self.insert(Category.MESSAGES, parent, messages)

    def add_break(self, parent: int | None) -> int:
        return self.insert(Category.BREAK, parent, [""])


def create_forest(title: str) -> tuple[Forest, int]:
    """Start a new forest with a single titled root group."""
    forest = Forest()
    root = forest.add_group(NO_PARENT, title)
    return forest, root


def insert(
    forest: Forest,
    category: Category,
    parent: int | None,
    messages: Iterable[str],
    level: Level | None = None,
) -> int:
    """Module-level form of `Forest.insert`."""
    return forest.insert(category, parent, messages, level=level)
