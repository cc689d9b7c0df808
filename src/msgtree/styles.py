"""
Terminal styling for rendered trees.

The renderer never emits escape codes itself: it hands each span and a
`StyleTag` to a styler. Whether colour is used at all is the styler's call.
"""

from __future__ import annotations

from enum import Enum

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from .forest import Level

COLOR_MODES = ("auto", "always", "never")


class StyleTag(Enum):
    """Style categories, valued with their rich style definition."""
    STRUCTURE = "bold bright_white"
    INFO = "bold bright_cyan"
    DEBUG = "bold bright_magenta"
    WARN = "bold bright_yellow"
    ERROR = "bold bright_red"

    @classmethod
    def for_level(cls, level: Level) -> StyleTag:
        return _LEVEL_TAGS[level]


_LEVEL_TAGS = {
    Level.INFO: StyleTag.INFO,
    Level.DEBUG: StyleTag.DEBUG,
    Level.WARN: StyleTag.WARN,
    Level.ERROR: StyleTag.ERROR,
}


class Styler:
    """Applies terminal styles to text spans using rich."""

    def __init__(self, color_system: ColorSystem | None = ColorSystem.STANDARD):
        self._color_system = color_system
        self._styles = {tag: Style.parse(tag.value) for tag in StyleTag}

    @property
    def enabled(self) -> bool:
        return self._color_system is not None

    def style(self, text: str, tag: StyleTag) -> str:
        """Return `text` wrapped in the escape codes for `tag`."""
        if not text or self._color_system is None:
            return text
        return self._styles[tag].render(text, color_system=self._color_system)


class PlainStyler(Styler):
    """Styler that leaves every span untouched."""

    def __init__(self):
        super().__init__(color_system=None)


def make_styler(mode: str = "auto", console: Console | None = None) -> Styler:
    """
    Build a styler for a colour mode.

    "always" forces basic 16-colour output, "never" disables colour, and
    "auto" colours only when the console is a terminal and NO_COLOR is unset.
    """
    if mode not in COLOR_MODES:
        raise ValueError(f"Unknown color mode: {mode!r} (expected one of {', '.join(COLOR_MODES)})")

    if mode == "always":
        return Styler(ColorSystem.STANDARD)
    if mode == "never":
        return PlainStyler()

    console = console or Console()
    if console.is_terminal and not console.no_color:
        return Styler(ColorSystem.STANDARD)
    return PlainStyler()
