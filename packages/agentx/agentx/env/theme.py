"""Rendering themes for the AgentX grid."""

from enum import Enum

from pydantic import BaseModel


class Theme(str, Enum):
    """Grid rendering themes."""

    ASCII = "ascii"
    UNICODE = "unicode"
    RICH = "rich"


DEFAULT_THEME = Theme.ASCII


class ThemeSymbolSet(BaseModel):
    """Symbol set for a specific theme.

    Attributes
    ----------
    target : str
        Symbol representing the target cell.
    obstacle : str
        Symbol representing a blocked cell.
    up : str
        Agent facing up.
    down : str
        Agent facing down.
    left : str
        Agent facing left.
    right : str
        Agent facing right.
    empty : str
        Symbol for an empty cell.
    """

    target: str
    obstacle: str
    up: str
    down: str
    left: str
    right: str
    empty: str


class DarkColorRichStyleConfig(BaseModel):
    """Rich styles for the grid on a dark terminal background."""

    target_style: str = "bold green"
    obstacle_style: str = "bold grey50"
    agent_style: str = "bold blue"
    empty_style: str = "dim grey93"
    grid_background: str = "bold grey93"


THEME_SYMBOLS = {
    Theme.ASCII: ThemeSymbolSet(
        target="*",
        obstacle="#",
        up="^",
        down="v",
        left="<",
        right=">",
        empty=".",
    ),
    Theme.UNICODE: ThemeSymbolSet(
        target="◆",
        obstacle="×",
        up="↑",
        down="↓",
        left="←",
        right="→",
        empty="·",
    ),
    Theme.RICH: ThemeSymbolSet(
        target="⬢",
        obstacle="×",
        up="▲",
        down="▼",
        left="◀",
        right="▶",
        empty="·",
    ),
}
