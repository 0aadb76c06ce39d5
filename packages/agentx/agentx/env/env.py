"""
Grid environment for the AgentX agent.

The environment is a square grid with a single target cell and a fixed set of
obstacle cells. The agent moves one cell per tick in one of four directions;
moves off the grid are clamped and moves into an obstacle are reverted.
The environment provides geometry helpers (clamping, collision, distance,
greedy heading) and renders the grid for console output.
"""

import math
from collections.abc import Iterable
from enum import Enum

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text as RichText

from agentx.constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_OBSTACLES,
    DEFAULT_START,
    DEFAULT_TARGET,
)
from agentx.dtypes import GridPosition, ObstacleSet
from agentx.env.theme import DEFAULT_THEME, THEME_SYMBOLS, DarkColorRichStyleConfig, Theme


class Direction(str, Enum):
    """Directions the agent can face and move."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Order used for uniform random exploration
DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

# y grows downward, so "down" increases y
DIRECTION_DELTAS: dict[Direction, GridPosition] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class GridEnvironment:
    """
    Square grid with a target and obstacles.

    Target and obstacles are assumed not to coincide and to lie on the grid;
    that is checked when the configuration is loaded, not here.

    Parameters
    ----------
    grid_size : int
        Side length ``N`` of the ``N x N`` grid.
    target : GridPosition
        The cell the agent is trying to reach.
    obstacles : Iterable of GridPosition
        Blocked cells.
    start : GridPosition
        Cell every episode starts from.
    theme : Theme
        Rendering theme.
    rich_style_config : DarkColorRichStyleConfig | None
        Styles used by the Rich theme.
    """

    def __init__(  # noqa: PLR0913
        self,
        grid_size: int = DEFAULT_GRID_SIZE,
        target: GridPosition = DEFAULT_TARGET,
        obstacles: Iterable[GridPosition] = DEFAULT_OBSTACLES,
        start: GridPosition = DEFAULT_START,
        theme: Theme = DEFAULT_THEME,
        rich_style_config: DarkColorRichStyleConfig | None = None,
    ) -> None:
        self.grid_size = grid_size
        self.target: GridPosition = (int(target[0]), int(target[1]))
        self.obstacles: ObstacleSet = frozenset((int(x), int(y)) for x, y in obstacles)
        self.start: GridPosition = (int(start[0]), int(start[1]))
        self.theme = theme
        self.rich_style_config = rich_style_config or DarkColorRichStyleConfig()

    def is_obstacle(self, position: GridPosition) -> bool:
        """Return whether ``position`` is a blocked cell."""
        return position in self.obstacles

    def is_target(self, position: GridPosition) -> bool:
        """Return whether ``position`` is the target cell."""
        return position == self.target

    def clamp(self, position: GridPosition) -> GridPosition:
        """Clamp a position to ``[0, N-1]`` on both axes."""
        upper = self.grid_size - 1
        return (min(upper, max(0, position[0])), min(upper, max(0, position[1])))

    def next_position(self, position: GridPosition, direction: Direction) -> GridPosition:
        """
        Apply a unit step in ``direction`` and clamp it to the grid.

        Obstacles are not considered here; see :meth:`is_obstacle`.
        """
        dx, dy = DIRECTION_DELTAS[direction]
        return self.clamp((position[0] + dx, position[1] + dy))

    def distance_to_target(self, position: GridPosition) -> float:
        """Euclidean distance from ``position`` to the target."""
        return math.hypot(self.target[0] - position[0], self.target[1] - position[1])

    def greedy_direction(self, position: GridPosition, fallback: Direction) -> Direction:
        """
        Pick the heading that closes the gap to the target, x axis first.

        Returns ``fallback`` when the agent already sits on the target.
        """
        x, y = position
        if x < self.target[0]:
            return Direction.RIGHT
        if x > self.target[0]:
            return Direction.LEFT
        if y < self.target[1]:
            return Direction.DOWN
        if y > self.target[1]:
            return Direction.UP
        return fallback

    def render(self, agent_pos: GridPosition, direction: Direction) -> list[str]:
        """
        Render the grid as console lines.

        Parameters
        ----------
        agent_pos : GridPosition
            Current agent cell.
        direction : Direction
            Current agent heading, used to pick the agent glyph.

        Returns
        -------
        list[str]
            One string per rendered line, ending with an empty line.
        """
        symbols = THEME_SYMBOLS[self.theme]
        grid = [[symbols.empty for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        for x, y in self.obstacles:
            grid[y][x] = symbols.obstacle

        grid[self.target[1]][self.target[0]] = symbols.target
        grid[agent_pos[1]][agent_pos[0]] = getattr(symbols, direction.value)

        if self.theme == Theme.RICH:
            return self._render_rich(grid)
        return [" ".join(row) for row in grid] + [""]

    def _render_rich(self, grid: list[list[str]]) -> list[str]:
        """Render the grid with Rich styling and colors as strings."""
        symbols = THEME_SYMBOLS[self.theme]
        agent_symbols = {symbols.up, symbols.down, symbols.left, symbols.right}
        styles = self.rich_style_config

        console = Console(
            record=True,
            width=(self.grid_size * 4) + 1,
            legacy_windows=False,
            force_terminal=True,
        )

        table = Table(
            show_header=False,
            show_lines=True,
            box=box.SQUARE,
            padding=(0, 0),
            pad_edge=False,
            style=styles.grid_background,
        )
        for _ in range(self.grid_size):
            table.add_column(justify="center", width=3, min_width=3, max_width=3, no_wrap=True)

        for row in grid:
            styled_cells = []
            for cell in row:
                if cell == symbols.target:
                    style = styles.target_style
                elif cell == symbols.obstacle:
                    style = styles.obstacle_style
                elif cell in agent_symbols:
                    style = styles.agent_style
                else:
                    style = styles.empty_style
                styled_cells.append(RichText(cell, style=style, justify="center"))
            table.add_row(*styled_cells)

        with console.capture() as capture:
            console.print(table, crop=True)

        output_lines = capture.get().splitlines()
        cleaned_lines = [line.rstrip() for line in output_lines if line.strip()]
        return [*cleaned_lines, ""]
