from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace

from maze import Maze, MazeConfig, build_maze_from_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """
    Normalized command object consumed by the session.
    """

    verb: str
    args: list[str] = field(default_factory=list)


@dataclass
class MazeView:
    """
    Read-only projection of the current maze for a renderer.
    """

    maze_id: str | None
    dimension: int
    cells: list[tuple[int, int]]
    passages: list[tuple[tuple[int, int], tuple[int, int]]]
    start: tuple[int, int]
    end: tuple[int, int]
    solution: tuple[tuple[int, int], ...]
    is_revealed: bool
    mazes_generated: int = 0
    reveals: int = 0


@dataclass
class MazeOutput:
    """
    Wrapper for view + user-facing messages from session commands.
    """

    view: MazeView
    messages: list[str] = field(default_factory=list)
    changed: bool = False


class MazeSession:
    """Click-driven viewer state: each click reveals the solution or replaces the maze.

    Nothing outlives the instance. Each new maze gets its own seed drawn from
    ``rng``, so any maze shown here can be rebuilt with ``build_maze``.
    """

    def __init__(self, config: MazeConfig, rng: random.Random | None = None):
        self.config = config.validate()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self._mazes_generated = 0
        self._reveals = 0
        self._revealed = False
        self._maze = self._new_maze()

    def _new_maze(self) -> Maze:
        config = replace(self.config, seed=self.rng.randrange(2**32))
        maze = build_maze_from_config(config)
        self._mazes_generated += 1
        self._revealed = False
        logger.debug("Generated %s", maze.maze_id)
        return maze

    @property
    def maze(self) -> Maze:
        return self._maze

    @property
    def is_revealed(self) -> bool:
        return self._revealed

    def _make_view(self) -> MazeView:
        maze = self._maze
        return MazeView(
            maze_id=maze.maze_id,
            dimension=maze.dimension,
            cells=[c.as_tuple() for c in maze.cells()],
            passages=sorted(p.as_tuple() for p in maze.passages),
            start=maze.start.as_tuple(),
            end=maze.end.as_tuple(),
            solution=tuple(c.as_tuple() for c in maze.solution_path) if self._revealed else (),
            is_revealed=self._revealed,
            mazes_generated=self._mazes_generated,
            reveals=self._reveals,
        )

    def view(self) -> MazeView:
        return self._make_view()

    def handle(self, command: Command) -> MazeOutput:
        verb = (command.verb or "").strip().lower()

        if verb == "look":
            return MazeOutput(view=self._make_view(), messages=[], changed=False)

        if verb == "click":
            verb = "new" if self._revealed else "solve"

        if verb == "new":
            self._maze = self._new_maze()
            return MazeOutput(view=self._make_view(), messages=["New maze."], changed=True)

        if verb in {"solve", "reveal"}:
            if self._revealed:
                return MazeOutput(view=self._make_view(), messages=["Solution already shown."], changed=False)
            self._revealed = True
            self._reveals += 1
            logger.debug("Revealed %d-cell solution of %s", len(self._maze.solution_path), self._maze.maze_id)
            return MazeOutput(view=self._make_view(), messages=["Solution shown."], changed=True)

        return MazeOutput(view=self._make_view(), messages=["Unknown command."], changed=False)
