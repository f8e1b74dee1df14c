from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Protocol

logger = logging.getLogger(__name__)


class MazeError(Exception):
    """Base class for maze construction failures."""


class InvalidDimension(MazeError, ValueError):
    """Raised when a maze is requested with fewer than two cells per side."""


class DisconnectedGraph(MazeError):
    """Raised when generation finishes without reaching every cell."""


class NoPathFound(MazeError):
    """Raised when the end cell cannot be reached from the start cell."""


MIN_DIMENSION = 2


class Direction(Enum):
    UP = (0, 1)
    RIGHT = (1, 0)
    DOWN = (0, -1)
    LEFT = (-1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> "Direction":
        return {
            Direction.UP: Direction.DOWN,
            Direction.DOWN: Direction.UP,
            Direction.RIGHT: Direction.LEFT,
            Direction.LEFT: Direction.RIGHT,
        }[self]


@dataclass(frozen=True, order=True)
class Cell:
    x: int
    y: int

    def step(self, direction: Direction) -> "Cell":
        dx, dy = direction.delta
        return Cell(x=self.x + dx, y=self.y + dy)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    @classmethod
    def of(cls, value: "Cell | tuple[int, int]") -> "Cell":
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(x=value[0], y=value[1])
        raise TypeError(f"Expected a Cell or an (x, y) pair, got {value!r}")


@dataclass(frozen=True, order=True)
class Passage:
    """Open connection between two adjacent cells, stored lower cell first."""

    a: Cell
    b: Cell

    @classmethod
    def between(cls, first: Cell, second: Cell) -> "Passage":
        if second < first:
            first, second = second, first
        return cls(a=first, b=second)

    def other(self, cell: Cell) -> Cell:
        if cell == self.a:
            return self.b
        if cell == self.b:
            return self.a
        raise ValueError(f"{cell} is not an end of {self}")

    def as_tuple(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.a.as_tuple(), self.b.as_tuple())


def validate_dimension(dimension: Any) -> int:
    if isinstance(dimension, bool) or not isinstance(dimension, int):
        raise InvalidDimension(f"Maze dimension must be an integer, got {dimension!r}")
    if dimension < MIN_DIMENSION:
        raise InvalidDimension(
            f"Maze dimension must be at least {MIN_DIMENSION}, got {dimension}"
        )
    return dimension


class GridGraph:
    """Square lattice of cells joined to their orthogonal neighbors."""

    def __init__(self, dimension: int):
        self.dimension = validate_dimension(dimension)
        self._cells = tuple(
            Cell(x=x, y=y) for y in range(self.dimension) for x in range(self.dimension)
        )

    def __repr__(self) -> str:
        return f"GridGraph(dimension={self.dimension})"

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, Cell) and self.in_bounds(cell)

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.dimension and 0 <= cell.y < self.dimension

    def cells(self) -> tuple[Cell, ...]:
        return self._cells

    def neighbors(self, cell: Cell) -> list[Cell]:
        if not self.in_bounds(cell):
            raise ValueError(f"Out of bounds cell: {cell}")
        result: list[Cell] = []
        for direction in Direction:
            nxt = cell.step(direction)
            if self.in_bounds(nxt):
                result.append(nxt)
        return result

    def edges(self) -> list[Passage]:
        seen: set[Passage] = set()
        result: list[Passage] = []
        for cell in self._cells:
            for nxt in self.neighbors(cell):
                edge = Passage.between(cell, nxt)
                if edge not in seen:
                    seen.add(edge)
                    result.append(edge)
        return result

    def boundary_cells(self) -> list[Cell]:
        last = self.dimension - 1
        return [c for c in self._cells if c.x in (0, last) or c.y in (0, last)]

    def corners(self) -> list[Cell]:
        last = self.dimension - 1
        return [Cell(0, 0), Cell(last, 0), Cell(0, last), Cell(last, last)]


class RandomSource(Protocol):
    def shuffle(self, x: list[Any]) -> None: ...

    def sample(self, population: Any, k: int) -> list[Any]: ...


class CarveStrategy(Enum):
    """Order in which frontier edges are taken while carving."""

    STACK = "stack"
    QUEUE = "queue"

    @classmethod
    def coerce(cls, value: "CarveStrategy | str") -> "CarveStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown carve strategy: {value!r}") from None


class EndpointPolicy(Enum):
    CORNERS = "corners"
    RANDOM_CORNERS = "random_corners"
    RANDOM_BOUNDARY = "random_boundary"

    @classmethod
    def coerce(cls, value: "EndpointPolicy | str") -> "EndpointPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown endpoint policy: {value!r}") from None


def generate_passages(
    graph: GridGraph,
    rng: RandomSource,
    strategy: CarveStrategy | str = CarveStrategy.STACK,
    seed_cell: Cell | None = None,
) -> frozenset[Passage]:
    """Carve a random spanning tree over ``graph``.

    Edges leading out of each newly reached cell are shuffled and appended to
    the frontier. STACK takes the newest edge first and yields long winding
    corridors; QUEUE takes the oldest and yields short branching ones.
    """
    strategy = CarveStrategy.coerce(strategy)
    start = seed_cell if seed_cell is not None else Cell(0, 0)
    if start not in graph:
        raise ValueError(f"Seed cell {start} is outside {graph}")

    visited: set[Cell] = {start}
    passages: set[Passage] = set()
    frontier: deque[tuple[Cell, Cell]] = deque()

    def push_edges(cell: Cell) -> None:
        candidates = [(cell, nxt) for nxt in graph.neighbors(cell) if nxt not in visited]
        rng.shuffle(candidates)
        frontier.extend(candidates)

    push_edges(start)
    total = len(graph)
    while frontier and len(visited) < total:
        here, there = frontier.pop() if strategy is CarveStrategy.STACK else frontier.popleft()
        if there in visited:
            continue
        passages.add(Passage.between(here, there))
        visited.add(there)
        push_edges(there)

    if len(visited) != total:
        missing = total - len(visited)
        raise DisconnectedGraph(f"{missing} cell(s) unreachable while carving {graph}")

    logger.debug("Carved %d passages over %s using %s", len(passages), graph, strategy.value)
    return frozenset(passages)


def passage_adjacency(graph: GridGraph, passages: Iterable[Passage]) -> Dict[Cell, list[Cell]]:
    """Adjacency restricted to passages, neighbors kept in the graph's order."""
    open_edges = {p for p in passages if p.a in graph and p.b in graph}
    adjacency: Dict[Cell, list[Cell]] = {}
    for cell in graph.cells():
        adjacency[cell] = [
            nxt for nxt in graph.neighbors(cell) if Passage.between(cell, nxt) in open_edges
        ]
    return adjacency


def solve_path(
    graph: GridGraph,
    passages: Iterable[Passage],
    start: Cell,
    end: Cell,
) -> tuple[Cell, ...]:
    """Breadth-first search from start to end through open passages only."""
    if start not in graph or end not in graph:
        raise NoPathFound(f"{start} -> {end}: endpoints must both lie inside {graph}")
    if start == end:
        return (start,)

    adjacency = passage_adjacency(graph, passages)
    q: deque[Cell] = deque([start])
    parent: Dict[Cell, Cell | None] = {start: None}
    while q:
        cur = q.popleft()
        if cur == end:
            break
        for nxt in adjacency[cur]:
            if nxt not in parent:
                parent[nxt] = cur
                q.append(nxt)

    if end not in parent:
        raise NoPathFound(f"{end} is not reachable from {start}")

    path: list[Cell] = []
    cur: Cell | None = end
    while cur is not None:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return tuple(path)


def choose_endpoints(
    graph: GridGraph,
    rng: RandomSource,
    policy: EndpointPolicy | str = EndpointPolicy.CORNERS,
) -> tuple[Cell, Cell]:
    policy = EndpointPolicy.coerce(policy)
    if policy is EndpointPolicy.CORNERS:
        last = graph.dimension - 1
        return Cell(0, 0), Cell(last, last)
    pool = graph.corners() if policy is EndpointPolicy.RANDOM_CORNERS else graph.boundary_cells()
    start, end = rng.sample(pool, 2)
    return start, end


@dataclass(frozen=True)
class MazeConfig:
    dimension: int
    seed: int | None = None
    strategy: CarveStrategy = CarveStrategy.STACK
    endpoints: EndpointPolicy = EndpointPolicy.CORNERS

    def validate(self) -> "MazeConfig":
        validate_dimension(self.dimension)
        CarveStrategy.coerce(self.strategy)
        EndpointPolicy.coerce(self.endpoints)
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MazeConfig":
        if "dimension" not in data:
            raise InvalidDimension("Maze config is missing 'dimension'")
        cfg = cls(
            dimension=data["dimension"],
            seed=data.get("seed"),
            strategy=CarveStrategy.coerce(data.get("strategy", CarveStrategy.STACK)),
            endpoints=EndpointPolicy.coerce(data.get("endpoints", EndpointPolicy.CORNERS)),
        )
        return cfg.validate()


@dataclass(frozen=True)
class Maze:
    maze_id: str | None
    dimension: int
    graph: GridGraph = field(repr=False, compare=False)
    passages: frozenset[Passage] = field(repr=False)
    start: Cell
    end: Cell
    solution_path: tuple[Cell, ...]
    seed: int | None = None
    strategy: CarveStrategy = CarveStrategy.STACK

    @classmethod
    def create(cls, dimension: int, seed: int | None = None, **kwargs: Any) -> "Maze":
        return build_maze(dimension, seed, **kwargs)

    @property
    def passage_count(self) -> int:
        return len(self.passages)

    def in_bounds(self, cell: Cell) -> bool:
        return self.graph.in_bounds(cell)

    def cells(self) -> tuple[Cell, ...]:
        return self.graph.cells()

    def is_passage(self, a: Cell | tuple[int, int], b: Cell | tuple[int, int]) -> bool:
        return Passage.between(Cell.of(a), Cell.of(b)) in self.passages

    def open_directions(self, cell: Cell | tuple[int, int]) -> set[Direction]:
        cell = Cell.of(cell)
        if not self.in_bounds(cell):
            return set()
        return {d for d in Direction if self.is_passage(cell, cell.step(d))}

    def interior_path(self) -> tuple[Cell, ...]:
        return self.solution_path[1:-1]

    def to_grid(self) -> list[list[int]]:
        """Wall grid of side 2d - 1: 0 is open floor, 1 is wall."""
        size = self.dimension * 2 - 1
        grid = [[1] * size for _ in range(size)]
        for cell in self.cells():
            grid[cell.y * 2][cell.x * 2] = 0
        for p in self.passages:
            grid[p.a.y + p.b.y][p.a.x + p.b.x] = 0
        return grid


def build_maze(
    dimension: int,
    seed: int | None = None,
    *,
    rng: RandomSource | None = None,
    strategy: CarveStrategy | str = CarveStrategy.STACK,
    endpoints: EndpointPolicy | str = EndpointPolicy.CORNERS,
) -> Maze:
    """Build a fully solved maze.

    ``rng`` takes precedence over ``seed``; with neither, a fresh unseeded
    ``random.Random`` is used. Only a maze built from ``seed`` alone can be
    rebuilt, so only that maze gets a ``maze_id`` and keeps its seed.
    """
    graph = GridGraph(dimension)
    strategy = CarveStrategy.coerce(strategy)
    if rng is None:
        rng = random.Random(seed)
    else:
        seed = None

    passages = generate_passages(graph, rng, strategy=strategy)
    start, end = choose_endpoints(graph, rng, endpoints)
    path = solve_path(graph, passages, start, end)

    label = seed if seed is not None else "unseeded"
    logger.info(
        "Built %dx%d maze (seed=%s, strategy=%s), solution has %d cells",
        dimension, dimension, label, strategy.value, len(path),
    )
    return Maze(
        maze_id=f"maze-{dimension}x{dimension}-{seed}" if seed is not None else None,
        dimension=dimension,
        graph=graph,
        passages=passages,
        start=start,
        end=end,
        solution_path=path,
        seed=seed,
        strategy=strategy,
    )


def build_maze_from_config(config: MazeConfig, rng: RandomSource | None = None) -> Maze:
    config.validate()
    return build_maze(
        config.dimension,
        config.seed,
        rng=rng,
        strategy=config.strategy,
        endpoints=config.endpoints,
    )
