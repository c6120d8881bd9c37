"""
Grid pathfinding - A* search for connector routes that avoid table cards
"""
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

GRID_SIZE = 20

Point = Tuple[float, float]


class Rect:
    """Axis-aligned rectangle in canvas coordinates"""

    def __init__(self, x: float, y: float, width: float, height: float):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'Rect':
        return cls(data['x'], data['y'], data['width'], data['height'])

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    def contains(self, x: float, y: float, buffer: float = 0) -> bool:
        """True if (x, y) lies inside the rectangle grown by buffer on every side (edges included)"""
        return (self.x - buffer <= x <= self.x + self.width + buffer and
                self.y - buffer <= y <= self.y + self.height + buffer)

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Rect(x={self.x}, y={self.y}, width={self.width}, height={self.height})"


class Bounds:
    """Canvas extent; valid coordinates are 0..width and 0..height"""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x <= self.width and 0 <= y <= self.height


class _Node:
    __slots__ = ('x', 'y', 'g', 'f', 'parent')

    def __init__(self, x: float, y: float, g: float, h: float, parent: Optional['_Node'] = None):
        self.x = x
        self.y = y
        self.g = g
        self.f = g + h
        self.parent = parent


class OpenList:
    """Frontier of the search, kept in discovery order"""

    def __init__(self):
        self._nodes: List[_Node] = []
        self._index: Dict[Tuple[float, float], _Node] = {}

    def __len__(self):
        return len(self._nodes)

    def get(self, x: float, y: float) -> Optional[_Node]:
        return self._index.get((x, y))

    def push_or_relax(self, node: _Node) -> _Node:
        """
        Add node, or lower the cost of the open node at the same position

        The stored node keeps its place in the list; it is only updated when
        the new cost is strictly lower. Returns the stored node.
        """
        existing = self._index.get((node.x, node.y))
        if existing is None:
            self._nodes.append(node)
            self._index[(node.x, node.y)] = node
            return node
        if node.g < existing.g:
            existing.f = node.f
            existing.g = node.g
            existing.parent = node.parent
        return existing

    def peek_best(self) -> _Node:
        """Lowest-f node; on ties the first discovered wins"""
        best = self._nodes[0]
        for node in self._nodes[1:]:
            if node.f < best.f:
                best = node
        return best

    def remove(self, node: _Node) -> None:
        self._nodes.remove(node)
        del self._index[(node.x, node.y)]


def snap(value: float, cell_size: float = GRID_SIZE) -> float:
    """Round to the nearest grid line, halves rounding up"""
    return math.floor(value / cell_size + 0.5) * cell_size


def find_path(start: Point, end: Point, obstacles: Sequence[Rect], bounds: Bounds,
              cell_size: float = GRID_SIZE) -> List[Point]:
    """
    Find an orthogonal route from start to end around the obstacles

    Args:
        start: Requested start point
        end: Requested end point
        obstacles: Rectangles the route keeps one cell away from
        bounds: Canvas bounds; nodes outside are never visited
        cell_size: Grid spacing

    Returns:
        Points from start to end. Never fewer than two; when no route exists
        the direct segment [start, end] is returned.
    """
    start_x, start_y = snap(start[0], cell_size), snap(start[1], cell_size)
    goal_x, goal_y = snap(end[0], cell_size), snap(end[1], cell_size)

    def heuristic(x, y):
        return abs(x - goal_x) + abs(y - goal_y)

    open_list = OpenList()
    open_list.push_or_relax(_Node(start_x, start_y, 0, heuristic(start_x, start_y)))
    closed = set()

    while open_list:
        current = open_list.peek_best()

        if abs(current.x - goal_x) < cell_size and abs(current.y - goal_y) < cell_size:
            return _anchor(_reconstruct(current), start, end)

        open_list.remove(current)
        closed.add((current.x, current.y))

        for nx, ny in ((current.x + cell_size, current.y),
                       (current.x - cell_size, current.y),
                       (current.x, current.y + cell_size),
                       (current.x, current.y - cell_size)):
            key = (nx, ny)
            if key in closed:
                continue
            if not bounds.contains(nx, ny):
                continue
            if is_blocked(nx, ny, obstacles, cell_size):
                continue

            open_list.push_or_relax(_Node(nx, ny, current.g + cell_size, heuristic(nx, ny), current))

    logger.debug("No route from %s to %s, falling back to a direct segment", start, end)
    return [tuple(start), tuple(end)]


def is_blocked(x: float, y: float, obstacles: Sequence[Rect], buffer: float = GRID_SIZE) -> bool:
    """True if (x, y) falls inside any obstacle grown by buffer"""
    return any(obstacle.contains(x, y, buffer) for obstacle in obstacles)


def _reconstruct(node: _Node) -> List[Point]:
    path = []
    current = node
    while current is not None:
        path.append((current.x, current.y))
        current = current.parent
    path.reverse()
    return path


def _anchor(path: List[Point], start: Point, end: Point) -> List[Point]:
    """Make the grid path begin at start and finish at end exactly"""
    start, end = tuple(start), tuple(end)
    if path[0] != start:
        path.insert(0, start)
    if path[-1] != end:
        path.append(end)
    if len(path) < 2:
        path.append(end)
    return path
