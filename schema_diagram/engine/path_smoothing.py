"""
Path post-processing - drops collinear points and emits SVG path data
"""
from typing import List, Sequence

from .pathfinding import Point


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def smooth_path(path: Sequence[Point]) -> List[Point]:
    """
    Remove interior points that do not change the direction of travel

    A point is dropped when the sign of the step leading into it equals the
    sign of the step leading out of it on both axes. Paths with fewer than
    three points are returned unchanged.
    """
    if len(path) < 3:
        return list(path)

    smoothed = [path[0]]
    for i in range(1, len(path) - 1):
        prev = smoothed[-1]
        curr = path[i]
        nxt = path[i + 1]

        same_x = _sign(curr[0] - prev[0]) == _sign(nxt[0] - curr[0])
        same_y = _sign(curr[1] - prev[1]) == _sign(nxt[1] - curr[1])
        if same_x and same_y:
            continue

        smoothed.append(curr)

    smoothed.append(path[-1])
    return smoothed


def format_number(value: float) -> str:
    """20.0 -> '20', 12.5 -> '12.5'"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_svg_path(points: Sequence[Point]) -> str:
    """Serialize points as an SVG move/line path ('M x y L x y ...')"""
    if not points:
        return ''

    first = points[0]
    commands = [f"M {format_number(first[0])} {format_number(first[1])}"]
    for x, y in points[1:]:
        commands.append(f"L {format_number(x)} {format_number(y)}")
    return ' '.join(commands)
