"""
Connector geometry - where relationship lines attach to table cards and how they are routed
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from .er_model import Relationship, Schema, Table
from .pathfinding import GRID_SIZE, Bounds, Point, Rect, find_path
from .path_smoothing import format_number, smooth_path, to_svg_path

logger = logging.getLogger(__name__)

TABLE_WIDTH = 220
HEADER_HEIGHT = 36
COLUMN_HEIGHT = 24
CORNER_RADIUS = 10
CANVAS_WIDTH = 3000
CANVAS_HEIGHT = 2000

ROUTE_MODES = ('orthogonal', 'grid')


class ConnectorPoints:
    """Endpoints of one relationship line on the canvas"""

    def __init__(self, start: Point, end: Point, exit_right: bool):
        self.start = start
        self.end = end
        self.exit_right = exit_right

    @property
    def arrow_angle(self) -> int:
        return 0 if self.exit_right else 180

    def __repr__(self):
        return f"ConnectorPoints(start={self.start}, end={self.end}, exit_right={self.exit_right})"


def table_rect(table: Table, position: Mapping[str, float]) -> Rect:
    """Bounding box of a table card"""
    height = HEADER_HEIGHT + len(table.columns) * COLUMN_HEIGHT
    return Rect(position['x'], position['y'], TABLE_WIDTH, height)


def row_center_y(position: Mapping[str, float], column_index: int) -> float:
    return position['y'] + HEADER_HEIGHT + column_index * COLUMN_HEIGHT + COLUMN_HEIGHT / 2


def connector_points(schema: Schema, positions: Mapping[str, Mapping[str, float]],
                     relationship: Relationship) -> Optional[ConnectorPoints]:
    """
    Work out where a relationship line leaves and enters its tables

    The line attaches at the vertical centre of the column row. It leaves the
    source card on the side facing the target (right when the target centre is
    not left of the source centre), which keeps the horizontal run short.

    Returns:
        ConnectorPoints, or None when a table, position or column is unknown
    """
    from_table = schema.get_table(relationship.from_table)
    to_table = schema.get_table(relationship.to_table)
    if not from_table or not to_table:
        return None

    from_pos = positions.get(from_table.id)
    to_pos = positions.get(to_table.id)
    if not from_pos or not to_pos:
        return None

    from_index = from_table.column_index(relationship.from_column)
    to_index = to_table.column_index(relationship.to_column)
    if from_index == -1 or to_index == -1:
        return None

    from_y = row_center_y(from_pos, from_index)
    to_y = row_center_y(to_pos, to_index)

    from_center_x = from_pos['x'] + TABLE_WIDTH / 2
    to_center_x = to_pos['x'] + TABLE_WIDTH / 2
    exit_right = to_center_x >= from_center_x

    from_x = from_pos['x'] + TABLE_WIDTH if exit_right else from_pos['x']
    to_x = to_pos['x'] if exit_right else to_pos['x'] + TABLE_WIDTH

    return ConnectorPoints((from_x, from_y), (to_x, to_y), exit_right)


def orthogonal_path(fx: float, fy: float, tx: float, ty: float,
                    exit_right: bool, corner_radius: float = CORNER_RADIUS) -> str:
    """
    SVG path data for a horizontal -> vertical -> horizontal line with rounded corners

    No obstacle avoidance; the vertical leg runs at the horizontal midpoint.
    """
    f = format_number
    if abs(ty - fy) < 1:
        return f"M {f(fx)} {f(fy)} H {f(tx)}"

    mx = (fx + tx) / 2
    dy_sign = 1 if ty > fy else -1
    # 圆角半径不能超过可用的水平或垂直空间的一半
    r = min(corner_radius, abs(ty - fy) / 2, abs(mx - fx))

    # 向右出线时拐角在中线左侧，向左出线时在右侧
    before = mx - r if exit_right else mx + r
    after = mx + r if exit_right else mx - r

    return ' '.join([
        f"M {f(fx)} {f(fy)}",
        f"H {f(before)}",
        f"Q {f(mx)} {f(fy)} {f(mx)} {f(fy + r * dy_sign)}",
        f"V {f(ty - r * dy_sign)}",
        f"Q {f(mx)} {f(ty)} {f(after)} {f(ty)}",
        f"H {f(tx)}",
    ])


def orthogonal_points(start: Point, end: Point) -> List[Point]:
    """Turning points of the H -> V -> H route, without the rounded corners"""
    mx = (start[0] + end[0]) / 2
    return smooth_path([tuple(start), (mx, start[1]), (mx, end[1]), tuple(end)])


def grid_route(schema: Schema, positions: Mapping[str, Mapping[str, float]],
               relationship: Relationship, connectors: ConnectorPoints,
               bounds: Bounds, cell_size: float = GRID_SIZE) -> List[Point]:
    """Route around every table card except the two the relationship connects"""
    endpoint_ids = {relationship.from_table.lower(), relationship.to_table.lower()}
    obstacles = [
        table_rect(table, positions[table.id])
        for table in schema.tables
        if table.id not in endpoint_ids and table.id in positions
    ]
    raw = find_path(connectors.start, connectors.end, obstacles, bounds, cell_size)
    return smooth_path(raw)


def route_relationships(schema: Schema, positions: Mapping[str, Mapping[str, float]],
                        mode: str = 'orthogonal', bounds: Optional[Bounds] = None,
                        cell_size: float = GRID_SIZE) -> List[Dict[str, Any]]:
    """
    Compute one drawable route per relationship

    Relationships whose tables, positions or columns are unknown are skipped.

    Args:
        schema: Parsed schema
        positions: Table id -> {'x': ..., 'y': ...}
        mode: 'orthogonal' for the direct rounded route, 'grid' for A* routing
        bounds: Canvas bounds used by grid routing
        cell_size: Grid spacing used by grid routing

    Returns:
        List of route dictionaries with id, mode, path, points, arrowAngle and end
    """
    if mode not in ROUTE_MODES:
        raise ValueError(f"Unknown route mode: {mode}")
    if bounds is None:
        bounds = Bounds(CANVAS_WIDTH, CANVAS_HEIGHT)

    routes = []
    for relationship in schema.relationships:
        connectors = connector_points(schema, positions, relationship)
        if connectors is None:
            logger.debug("Relationship %s has no drawable endpoints", relationship.id)
            continue

        if mode == 'grid':
            points = grid_route(schema, positions, relationship, connectors, bounds, cell_size)
            path = to_svg_path(points)
        else:
            points = orthogonal_points(connectors.start, connectors.end)
            path = orthogonal_path(connectors.start[0], connectors.start[1],
                                   connectors.end[0], connectors.end[1],
                                   connectors.exit_right)

        routes.append({
            'id': relationship.id,
            'mode': mode,
            'path': path,
            'points': [{'x': x, 'y': y} for x, y in points],
            'arrowAngle': connectors.arrow_angle,
            'end': {'x': connectors.end[0], 'y': connectors.end[1]},
        })

    return routes
