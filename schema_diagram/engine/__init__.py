"""
Schema extraction and connector routing
"""
from .er_model import Column, Table, Relationship, Schema
from .sql_parser import parse_sql
from .json_parser import parse_json_schema
from .pathfinding import GRID_SIZE, Bounds, Rect, find_path
from .path_smoothing import smooth_path, to_svg_path
from .connectors import connector_points, orthogonal_path, route_relationships
from .export_import import DiagramDocument, export_diagram, import_diagram
from .layout import default_positions

__all__ = [
    'Column',
    'Table',
    'Relationship',
    'Schema',
    'parse_sql',
    'parse_json_schema',
    'GRID_SIZE',
    'Bounds',
    'Rect',
    'find_path',
    'smooth_path',
    'to_svg_path',
    'connector_points',
    'orthogonal_path',
    'route_relationships',
    'DiagramDocument',
    'export_diagram',
    'import_diagram',
    'default_positions',
]
