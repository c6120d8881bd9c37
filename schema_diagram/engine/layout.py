"""
Initial table placement for a freshly parsed schema
"""
import math
from typing import Dict, Sequence

from .er_model import Table

LAYOUT_ORIGIN = 100
COLUMN_SPACING = 320
ROW_SPACING = 250


def default_positions(tables: Sequence[Table]) -> Dict[str, Dict[str, float]]:
    """Place tables row by row on a square-ish grid, keyed by table id"""
    if not tables:
        return {}

    cols = math.ceil(math.sqrt(len(tables)))
    positions = {}
    for index, table in enumerate(tables):
        row, col = divmod(index, cols)
        positions[table.id] = {
            'x': LAYOUT_ORIGIN + col * COLUMN_SPACING,
            'y': LAYOUT_ORIGIN + row * ROW_SPACING,
        }
    return positions
