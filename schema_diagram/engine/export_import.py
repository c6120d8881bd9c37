"""
Diagram document export / import
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .er_model import Schema

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = '1.0'
REQUIRED_KEYS = ('version', 'schema', 'positions', 'viewState')
MIN_ZOOM = 0.25
MAX_ZOOM = 2.0


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


class DiagramDocument:
    """A saved diagram: schema, table positions and the viewport"""

    def __init__(self, schema: Schema, positions: Mapping[str, Mapping[str, float]],
                 zoom: float = 1.0, pan: Optional[Mapping[str, float]] = None,
                 version: str = DOCUMENT_VERSION):
        self.version = version
        self.schema = schema
        self.positions = {
            table_id: {'x': pos['x'], 'y': pos['y']} for table_id, pos in positions.items()
        }
        self.zoom = clamp_zoom(zoom)
        pan = pan or {'x': 0, 'y': 0}
        self.pan = {'x': pan['x'], 'y': pan['y']}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'schema': self.schema.to_dict(),
            'positions': self.positions,
            'viewState': {
                'zoom': self.zoom,
                'pan': self.pan,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiagramDocument':
        view_state = data['viewState']
        return cls(
            schema=Schema.from_dict(data['schema']),
            positions=data['positions'],
            zoom=float(view_state['zoom']),
            pan=view_state['pan'],
            version=str(data['version']),
        )

    def __eq__(self, other):
        if not isinstance(other, DiagramDocument):
            return NotImplemented
        return (self.version == other.version and self.schema == other.schema and
                self.positions == other.positions and self.zoom == other.zoom and
                self.pan == other.pan)

    def __repr__(self):
        return f"DiagramDocument(version={self.version}, schema={self.schema!r}, zoom={self.zoom})"


def export_diagram(schema: Schema, positions: Mapping[str, Mapping[str, float]],
                   zoom: float = 1.0, pan: Optional[Mapping[str, float]] = None) -> str:
    """Serialize a diagram to the JSON document format"""
    document = DiagramDocument(schema, positions, zoom, pan)
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False)


def import_diagram(text: str) -> Tuple[Optional[DiagramDocument], str]:
    """
    Read a diagram document

    Returns:
        Tuple of (document, error message); the document is None on error
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        return None, f"Import error: {e}"

    if not isinstance(data, dict) or any(key not in data for key in REQUIRED_KEYS):
        return None, "Invalid export file format"

    try:
        return DiagramDocument.from_dict(data), ""
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.debug("Malformed diagram document: %r", e)
        return None, "Invalid export file format"
