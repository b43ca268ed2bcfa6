"""Graphics-based host map surface for interactive vertex editing."""

from .coordinate_mapper import GraphicsCoordinateMapper
from .vertex_marker_item import MarkerRole, VertexMarker
from .map_surface import MapSurface

__all__ = [
    'GraphicsCoordinateMapper',
    'MarkerRole',
    'VertexMarker',
    'MapSurface',
]
