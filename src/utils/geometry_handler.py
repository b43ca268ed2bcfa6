from typing import Any, Dict

from shapely.errors import GEOSException
from shapely.geometry import LineString, Polygon, mapping, shape
from shapely.wkt import dumps, loads

from ui.components.map_component.geometry import GeometryDescriptor, GeometryKind


class GeometryHandler:
    """Converts editable geometry descriptors to and from WKT and GeoJSON.

    Shapely coordinates are (x, y) = (lng, lat); descriptors hold (lat, lng).
    """

    @staticmethod
    def _from_shapely(geometry) -> GeometryDescriptor:
        if isinstance(geometry, LineString):
            return GeometryDescriptor.open_path(
                (y, x) for x, y in geometry.coords
            )
        if isinstance(geometry, Polygon):
            # Exterior ring only, closing point is dropped by the descriptor
            return GeometryDescriptor.closed_ring(
                (y, x) for x, y in geometry.exterior.coords
            )
        raise ValueError(
            f"Only LineString and Polygon geometries can be edited, got {geometry.geom_type}"
        )

    @staticmethod
    def _to_shapely(descriptor: GeometryDescriptor):
        coordinates = [(c.lng, c.lat) for c in descriptor.coordinates]
        if descriptor.kind is GeometryKind.CLOSED_RING:
            return Polygon(coordinates)
        return LineString(coordinates)

    @staticmethod
    def from_wkt(wkt: str) -> GeometryDescriptor:
        """Create a descriptor from a WKT LINESTRING or POLYGON."""
        try:
            geometry = loads(wkt)
        except GEOSException as e:
            raise ValueError(f"Invalid WKT: {wkt}") from e
        return GeometryHandler._from_shapely(geometry)

    @staticmethod
    def to_wkt(descriptor: GeometryDescriptor) -> str:
        """Convert a descriptor to WKT."""
        return dumps(GeometryHandler._to_shapely(descriptor))

    @staticmethod
    def from_mapping(geojson: Dict[str, Any]) -> GeometryDescriptor:
        """Create a descriptor from a GeoJSON geometry mapping."""
        try:
            geometry = shape(geojson)
        except (GEOSException, KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid GeoJSON geometry: {geojson}") from e
        return GeometryHandler._from_shapely(geometry)

    @staticmethod
    def to_mapping(descriptor: GeometryDescriptor) -> Dict[str, Any]:
        """Convert a descriptor to a GeoJSON geometry mapping."""
        return dict(mapping(GeometryHandler._to_shapely(descriptor)))

    @staticmethod
    def validate_wkt(wkt: str) -> bool:
        """Validate if string is an editable WKT geometry."""
        try:
            GeometryHandler.from_wkt(wkt)
            return True
        except ValueError:
            return False
