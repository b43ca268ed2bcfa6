"""Geometry value types for the vertex editing engine.

This module provides the coordinate and descriptor types handed between the
owner of an editable geometry and the marker group that edits it, together
with the minimum vertex policy and the geodesic midpoint used to place
insertion handles.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, NamedTuple, Sequence, Tuple


class LatLng(NamedTuple):
    """A geographic coordinate in degrees."""

    lat: float
    lng: float


class GeometryKind(str, Enum):
    """Topology of an editable geometry."""

    OPEN_PATH = "open-path"
    CLOSED_RING = "closed-ring"

    @classmethod
    def from_geometry_type(cls, geometry_type: str) -> "GeometryKind":
        """Map a GeoJSON/WKT geometry type name to a geometry kind.

        Args:
            geometry_type: "LineString" or "Polygon" (case insensitive), or
                one of the kind values themselves

        Returns:
            The matching GeometryKind

        Raises:
            ValueError: If the type has no editable counterpart
        """
        normalized = geometry_type.strip().lower()
        if normalized in ("linestring", cls.OPEN_PATH.value):
            return cls.OPEN_PATH
        if normalized in ("polygon", cls.CLOSED_RING.value):
            return cls.CLOSED_RING
        raise ValueError(f"Unsupported geometry type: {geometry_type}")

    @property
    def geometry_type(self) -> str:
        """GeoJSON geometry type name for this kind."""
        return "LineString" if self is GeometryKind.OPEN_PATH else "Polygon"


# Minimum number of vertices for each topology
MINIMUM_POINTS = {
    GeometryKind.OPEN_PATH: 2,
    GeometryKind.CLOSED_RING: 3,
}


def minimum_points(kind: GeometryKind) -> int:
    """Get the minimum legal vertex count for a geometry kind."""
    return MINIMUM_POINTS[GeometryKind(kind)]


def to_lat_lng(value: Sequence[float]) -> LatLng:
    """Normalize a two-element coordinate sequence to a LatLng.

    Raises:
        ValueError: If the value is not a pair of numbers
    """
    if isinstance(value, LatLng):
        return value
    try:
        lat, lng = value
        return LatLng(float(lat), float(lng))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid coordinate pair: {value!r}") from e


def geodesic_midpoint(a: Sequence[float], b: Sequence[float]) -> LatLng:
    """Calculate the great-circle midpoint between two coordinates.

    Args:
        a: First coordinate as (lat, lng) in degrees
        b: Second coordinate as (lat, lng) in degrees

    Returns:
        Midpoint on the shortest path over the sphere, longitude normalized
        to [-180, 180)
    """
    a = to_lat_lng(a)
    b = to_lat_lng(b)

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    lambda1 = math.radians(a.lng)
    delta_lambda = math.radians(b.lng - a.lng)

    bx = math.cos(phi2) * math.cos(delta_lambda)
    by = math.cos(phi2) * math.sin(delta_lambda)

    phi_m = math.atan2(
        math.sin(phi1) + math.sin(phi2),
        math.sqrt((math.cos(phi1) + bx) ** 2 + by**2),
    )
    lambda_m = lambda1 + math.atan2(by, math.cos(phi1) + bx)

    lng = (math.degrees(lambda_m) + 540.0) % 360.0 - 180.0
    return LatLng(math.degrees(phi_m), lng)


@dataclass(frozen=True)
class GeometryDescriptor:
    """Immutable description of one editable geometry.

    Rings are stored open: a trailing coordinate equal to the first one is
    dropped, the wraparound is implied by the CLOSED_RING kind.
    """

    kind: GeometryKind
    coordinates: Tuple[LatLng, ...] = field(default_factory=tuple)

    def __post_init__(self):
        kind = GeometryKind(self.kind)
        coordinates = tuple(to_lat_lng(c) for c in self.coordinates)

        if (
            kind is GeometryKind.CLOSED_RING
            and len(coordinates) > 1
            and coordinates[0] == coordinates[-1]
        ):
            coordinates = coordinates[:-1]

        required = minimum_points(kind)
        if len(coordinates) < required:
            raise ValueError(
                f"A {kind.value} needs at least {required} coordinates, "
                f"got {len(coordinates)}"
            )

        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "coordinates", coordinates)

    @classmethod
    def open_path(cls, coordinates: Iterable[Sequence[float]]) -> "GeometryDescriptor":
        return cls(GeometryKind.OPEN_PATH, tuple(coordinates))

    @classmethod
    def closed_ring(
        cls, coordinates: Iterable[Sequence[float]]
    ) -> "GeometryDescriptor":
        return cls(GeometryKind.CLOSED_RING, tuple(coordinates))

    @property
    def is_closed(self) -> bool:
        return self.kind is GeometryKind.CLOSED_RING

    def with_coordinates(
        self, coordinates: Iterable[Sequence[float]]
    ) -> "GeometryDescriptor":
        """Get a descriptor of the same kind with new coordinates."""
        return GeometryDescriptor(self.kind, tuple(coordinates))

    def __len__(self) -> int:
        return len(self.coordinates)
