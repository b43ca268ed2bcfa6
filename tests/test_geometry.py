import pytest

from ui.components.map_component.geometry import (
    GeometryDescriptor,
    GeometryKind,
    LatLng,
    geodesic_midpoint,
    minimum_points,
    to_lat_lng,
)


def test_minimum_points_per_kind():
    assert minimum_points(GeometryKind.OPEN_PATH) == 2
    assert minimum_points(GeometryKind.CLOSED_RING) == 3


def test_kind_from_geometry_type():
    assert GeometryKind.from_geometry_type("LineString") is GeometryKind.OPEN_PATH
    assert GeometryKind.from_geometry_type("Polygon") is GeometryKind.CLOSED_RING
    assert GeometryKind.from_geometry_type("closed-ring") is GeometryKind.CLOSED_RING
    assert GeometryKind.CLOSED_RING.geometry_type == "Polygon"

    with pytest.raises(ValueError):
        GeometryKind.from_geometry_type("Point")


def test_to_lat_lng_normalizes_pairs():
    assert to_lat_lng([1, 2]) == LatLng(1.0, 2.0)
    assert isinstance(to_lat_lng((1, 2)), LatLng)

    with pytest.raises(ValueError):
        to_lat_lng((1, 2, 3))
    with pytest.raises(ValueError):
        to_lat_lng("ab")


def test_midpoint_on_equator():
    midpoint = geodesic_midpoint((0, 0), (0, 1))
    assert midpoint.lat == pytest.approx(0.0, abs=1e-12)
    assert midpoint.lng == pytest.approx(0.5)


def test_midpoint_on_meridian():
    midpoint = geodesic_midpoint((0, 1), (1, 1))
    assert midpoint.lat == pytest.approx(0.5)
    assert midpoint.lng == pytest.approx(1.0)


def test_midpoint_follows_great_circle():
    # Off the equator the great circle bulges towards the pole
    midpoint = geodesic_midpoint((60, 0), (60, 90))
    assert midpoint.lat > 60
    assert midpoint.lng == pytest.approx(45.0)


def test_midpoint_across_antimeridian():
    midpoint = geodesic_midpoint((0, 179), (0, -179))
    assert abs(midpoint.lng) == pytest.approx(180.0)


def test_midpoint_is_symmetric():
    a, b = (10, 20), (-5, 40)
    assert geodesic_midpoint(a, b) == pytest.approx(geodesic_midpoint(b, a))


def test_descriptor_normalizes_coordinates():
    descriptor = GeometryDescriptor.open_path([[0, 0], (1, 0)])
    assert descriptor.kind is GeometryKind.OPEN_PATH
    assert descriptor.coordinates == (LatLng(0, 0), LatLng(1, 0))
    assert len(descriptor) == 2
    assert not descriptor.is_closed


def test_descriptor_accepts_kind_string():
    descriptor = GeometryDescriptor("closed-ring", ((0, 0), (0, 1), (1, 1)))
    assert descriptor.kind is GeometryKind.CLOSED_RING


def test_ring_drops_closing_coordinate():
    descriptor = GeometryDescriptor.closed_ring([(0, 0), (0, 1), (1, 1), (0, 0)])
    assert descriptor.coordinates == (LatLng(0, 0), LatLng(0, 1), LatLng(1, 1))


def test_descriptor_below_minimum_raises():
    with pytest.raises(ValueError, match="at least 2"):
        GeometryDescriptor.open_path([(0, 0)])
    with pytest.raises(ValueError, match="at least 3"):
        GeometryDescriptor.closed_ring([(0, 0), (0, 1)])


def test_descriptor_unknown_kind_raises():
    with pytest.raises(ValueError):
        GeometryDescriptor("triangle", ((0, 0), (0, 1), (1, 1)))


def test_with_coordinates_keeps_kind():
    ring = GeometryDescriptor.closed_ring([(0, 0), (0, 1), (1, 1)])
    moved = ring.with_coordinates([(0, 2), (0, 1), (1, 1)])
    assert moved.kind is GeometryKind.CLOSED_RING
    assert moved.coordinates[0] == LatLng(0, 2)
    assert ring.coordinates[0] == LatLng(0, 0)


def test_descriptor_is_immutable():
    descriptor = GeometryDescriptor.open_path([(0, 0), (1, 0)])
    with pytest.raises(AttributeError):
        descriptor.kind = GeometryKind.CLOSED_RING
