from unittest.mock import Mock

import pytest
from PyQt6.QtCore import QPointF

from ui.components.map_component.geometry import LatLng, geodesic_midpoint
from ui.components.map_component.graphics import (
    GraphicsCoordinateMapper,
    MapSurface,
    MarkerRole,
    VertexMarker,
)


@pytest.fixture
def surface(app, config):
    return MapSurface(config)


def test_mapper_round_trip():
    mapper = GraphicsCoordinateMapper(pixels_per_degree=100.0, origin_lat=10, origin_lng=20)

    point = mapper.latlng_to_scene((9, 21))
    assert point.x() == pytest.approx(100.0)
    assert point.y() == pytest.approx(100.0)

    latlng = mapper.scene_to_latlng(QPointF(100.0, 100.0))
    assert latlng == pytest.approx(LatLng(9, 21))


def test_mapper_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        GraphicsCoordinateMapper(pixels_per_degree=0)


def test_surface_uses_configured_projection(surface):
    assert surface.mapper.pixels_per_degree == 100.0


def test_create_marker_places_item(surface):
    marker = surface.create_marker((1, 2), MarkerRole.VERTEX)

    assert isinstance(marker, VertexMarker)
    assert marker.scene() is surface
    assert marker.get_lat_lng() == LatLng(1, 2)
    assert marker.pos().x() == pytest.approx(200.0)
    assert marker.pos().y() == pytest.approx(-100.0)


def test_set_lat_lng_moves_item(surface):
    marker = surface.create_marker((0, 0), MarkerRole.VERTEX)
    marker.set_lat_lng((0.5, 0.25))

    assert marker.get_lat_lng() == LatLng(0.5, 0.25)
    assert marker.pos().x() == pytest.approx(25.0)
    assert marker.pos().y() == pytest.approx(-50.0)


def test_remove_marker_is_safe_twice(surface):
    marker = surface.create_marker((0, 0), MarkerRole.VERTEX)

    assert surface.remove_marker(marker) is True
    assert marker.scene() is None
    assert surface.remove_marker(marker) is False
    assert surface.remove_marker(None) is False


def test_marker_role_changes_style(surface, config):
    marker = surface.create_marker((0, 0), MarkerRole.MIDPOINT)
    midpoint_rect = marker.boundingRect()

    marker.set_role(MarkerRole.VERTEX)

    assert marker.role is MarkerRole.VERTEX
    assert marker.boundingRect().width() > midpoint_rect.width()


def test_map_click_toggle(surface):
    changes = []
    surface.map_click_enabled_changed.connect(changes.append)

    assert surface.is_map_click_enabled()
    surface.disable_map_click()
    surface.disable_map_click()
    assert not surface.is_map_click_enabled()
    surface.enable_map_click()
    assert surface.is_map_click_enabled()

    assert changes == [False, True]


def test_midpoint_delegates_to_geodesic_midpoint(surface):
    assert surface.midpoint((0, 0), (1, 1)) == geodesic_midpoint((0, 0), (1, 1))


def test_layers_are_attached_once(surface):
    layer = Mock()

    surface.add_layer(layer)
    surface.add_layer(layer)
    assert surface.has_layer(layer)
    layer.on_add.assert_called_once_with(surface)

    surface.remove_layer(layer)
    surface.remove_layer(layer)
    assert not surface.has_layer(layer)
    layer.on_remove.assert_called_once_with(surface)


def test_marker_gestures_emit_signals(surface):
    marker = surface.create_marker((0, 0), MarkerRole.VERTEX)
    received = []
    marker.pressed.connect(lambda m, modifier: received.append(("pressed", modifier)))
    marker.released.connect(lambda m: received.append(("released",)))
    marker.drag_started.connect(lambda m: received.append(("drag_started",)))
    marker.dragged.connect(lambda m: received.append(("dragged", m.get_lat_lng())))
    marker.drag_finished.connect(lambda m: received.append(("drag_finished",)))

    marker.press(True)
    marker.drag_to((1, 1))
    marker.drag_to((2, 2))
    marker.release()
    marker.end_drag()
    marker.end_drag()

    assert received == [
        ("pressed", True),
        ("drag_started",),
        ("dragged", LatLng(1, 1)),
        ("dragged", LatLng(2, 2)),
        ("released",),
        ("drag_finished",),
    ]
    assert not marker.dragging
