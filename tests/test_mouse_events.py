import pytest
from PyQt6.QtCore import QEvent, QPoint, QPointF, QRectF, Qt
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication, QGraphicsView

from ui.components.map_component.geometry import GeometryDescriptor
from ui.components.map_component.graphics import MapSurface
from ui.components.map_component.marker_group import ChangeChannel, MarkerGroup

LEFT = Qt.MouseButton.LeftButton
NO_BUTTON = Qt.MouseButton.NoButton
NO_MODIFIER = Qt.KeyboardModifier.NoModifier


@pytest.fixture
def surface(app, config):
    surface = MapSurface(config)
    surface.setSceneRect(QRectF(-150, -250, 400, 400))
    return surface


@pytest.fixture
def view(surface):
    view = QGraphicsView(surface)
    view.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
    view.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
    view.resize(420, 420)
    view.show()
    QTest.qWaitForWindowExposed(view)
    yield view
    view.close()


@pytest.fixture
def events():
    return []


@pytest.fixture
def ring(surface, events, config):
    group = MarkerGroup(
        GeometryDescriptor.closed_ring([(0, 0), (0, 1), (1, 1), (1, 0)]),
        events.append,
        config,
    )
    surface.add_layer(group)
    return group


def view_pos(view, item):
    return view.mapFromScene(item.scenePos())


def send_mouse(view, event_type, pos, button, buttons, modifiers=NO_MODIFIER):
    viewport = view.viewport()
    event = QMouseEvent(
        event_type,
        QPointF(pos),
        QPointF(viewport.mapToGlobal(pos)),
        button,
        buttons,
        modifiers,
    )
    QApplication.sendEvent(viewport, event)


def press(view, pos, modifiers=NO_MODIFIER):
    send_mouse(view, QEvent.Type.MouseButtonPress, pos, LEFT, LEFT, modifiers)


def move(view, pos):
    send_mouse(view, QEvent.Type.MouseMove, pos, NO_BUTTON, LEFT)


def release(view, pos):
    send_mouse(view, QEvent.Type.MouseButtonRelease, pos, LEFT, NO_BUTTON)


def channels(events):
    return [event.channel for event in events]


def test_click_on_empty_map_emits_map_clicked(view, surface, ring):
    clicks = []
    surface.map_clicked.connect(clicks.append)
    pos = view.mapFromScene(QPointF(50, 50))

    press(view, pos)
    release(view, pos)

    assert len(clicks) == 1
    assert clicks[0].lat == pytest.approx(-0.5, abs=0.02)
    assert clicks[0].lng == pytest.approx(0.5, abs=0.02)


def test_marker_click_does_not_reach_map(view, surface, ring, events):
    clicks = []
    surface.map_clicked.connect(clicks.append)
    pos = view_pos(view, ring.markers()[1])

    press(view, pos)
    release(view, pos)
    QTest.qWait(150)

    assert clicks == []
    assert events == []
    assert ring.length() == 4


def test_ctrl_click_deletes_vertex(view, ring, events):
    vertex = ring.markers()[1]
    pos = view_pos(view, vertex)

    press(view, pos, Qt.KeyboardModifier.ControlModifier)
    release(view, pos)

    assert ring.length() == 3
    assert vertex not in ring.list
    assert channels(events) == [ChangeChannel.DRAGEND]


def test_plain_click_does_not_delete_immediately(view, ring):
    pos = view_pos(view, ring.markers()[1])

    press(view, pos)

    assert ring.length() == 4
    release(view, pos)


def test_held_press_with_small_wobble_deletes(view, ring, events):
    pos = view_pos(view, ring.markers()[1])

    press(view, pos)
    move(view, pos + QPoint(1, 0))
    QTest.qWait(200)

    assert ring.length() == 3
    assert channels(events) == [ChangeChannel.DRAGEND]
    release(view, pos + QPoint(1, 0))


def test_small_wobble_on_midpoint_does_not_insert(view, ring, events):
    pos = view_pos(view, ring.midpoints()[0])

    press(view, pos)
    move(view, pos + QPoint(1, 1))
    release(view, pos + QPoint(1, 1))

    assert ring.length() == 4
    assert len(ring.list) == 8
    assert events == []


def test_mouse_drag_moves_vertex(view, surface, ring, events):
    clicks = []
    surface.map_clicked.connect(clicks.append)
    vertex = ring.markers()[0]
    start = view_pos(view, vertex)

    press(view, start)
    move(view, start + QPoint(30, 0))
    assert not surface.is_map_click_enabled()
    move(view, start + QPoint(40, 0))
    release(view, start + QPoint(40, 0))
    QTest.qWait(150)

    assert channels(events) == [
        ChangeChannel.DRAG,
        ChangeChannel.DRAG,
        ChangeChannel.DRAGEND,
    ]
    assert vertex.get_lat_lng().lng == pytest.approx(0.4, abs=0.02)
    assert vertex.get_lat_lng().lat == pytest.approx(0.0, abs=0.02)
    assert ring.length() == 4
    assert surface.is_map_click_enabled()
    assert clicks == []


def test_mouse_drag_on_midpoint_inserts_vertex(view, ring, events):
    midpoint = ring.midpoints()[0]
    start = view_pos(view, midpoint)

    press(view, start)
    move(view, start + QPoint(0, 30))
    move(view, start + QPoint(0, 35))
    release(view, start + QPoint(0, 35))

    assert ring.length() == 5
    assert len(ring.midpoints()) == 5
    assert channels(events) == [ChangeChannel.DRAG, ChangeChannel.DRAGEND]
