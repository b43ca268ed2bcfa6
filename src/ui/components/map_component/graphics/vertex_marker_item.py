"""Marker handle graphics item for interactive vertex editing."""

from enum import Enum
from typing import Any, Dict, Optional, Sequence

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QCursor, QPainter, QPen
from PyQt6.QtWidgets import (
    QApplication,
    QGraphicsItem,
    QGraphicsObject,
    QStyleOptionGraphicsItem,
    QWidget,
)
from structlog import get_logger

from ui.components.map_component.geometry import LatLng, to_lat_lng
from ui.components.map_component.graphics.coordinate_mapper import (
    GraphicsCoordinateMapper,
)

logger = get_logger(__name__)


class MarkerRole(Enum):
    """Role of a marker within a marker group."""

    VERTEX = "vertex"  # a real geometry coordinate
    MIDPOINT = "midpoint"  # insertion handle between two vertices


MODIFIER_KEYS = {
    "control": Qt.KeyboardModifier.ControlModifier,
    "shift": Qt.KeyboardModifier.ShiftModifier,
    "alt": Qt.KeyboardModifier.AltModifier,
    "meta": Qt.KeyboardModifier.MetaModifier,
}


class VertexMarker(QGraphicsObject):
    """Draggable handle bound to one coordinate of an edited geometry.

    Qt mouse events are translated into the gesture methods ``press``,
    ``release``, ``begin_drag``, ``drag_to`` and ``end_drag``, each of which
    emits the matching signal with the marker itself as first argument.
    The gesture methods can also be called directly to drive the marker
    programmatically.

    Attributes:
        role (MarkerRole): Current role of the marker
        pred: Previous marker in the owning marker list
        succ: Next marker in the owning marker list
        dragging (bool): Whether a drag is in progress
    """

    pressed = pyqtSignal(object, bool)  # marker, delete modifier held
    released = pyqtSignal(object)
    drag_started = pyqtSignal(object)
    dragged = pyqtSignal(object)
    drag_finished = pyqtSignal(object)

    DEFAULT_VERTEX_RADIUS = 6
    DEFAULT_MIDPOINT_RADIUS = 4
    DEFAULT_VERTEX_COLOR = "#FFFFFF"
    DEFAULT_MIDPOINT_COLOR = "#FFFFFF"
    DEFAULT_MIDPOINT_OPACITY = 0.6
    OUTLINE_COLOR = "#333333"

    def __init__(
        self,
        latlng: Sequence[float],
        role: MarkerRole,
        mapper: GraphicsCoordinateMapper,
        config: Optional[Dict[str, Any]] = None,
        parent=None,
    ):
        """Initialize the marker.

        Args:
            latlng: Initial coordinate as (lat, lng)
            role: Initial marker role
            mapper: Mapper used to place the marker in the scene
            config: Optional configuration dictionary; styling is read from
                its 'marker_edit' section
            parent: Optional parent graphics item
        """
        super().__init__(parent)

        self.mapper = mapper
        self.config = config or {}
        self.pred = None
        self.succ = None
        self.dragging = False

        marker_config = self.config.get("marker_edit", {})
        self.vertex_radius = marker_config.get(
            "VERTEX_MARKER_RADIUS", self.DEFAULT_VERTEX_RADIUS
        )
        self.midpoint_radius = marker_config.get(
            "MIDPOINT_MARKER_RADIUS", self.DEFAULT_MIDPOINT_RADIUS
        )
        self.vertex_color = QColor(
            marker_config.get("VERTEX_MARKER_COLOR", self.DEFAULT_VERTEX_COLOR)
        )
        self.midpoint_color = QColor(
            marker_config.get("MIDPOINT_MARKER_COLOR", self.DEFAULT_MIDPOINT_COLOR)
        )
        self.midpoint_opacity = float(
            marker_config.get("MIDPOINT_MARKER_OPACITY", self.DEFAULT_MIDPOINT_OPACITY)
        )
        modifier_name = str(marker_config.get("DELETE_MODIFIER", "control")).lower()
        self.delete_modifier = MODIFIER_KEYS.get(
            modifier_name, Qt.KeyboardModifier.ControlModifier
        )

        self.role = role
        self._latlng = to_lat_lng(latlng)

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)
        self.setAcceptHoverEvents(True)
        self.setCursor(QCursor(Qt.CursorShape.SizeAllCursor))
        self.setZValue(200)
        self.setPos(self.mapper.latlng_to_scene(self._latlng))

    @property
    def radius(self) -> int:
        if self.role is MarkerRole.VERTEX:
            return self.vertex_radius
        return self.midpoint_radius

    def get_lat_lng(self) -> LatLng:
        """Get the coordinate the marker is bound to."""
        return self._latlng

    def set_lat_lng(self, latlng: Sequence[float]) -> None:
        """Move the marker to a new coordinate."""
        self._latlng = to_lat_lng(latlng)
        self.setPos(self.mapper.latlng_to_scene(self._latlng))

    def set_role(self, role: MarkerRole) -> None:
        """Change the role and restyle the marker."""
        if role is self.role:
            return
        self.prepareGeometryChange()
        self.role = role
        self.update()

    def boundingRect(self) -> QRectF:
        extent = self.radius + 1
        return QRectF(-extent, -extent, extent * 2, extent * 2)

    def paint(
        self,
        painter: QPainter,
        option: QStyleOptionGraphicsItem,
        widget: Optional[QWidget] = None,
    ) -> None:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        if self.role is MarkerRole.MIDPOINT:
            painter.setOpacity(self.midpoint_opacity)
            fill = self.midpoint_color
        else:
            fill = self.vertex_color

        painter.setPen(QPen(QColor(self.OUTLINE_COLOR), 1))
        painter.setBrush(QBrush(fill))
        painter.drawEllipse(QPointF(0, 0), self.radius, self.radius)

    # Gestures

    def press(self, delete_modifier: bool = False) -> None:
        self.pressed.emit(self, delete_modifier)

    def release(self) -> None:
        self.released.emit(self)

    def begin_drag(self) -> None:
        if self.dragging:
            return
        self.dragging = True
        self.drag_started.emit(self)

    def drag_to(self, latlng: Sequence[float]) -> None:
        """Move the marker as part of a drag, starting the drag if needed."""
        if not self.dragging:
            self.begin_drag()
        self.set_lat_lng(latlng)
        self.dragged.emit(self)

    def end_drag(self) -> None:
        if not self.dragging:
            return
        self.dragging = False
        self.drag_finished.emit(self)

    # Qt event translation

    def mousePressEvent(self, event) -> None:
        """Handle mouse press events.

        The event is always accepted for the left button so that presses on a
        marker never reach the map's own click handling.
        """
        if event.button() == Qt.MouseButton.LeftButton:
            delete_modifier = bool(event.modifiers() & self.delete_modifier)
            event.accept()
            self.press(delete_modifier)
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        """Handle mouse move events.

        A drag starts only once the pointer has travelled the platform drag
        distance from where the button went down; smaller movements keep the
        press alive so a pending press-and-hold still fires.
        """
        if not event.buttons() & Qt.MouseButton.LeftButton:
            super().mouseMoveEvent(event)
            return

        event.accept()
        if not self.dragging:
            moved = event.screenPos() - event.buttonDownScreenPos(
                Qt.MouseButton.LeftButton
            )
            if moved.manhattanLength() < QApplication.startDragDistance():
                return
        self.drag_to(self.mapper.scene_to_latlng(event.scenePos()))

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            event.accept()
            self.release()
            self.end_drag()
        else:
            super().mouseReleaseEvent(event)
