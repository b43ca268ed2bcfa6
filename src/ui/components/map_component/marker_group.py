"""Marker group controller for interactive vertex editing.

A MarkerGroup edits exactly one geometry (an open path or a closed ring) on a
map surface. It keeps a marker list in which vertex markers and midpoint
markers strictly alternate::

    open path:    V - M - V - M - V
    closed ring:  V - M - V - M - V - M  (the last midpoint wraps to the head)

User gestures on the markers reshape the geometry:

- dragging a vertex moves it, midpoints follow the adjacent segments
- dragging a midpoint promotes it to a vertex and adds two new midpoints
- holding a press on a vertex (or pressing with the delete modifier) removes
  the vertex and one adjacent midpoint

Every edit is reported to the owner through a single callback receiving a
GeometryChangeEvent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QObject

from ui.components.map_component.geometry import (
    GeometryDescriptor,
    GeometryKind,
    LatLng,
)
from ui.components.map_component.geometry import minimum_points as default_minimum_points
from ui.components.map_component.graphics.vertex_marker_item import (
    MarkerRole,
    VertexMarker,
)
from ui.components.map_component.long_press import (
    DEFAULT_LONG_PRESS_MS,
    PressAndHoldTracker,
)
from ui.components.map_component.marker_list import BaseMarkerList, create_marker_list
from ui.components.map_component.utils.map_logger import get_map_logger
from utils.error_handler import ErrorHandler

logger = get_map_logger(__name__)


class ChangeChannel(str, Enum):
    DRAG = "drag"  # in-progress move
    DRAGEND = "dragend"  # completed edit


@dataclass(frozen=True)
class GeometryChangeEvent:
    """Payload delivered to the owner of a marker group."""

    channel: ChangeChannel
    geometry_kind: GeometryKind
    coordinates: Tuple[LatLng, ...]

    def as_dict(self) -> Dict[str, Any]:
        """Get the event as a plain wire payload."""
        return {
            "channel": self.channel.value,
            "geometryKind": self.geometry_kind.value,
            "coordinates": [[c.lat, c.lng] for c in self.coordinates],
        }


class MarkerGroup(QObject):
    """Controller keeping the markers of one geometry in sync with edits.

    Marker signals are connected once when a marker is created. What a gesture
    does depends on the marker's role at the time the gesture arrives, so
    promoting a midpoint to a vertex switches its behavior without touching
    the connections.

    Attributes:
        geometry (GeometryDescriptor): Geometry the markers were built from
        callback: Callable receiving GeometryChangeEvent instances
        list (BaseMarkerList): Marker list matching the geometry kind
        surface: Map surface the group is attached to, or None
    """

    def __init__(
        self,
        geometry: GeometryDescriptor,
        callback: Callable[[GeometryChangeEvent], None],
        config: Optional[Dict[str, Any]] = None,
        minimum_points: Optional[Callable[[GeometryKind], int]] = None,
        error_handler: Optional[ErrorHandler] = None,
        parent=None,
    ):
        """Initialize the marker group.

        Args:
            geometry: Geometry to edit
            callback: Receives a GeometryChangeEvent on every edit
            config: Optional configuration dictionary; the 'marker_edit'
                section configures the long press delay
            minimum_points: Policy returning the minimum vertex count for a
                geometry kind; 2 for paths and 3 for rings when omitted
            error_handler: Handler for failures raised by the callback
            parent: Parent object
        """
        super().__init__(parent)

        self.geometry = geometry
        self.callback = callback
        self.config = config or {}
        self.minimum_points = minimum_points or default_minimum_points
        self.error_handler = error_handler or ErrorHandler()
        self.list: BaseMarkerList = create_marker_list(geometry.kind)
        self.surface = None

        delay_ms = self.config.get("marker_edit", {}).get(
            "LONG_PRESS_DELETE_MS", DEFAULT_LONG_PRESS_MS
        )
        self.press_tracker = PressAndHoldTracker(delay_ms, self)

        # Gesture handlers per marker role
        self._role_handlers = {
            MarkerRole.VERTEX: {
                "dragged": self.update_point,
                "drag_finished": self._finish_vertex_drag,
                "pressed": self.remove_point,
            },
            MarkerRole.MIDPOINT: {
                "dragged": self.add_point,
            },
        }

    # Layer lifecycle

    def on_add(self, surface) -> None:
        """Attach to a map surface and build the markers."""
        self.surface = surface
        self.setup()

    def on_remove(self, surface) -> None:
        """Detach from the map surface and remove all markers."""
        self.dispose()
        self.surface = None

    # Accessors

    def markers(self) -> List[VertexMarker]:
        """Get the vertex markers in traversal order."""
        return list(self.list.filter(lambda marker: marker.role is MarkerRole.VERTEX))

    def midpoints(self) -> List[VertexMarker]:
        """Get the midpoint markers in traversal order."""
        return list(
            self.list.filter(lambda marker: marker.role is MarkerRole.MIDPOINT)
        )

    def length(self) -> int:
        """Get the current vertex count."""
        return len(self.markers())

    def current_geometry(self) -> GeometryDescriptor:
        """Get a descriptor of the geometry as currently edited."""
        return self.geometry.with_coordinates(
            marker.get_lat_lng() for marker in self.markers()
        )

    # Marker management

    def create_marker(self, latlng: Sequence[float], role: MarkerRole) -> VertexMarker:
        """Create a marker on the surface and connect its gestures."""
        if self.surface is None:
            raise RuntimeError("MarkerGroup is not attached to a map surface")

        marker = self.surface.create_marker(latlng, role)
        marker.pressed.connect(self._on_pressed)
        marker.released.connect(self._on_released)
        marker.drag_started.connect(self._on_drag_started)
        marker.dragged.connect(self._on_dragged)
        marker.drag_finished.connect(self._on_drag_finished)
        return marker

    def append_marker(
        self, latlng: Sequence[float], role: MarkerRole, after: VertexMarker = None
    ) -> VertexMarker:
        """Create a marker and insert it after another one (or at the tail)."""
        return self.list.append(self.create_marker(latlng, role), after)

    def prepend_marker(
        self, latlng: Sequence[float], role: MarkerRole, before: VertexMarker = None
    ) -> VertexMarker:
        """Create a marker and insert it before another one (or at the head)."""
        return self.list.prepend(self.create_marker(latlng, role), before)

    def remove_marker(self, marker: VertexMarker) -> None:
        """Remove a vertex marker together with one adjacent midpoint.

        The successor midpoint is removed when there is one, otherwise the
        predecessor midpoint (the last vertex of an open path).
        """
        self._release_marker(marker.succ if marker.succ is not None else marker.pred)
        self._release_marker(marker)

    def _release_marker(self, marker: Optional[VertexMarker]) -> None:
        if marker is None:
            return

        self.press_tracker.cancel(marker)
        if marker.dragging:
            marker.dragging = False
            if self.surface is not None:
                self.surface.enable_map_click()
        if self.surface is not None:
            self.surface.remove_marker(marker)

        if self.list.remove(marker):
            marker.pressed.disconnect(self._on_pressed)
            marker.released.disconnect(self._on_released)
            marker.drag_started.disconnect(self._on_drag_started)
            marker.dragged.disconnect(self._on_dragged)
            marker.drag_finished.disconnect(self._on_drag_finished)

    def _update_midpoints(self) -> None:
        """Move every midpoint to the geodesic midpoint of its vertices."""
        for marker in self.markers():
            midpoint = marker.succ

            # Last point of an open path
            if midpoint is None or midpoint.role is not MarkerRole.MIDPOINT:
                continue
            midpoint.set_lat_lng(
                self.surface.midpoint(
                    marker.get_lat_lng(), midpoint.succ.get_lat_lng()
                )
            )

    # Events

    def emit_event(self, channel: ChangeChannel) -> Callable[[], None]:
        """Get a handler reporting the current vertex coordinates on a channel."""
        channel = ChangeChannel(channel)

        def emit() -> None:
            event = GeometryChangeEvent(
                channel=channel,
                geometry_kind=self.geometry.kind,
                coordinates=tuple(marker.get_lat_lng() for marker in self.markers()),
            )
            self._deliver(event)

        return emit

    def _deliver(self, event: GeometryChangeEvent) -> None:
        try:
            self.callback(event)
        except Exception as e:
            logger.error(
                "Geometry change callback failed",
                channel=event.channel.value,
                error=str(e),
            )
            self.error_handler.handle_exception("Geometry change callback failed", e)

    # Edit operations

    def update_point(self, marker: VertexMarker = None) -> None:
        """Report a vertex move and glue the midpoints to the new segments."""
        self.emit_event(ChangeChannel.DRAG)()
        self._update_midpoints()

    def _finish_vertex_drag(self, marker: VertexMarker) -> None:
        self.emit_event(ChangeChannel.DRAGEND)()

    def can_delete(self) -> bool:
        """Check whether removing a vertex keeps the minimum vertex count."""
        return self.length() > self.minimum_points(self.geometry.kind)

    def remove_point(self, marker: VertexMarker, delete_modifier: bool = False) -> bool:
        """Handle a press on a vertex marker as a delete request.

        With the delete modifier held the vertex is removed at once, otherwise
        a long press timer is armed which a release or drag cancels.

        Returns:
            False if the delete was rejected
        """
        if marker not in self.list or marker.role is not MarkerRole.VERTEX:
            return False
        if not self.can_delete():
            logger.debug(
                "Delete rejected at minimum vertex count", vertices=self.length()
            )
            return False

        if delete_modifier:
            self.press_tracker.cancel(marker)
            return self.delete_vertex(marker)

        self.press_tracker.arm(marker, lambda: self.delete_vertex(marker))
        return True

    def delete_vertex(self, marker: VertexMarker) -> bool:
        """Remove a vertex marker and report the edit.

        Returns:
            True if the vertex was removed
        """
        if marker not in self.list or marker.role is not MarkerRole.VERTEX:
            return False
        if not self.can_delete():
            logger.debug(
                "Delete rejected at minimum vertex count", vertices=self.length()
            )
            return False

        self.remove_marker(marker)
        self._update_midpoints()
        logger.info("Vertex deleted", vertices=self.length())
        self.emit_event(ChangeChannel.DRAGEND)()
        return True

    def add_point(self, marker: VertexMarker) -> None:
        """Promote a midpoint marker to a vertex.

        New midpoints are inserted on both sides of the promoted marker. No
        event is emitted here; the ongoing drag of the promoted marker reports
        the change.
        """
        if marker not in self.list or marker.role is not MarkerRole.MIDPOINT:
            return

        marker.set_role(MarkerRole.VERTEX)

        latlng = marker.get_lat_lng()
        self.append_marker(
            self.surface.midpoint(latlng, marker.succ.get_lat_lng()),
            MarkerRole.MIDPOINT,
            after=marker,
        )
        self.prepend_marker(
            self.surface.midpoint(latlng, marker.pred.get_lat_lng()),
            MarkerRole.MIDPOINT,
            before=marker,
        )
        logger.info("Vertex inserted", vertices=self.length())

    # Build and teardown

    def setup(self) -> None:
        """Create the vertex markers and the midpoints between them."""
        for latlng in self.geometry.coordinates:
            self.append_marker(latlng, MarkerRole.VERTEX)

        for marker in self.markers():
            # Last point of an open path has no trailing midpoint
            if marker.succ is None:
                continue
            latlng = self.surface.midpoint(
                marker.get_lat_lng(), marker.succ.get_lat_lng()
            )
            self.append_marker(latlng, MarkerRole.MIDPOINT, after=marker)

        logger.info(
            "Marker group set up",
            kind=self.geometry.kind.value,
            vertices=self.length(),
            markers=len(self.list),
        )

    def dispose(self) -> None:
        """Remove every marker from the surface and the list."""
        self.press_tracker.cancel_all()
        for marker in list(self.list):
            self._release_marker(marker)
        logger.debug("Marker group disposed")

    def update_geometry(self, geometry: GeometryDescriptor) -> None:
        """Replace the edited geometry and rebuild the markers."""
        attached = self.surface is not None
        self.dispose()
        self.geometry = geometry
        self.list = create_marker_list(geometry.kind)
        if attached:
            self.setup()

    # Gesture dispatch

    def _dispatch(self, gesture: str, marker: VertexMarker, *args) -> None:
        handler = self._role_handlers[marker.role].get(gesture)
        if handler is not None:
            handler(marker, *args)

    def _on_pressed(self, marker: VertexMarker, delete_modifier: bool) -> None:
        self._dispatch("pressed", marker, delete_modifier)

    def _on_released(self, marker: VertexMarker) -> None:
        self.press_tracker.cancel(marker)

    def _on_drag_started(self, marker: VertexMarker) -> None:
        self.press_tracker.cancel(marker)
        # Disable click event on map while dragging
        if self.surface is not None:
            self.surface.disable_map_click()

    def _on_dragged(self, marker: VertexMarker) -> None:
        self.press_tracker.cancel(marker)
        self._dispatch("dragged", marker)

    def _on_drag_finished(self, marker: VertexMarker) -> None:
        if self.surface is not None:
            self.surface.enable_map_click()
        self._dispatch("drag_finished", marker)
