"""Map surface scene hosting editable marker groups."""

from typing import Any, Dict, List, Optional, Sequence

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QGraphicsScene
from structlog import get_logger

from ui.components.map_component.geometry import LatLng, geodesic_midpoint
from ui.components.map_component.graphics.coordinate_mapper import (
    GraphicsCoordinateMapper,
)
from ui.components.map_component.graphics.vertex_marker_item import (
    MarkerRole,
    VertexMarker,
)

logger = get_logger(__name__)


class MapSurface(QGraphicsScene):
    """Graphics scene acting as the host map surface for marker groups.

    Handles:
    - Creation and removal of marker handles
    - Coordinate transformations through a GraphicsCoordinateMapper
    - Map-level click handling, which can be suspended while markers drag
    - Attaching and detaching layers (marker groups)
    """

    map_clicked = pyqtSignal(object)  # LatLng
    map_click_enabled_changed = pyqtSignal(bool)

    def __init__(self, config: Optional[Dict[str, Any]] = None, parent=None):
        """Initialize the map surface.

        Args:
            config: Optional configuration dictionary; the 'map' section
                configures the projection
            parent: Parent object
        """
        super().__init__(parent)

        self.config = config or {}
        map_config = self.config.get("map", {})
        self.mapper = GraphicsCoordinateMapper(
            pixels_per_degree=map_config.get("PIXELS_PER_DEGREE", 1000.0),
            origin_lat=map_config.get("ORIGIN_LAT", 0.0),
            origin_lng=map_config.get("ORIGIN_LNG", 0.0),
        )

        self._map_click_enabled = True
        self.layers: List[Any] = []

        logger.info("MapSurface initialized")

    # Layers

    def add_layer(self, layer: Any) -> None:
        """Attach a layer (e.g. a MarkerGroup) to the surface."""
        if layer in self.layers:
            return
        self.layers.append(layer)
        layer.on_add(self)
        logger.debug("Layer added", layer_count=len(self.layers))

    def remove_layer(self, layer: Any) -> None:
        """Detach a layer from the surface."""
        if layer not in self.layers:
            return
        self.layers.remove(layer)
        layer.on_remove(self)
        logger.debug("Layer removed", layer_count=len(self.layers))

    def has_layer(self, layer: Any) -> bool:
        return layer in self.layers

    # Markers

    def create_marker(self, latlng: Sequence[float], role: MarkerRole) -> VertexMarker:
        """Create a marker handle and add it to the scene.

        Args:
            latlng: Coordinate as (lat, lng)
            role: Initial marker role

        Returns:
            The new marker
        """
        marker = VertexMarker(latlng, role, self.mapper, self.config)
        self.addItem(marker)
        return marker

    def remove_marker(self, marker: VertexMarker) -> bool:
        """Remove a marker handle from the scene.

        Markers that are not on this surface are ignored.

        Returns:
            True if the marker was removed
        """
        if marker is None or marker.scene() is not self:
            return False
        self.removeItem(marker)
        return True

    def midpoint(self, a: Sequence[float], b: Sequence[float]) -> LatLng:
        """Get the geodesic midpoint between two coordinates."""
        return geodesic_midpoint(a, b)

    # Map click handling

    def disable_map_click(self) -> None:
        """Suspend map-level click handling."""
        if self._map_click_enabled:
            self._map_click_enabled = False
            self.map_click_enabled_changed.emit(False)

    def enable_map_click(self) -> None:
        """Resume map-level click handling."""
        if not self._map_click_enabled:
            self._map_click_enabled = True
            self.map_click_enabled_changed.emit(True)

    def is_map_click_enabled(self) -> bool:
        return self._map_click_enabled

    def mousePressEvent(self, event) -> None:
        """Forward presses to items; presses on empty map space become map clicks."""
        super().mousePressEvent(event)
        if event.isAccepted() or not self._map_click_enabled:
            return
        latlng = self.mapper.scene_to_latlng(event.scenePos())
        logger.debug("Map clicked", lat=latlng.lat, lng=latlng.lng)
        self.map_clicked.emit(latlng)
