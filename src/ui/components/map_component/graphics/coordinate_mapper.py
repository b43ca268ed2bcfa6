"""Coordinate mapping utilities for the graphics-based map surface."""

from typing import Sequence

from PyQt6.QtCore import QPointF

from ui.components.map_component.geometry import LatLng, to_lat_lng


class GraphicsCoordinateMapper:
    """Handles coordinate transformations for the graphics system.

    Manages conversions between geographic coordinates (lat/lng in degrees)
    and scene coordinates (QGraphicsScene pixels) using an equirectangular
    projection anchored at an origin. Scene y grows downwards, so latitude is
    inverted.
    """

    def __init__(
        self,
        pixels_per_degree: float = 1000.0,
        origin_lat: float = 0.0,
        origin_lng: float = 0.0,
    ):
        """Initialize the coordinate mapper.

        Args:
            pixels_per_degree: Scene pixels per degree of latitude/longitude
            origin_lat: Latitude mapped to scene y = 0
            origin_lng: Longitude mapped to scene x = 0
        """
        if pixels_per_degree <= 0:
            raise ValueError("pixels_per_degree must be positive")
        self.pixels_per_degree = float(pixels_per_degree)
        self.origin = LatLng(float(origin_lat), float(origin_lng))

    def latlng_to_scene(self, latlng: Sequence[float]) -> QPointF:
        """Convert a geographic coordinate to scene coordinates.

        Args:
            latlng: Coordinate as (lat, lng)

        Returns:
            Point in scene coordinates
        """
        lat, lng = to_lat_lng(latlng)
        scene_x = (lng - self.origin.lng) * self.pixels_per_degree
        scene_y = (self.origin.lat - lat) * self.pixels_per_degree
        return QPointF(scene_x, scene_y)

    def scene_to_latlng(self, scene_point: QPointF) -> LatLng:
        """Convert scene coordinates to a geographic coordinate.

        Args:
            scene_point: Point in scene coordinates

        Returns:
            Coordinate as LatLng
        """
        lat = self.origin.lat - scene_point.y() / self.pixels_per_degree
        lng = self.origin.lng + scene_point.x() / self.pixels_per_degree
        return LatLng(lat, lng)
