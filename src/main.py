"""
Main module for the vertex editor application.

Opens a map surface with one editable geometry. The geometry is given as WKT on
the command line (a LINESTRING or a POLYGON); a unit square is edited when no
argument is given. Every edit is shown in the status bar as WKT.

Functions:
    exception_hook(exctype, value, tb): Custom exception hook for logging unhandled exceptions.
    main(argv): Run the application.
"""

import sys
import traceback
from typing import List, Optional

import structlog
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QPainter
from PyQt6.QtWidgets import QApplication, QGraphicsView, QMainWindow, QMessageBox

from config.config import Config, load_config
from ui.components.map_component.graphics import MapSurface
from ui.components.map_component.marker_group import (
    ChangeChannel,
    GeometryChangeEvent,
    MarkerGroup,
)
from utils.app_logging import setup_app_logging
from utils.error_handler import ErrorHandler
from utils.geometry_handler import GeometryHandler

DEFAULT_WKT = "POLYGON ((0 0, 1 0, 1 1, 0 1, 0 0))"

log_file = None


def exception_hook(exctype: type, value: Exception, tb: traceback) -> None:
    """
    Custom exception hook for logging unhandled exceptions.

    Args:
        exctype (type): The exception type.
        value (Exception): The exception instance.
        tb (traceback): The traceback object.
    """
    structlog.get_logger().critical(
        "Unhandled exception",
        error_type=str(exctype.__name__),
        error_value=str(value),
        traceback=traceback.format_tb(tb),
    )

    app = QApplication.instance()
    if app is not None:
        QMessageBox.critical(
            None,
            "Unhandled Exception",
            f"An unhandled exception occurred:\n{value}\n\nPlease check the log file for details.",
        )


class VertexEditorWindow(QMainWindow):
    """Main window showing the map surface and the edited geometry."""

    def __init__(self, config: Config, wkt: str) -> None:
        super().__init__()
        self.setObjectName("VertexEditorWindow")
        self.setWindowTitle("Vertex Editor")
        self.logger = structlog.get_logger(__name__)

        settings = config.to_dict()
        self.error_handler = ErrorHandler(ui_feedback_handler=self._show_error)

        self.surface = MapSurface(settings, self)
        self.view = QGraphicsView(self.surface, self)
        self.view.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.view.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setCentralWidget(self.view)

        self.group = MarkerGroup(
            GeometryHandler.from_wkt(wkt),
            self.on_geometry_changed,
            settings,
            error_handler=self.error_handler,
            parent=self,
        )
        self.surface.add_layer(self.group)
        self.surface.map_clicked.connect(self.on_map_clicked)

        self.view.fitInView(
            self.surface.itemsBoundingRect().adjusted(-50, -50, 50, 50),
            Qt.AspectRatioMode.KeepAspectRatio,
        )
        self.statusBar().showMessage(wkt)

    def on_geometry_changed(self, event: GeometryChangeEvent) -> None:
        wkt = GeometryHandler.to_wkt(self.group.current_geometry())
        self.statusBar().showMessage(wkt)
        if event.channel is ChangeChannel.DRAGEND:
            self.logger.info("Geometry edited", wkt=wkt)

    def on_map_clicked(self, latlng) -> None:
        self.statusBar().showMessage(f"{latlng.lat:.6f}, {latlng.lng:.6f}")

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.surface.remove_layer(self.group)
        super().closeEvent(event)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the application.

    Args:
        argv: Command line arguments; the first one is an optional WKT geometry

    Returns:
        The Qt event loop exit code
    """
    global log_file

    argv = sys.argv if argv is None else argv
    config = load_config()
    log_file = setup_app_logging(level=config.get("LOGGING_LEVEL", "DEBUG"))
    sys.excepthook = exception_hook

    wkt = argv[1] if len(argv) > 1 else DEFAULT_WKT
    if not GeometryHandler.validate_wkt(wkt):
        ErrorHandler().handle_error(f"Not an editable geometry: {wkt}")
        return 2

    app = QApplication(argv)
    window = VertexEditorWindow(config, wkt)
    window.resize(1024, 768)
    window.show()

    try:
        return app.exec()
    finally:
        log_file.close()


if __name__ == "__main__":
    sys.exit(main())
