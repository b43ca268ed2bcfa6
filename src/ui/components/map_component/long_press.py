"""Press-and-hold detection for marker deletion.

A press on a vertex marker arms a single-shot timer. Releasing or dragging the
marker before the timer expires cancels it, otherwise the armed action runs
exactly once. Each timer carries an explicit state so that a late release or
a second expiry can never run the action again.
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QObject, QTimer
from structlog import get_logger

logger = get_logger(__name__)

DEFAULT_LONG_PRESS_MS = 550


class LongPressState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    CANCELLED = "cancelled"
    FIRED = "fired"


class LongPressTimer(QObject):
    """Single-shot cancellable task bound to one press."""

    def __init__(
        self,
        action: Callable[[], None],
        delay_ms: int = DEFAULT_LONG_PRESS_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._action = action
        self.delay_ms = delay_ms
        self.state = LongPressState.IDLE

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.fire)

    @property
    def is_armed(self) -> bool:
        return self.state is LongPressState.ARMED

    def start(self) -> None:
        """Arm the timer."""
        self.state = LongPressState.ARMED
        self._timer.start(self.delay_ms)

    def cancel(self) -> bool:
        """Cancel an armed timer.

        Returns:
            True if the timer was armed and is now cancelled
        """
        if self.state is not LongPressState.ARMED:
            return False
        self._timer.stop()
        self.state = LongPressState.CANCELLED
        return True

    def fire(self) -> bool:
        """Run the action if the timer is still armed.

        Returns:
            True if the action ran
        """
        if self.state is not LongPressState.ARMED:
            return False
        self._timer.stop()
        self.state = LongPressState.FIRED
        self._action()
        return True


class PressAndHoldTracker(QObject):
    """Keeps at most one live long-press timer per marker."""

    def __init__(self, delay_ms: int = DEFAULT_LONG_PRESS_MS, parent=None):
        super().__init__(parent)
        self.delay_ms = delay_ms
        self._timers: Dict[int, LongPressTimer] = {}

    def arm(self, marker: Any, action: Callable[[], None]) -> LongPressTimer:
        """Start a long-press timer for a marker.

        A timer still armed for the same marker is cancelled first.

        Args:
            marker: Marker that was pressed
            action: Callable run when the press is held long enough

        Returns:
            The armed timer
        """
        key = id(marker)
        self.cancel(marker)

        def run():
            finished = self._timers.pop(key, None)
            try:
                action()
            finally:
                if finished is not None:
                    finished.deleteLater()

        timer = LongPressTimer(run, self.delay_ms, self)
        self._timers[key] = timer
        timer.start()
        logger.debug("Long press armed", delay_ms=self.delay_ms)
        return timer

    def cancel(self, marker: Any) -> bool:
        """Cancel the live timer of a marker, if any."""
        timer = self._timers.pop(id(marker), None)
        if timer is None:
            return False
        cancelled = timer.cancel()
        timer.deleteLater()
        if cancelled:
            logger.debug("Long press cancelled")
        return cancelled

    def cancel_all(self) -> None:
        """Cancel every live timer."""
        for timer in self._timers.values():
            timer.cancel()
            timer.deleteLater()
        self._timers.clear()

    def timer_for(self, marker: Any) -> Optional[LongPressTimer]:
        """Get the live timer of a marker."""
        return self._timers.get(id(marker))

    def is_armed(self, marker: Any) -> bool:
        timer = self._timers.get(id(marker))
        return timer is not None and timer.is_armed
