"""Ordered marker lists for open and closed geometries.

Markers are linked through their own ``pred`` and ``succ`` attributes. The
linear variant backs open paths (the head has no ``pred``, the tail no
``succ``); the circular variant backs closed rings, where every marker has
both neighbors and traversal wraps around.

The lists know nothing about geometry, they only manage the links.
"""

from typing import Any, Callable, Iterator, Optional

from structlog import get_logger

from ui.components.map_component.geometry import GeometryKind

logger = get_logger(__name__)


class BaseMarkerList:
    """Shared implementation of the doubly-linked marker sequence.

    Subclasses decide how the ends of the sequence are joined by overriding
    ``_link_ends``.
    """

    is_circular = False

    def __init__(self):
        self._head = None
        self._tail = None
        self._members = set()

    @property
    def head(self) -> Optional[Any]:
        """First marker in traversal order, or None for an empty list."""
        return self._head

    @property
    def tail(self) -> Optional[Any]:
        """Last marker in traversal order, or None for an empty list."""
        return self._tail

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, marker: Any) -> bool:
        return marker in self._members

    def __iter__(self) -> Iterator[Any]:
        return self.filter(lambda marker: True)

    def _link_ends(self) -> None:
        """Join or terminate the ends of the sequence. Must be overridden."""
        raise NotImplementedError("Subclasses must implement _link_ends")

    def _check_insertable(self, marker: Any, anchor: Any) -> None:
        if marker in self._members:
            raise ValueError("Marker is already part of this list")
        if anchor is not None and anchor not in self._members:
            raise ValueError("Anchor marker is not part of this list")

    def append(self, marker: Any, after: Any = None) -> Any:
        """Insert a marker immediately after another one.

        Args:
            marker: Marker to insert
            after: Marker to insert after; the tail when omitted

        Returns:
            The inserted marker
        """
        self._check_insertable(marker, after)

        if not self._members:
            self._insert_first(marker)
            return marker

        after = after if after is not None else self._tail
        successor = after.succ if after is not self._tail else None

        marker.pred = after
        marker.succ = successor
        after.succ = marker
        if successor is not None:
            successor.pred = marker
        if after is self._tail:
            self._tail = marker

        self._members.add(marker)
        self._link_ends()
        return marker

    def prepend(self, marker: Any, before: Any = None) -> Any:
        """Insert a marker immediately before another one.

        Args:
            marker: Marker to insert
            before: Marker to insert before; the head when omitted

        Returns:
            The inserted marker
        """
        self._check_insertable(marker, before)

        if not self._members:
            self._insert_first(marker)
            return marker

        before = before if before is not None else self._head
        predecessor = before.pred if before is not self._head else None

        marker.succ = before
        marker.pred = predecessor
        before.pred = marker
        if predecessor is not None:
            predecessor.succ = marker
        if before is self._head:
            self._head = marker

        self._members.add(marker)
        self._link_ends()
        return marker

    def _insert_first(self, marker: Any) -> None:
        marker.pred = None
        marker.succ = None
        self._head = self._tail = marker
        self._members.add(marker)
        self._link_ends()

    def remove(self, marker: Any) -> bool:
        """Unlink a marker so that its neighbors become adjacent.

        Removing a marker that is not in the list does nothing.

        Returns:
            True if the marker was removed
        """
        if marker is None or marker not in self._members:
            return False

        self._members.discard(marker)

        if not self._members:
            self._head = self._tail = None
        else:
            predecessor = marker.pred if marker is not self._head else None
            successor = marker.succ if marker is not self._tail else None

            if predecessor is not None:
                predecessor.succ = successor
            if successor is not None:
                successor.pred = predecessor
            if marker is self._head:
                self._head = successor
            if marker is self._tail:
                self._tail = predecessor
            self._link_ends()

        marker.pred = None
        marker.succ = None
        return True

    def filter(self, predicate: Callable[[Any], bool]) -> Iterator[Any]:
        """Lazily yield the markers satisfying a predicate in traversal order.

        Each marker is visited once, also on the circular variant. The list
        must not be mutated while the iterator is being consumed; materialize
        it with ``list()`` first when editing.
        """
        marker = self._head
        for _ in range(len(self._members)):
            if predicate(marker):
                yield marker
            marker = marker.succ


class LinearMarkerList(BaseMarkerList):
    """Marker sequence for open paths."""

    is_circular = False

    def _link_ends(self) -> None:
        if self._head is not None:
            self._head.pred = None
            self._tail.succ = None


class CircularMarkerList(BaseMarkerList):
    """Marker sequence for closed rings; the tail links back to the head."""

    is_circular = True

    def _link_ends(self) -> None:
        if self._head is not None:
            self._head.pred = self._tail
            self._tail.succ = self._head


def create_marker_list(kind: GeometryKind) -> BaseMarkerList:
    """Create the list variant matching a geometry kind."""
    if GeometryKind(kind) is GeometryKind.CLOSED_RING:
        return CircularMarkerList()
    return LinearMarkerList()
