"""
Per-route mutual exclusion for lifecycle transitions.

A route's lock lives only while some caller holds or waits for it, so the
registry stays bounded by the number of routes in flight.
"""
import threading
from contextlib import contextmanager
from typing import Iterator


class _RouteLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0  # holders plus waiters


class RouteLockRegistry:
    """Hands out one lock per route id; different routes never contend."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[int, _RouteLock] = {}

    @contextmanager
    def hold(self, route_id: int) -> Iterator[None]:
        """Hold the route's lock for the duration of the block."""
        with self._guard:
            entry = self._entries.get(route_id)
            if entry is None:
                entry = self._entries[route_id] = _RouteLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[route_id]


# Shared by every RouteService in this process
route_locks = RouteLockRegistry()
