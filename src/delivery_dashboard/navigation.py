"""URL fragment holder with change notification (the dashboard's location bar)."""

from __future__ import annotations

from collections.abc import Callable


class Location:
    """Current URL fragment of the dashboard.

    Assigning a different ``hash`` notifies every listener synchronously;
    assigning the current value does nothing.
    """

    def __init__(self, hash: str = "") -> None:  # noqa: A002
        self._hash = _normalize(hash)
        self._listeners: list[Callable[[], None]] = []

    @property
    def hash(self) -> str:
        return self._hash

    @hash.setter
    def hash(self, value: str) -> None:
        value = _normalize(value)
        if value == self._hash:
            return
        self._hash = value
        # Copy: listeners may deregister while being notified
        for listener in list(self._listeners):
            listener()

    def add_hash_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_hash_listener(self, listener: Callable[[], None]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


def _normalize(value: str) -> str:
    if value in ("", "#"):
        return ""
    return value if value.startswith("#") else f"#{value}"
