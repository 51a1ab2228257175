"""Keeps the selected version in sync with the URL fragment and refreshes its status."""

from __future__ import annotations

import logging
from typing import Protocol

from delivery_dashboard.navigation import Location
from delivery_dashboard.notifications import NotificationGate
from delivery_dashboard.polling import PollingHandle, PollingScheduler
from delivery_dashboard.url_codec import parse_url

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_MS = 60000


class Dispatcher(Protocol):
    """The store intents the controller issues."""

    def request_ongoing_versions(self) -> None: ...

    def request_status(self, version: str | None = None) -> None: ...

    def submit_version(self) -> None: ...

    def set_version(self, version: str) -> None: ...

    def update_version_input(self, text: str) -> None: ...

    def update_url(self) -> None: ...


class VersionSyncController:
    """Mount/unmount lifecycle around the fragment listener and the refresh timer.

    Owns at most one polling handle and one fragment listener; both are
    released together by :meth:`unmount`, which is safe to call at any time.
    """

    def __init__(
        self,
        store: Dispatcher,
        location: Location,
        scheduler: PollingScheduler,
        gate: NotificationGate,
        refresh_interval_ms: int = REFRESH_INTERVAL_MS,
    ) -> None:
        self._store = store
        self._location = location
        self._scheduler = scheduler
        self._gate = gate
        self._refresh_interval_ms = refresh_interval_ms
        self._polling: PollingHandle | None = None
        self._listening = False

    @property
    def mounted(self) -> bool:
        return self._polling is not None or self._listening

    def mount(self) -> None:
        if self.mounted:
            return
        try:
            self._store.request_ongoing_versions()
            self._polling = self._scheduler.start(self._refresh_interval_ms, self._refresh)
            self._gate.ensure_requested()
            self._location.add_hash_listener(self.sync_from_url)
            self._listening = True
            # Honor a version already present in the fragment at load time
            self.sync_from_url()
        except Exception:
            self.unmount()
            raise

    def unmount(self) -> None:
        if self._polling is not None:
            self._scheduler.stop(self._polling)
            self._polling = None
        if self._listening:
            self._location.remove_hash_listener(self.sync_from_url)
            self._listening = False

    def __enter__(self) -> VersionSyncController:
        self.mount()
        return self

    def __exit__(self, *exc: object) -> None:
        self.unmount()

    def _refresh(self) -> None:
        self._store.request_status()

    def sync_from_url(self) -> None:
        locator = parse_url(self._location.hash)
        if locator is None:
            # A fragment without a version leaves the selection alone
            return
        logger.debug("Version %s selected from fragment", locator.version)
        self._store.set_version(locator.version)
        self._store.request_status(locator.version)

    # ── User actions ──

    def update_version_input(self, text: str) -> None:
        self._store.update_version_input(text)

    def submit_version(self) -> None:
        self._store.submit_version()
        self._store.update_url()

    def dismiss_version(self) -> None:
        self._location.hash = ""
        self._store.set_version("")
