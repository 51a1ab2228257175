"""Dashboard state container and the intents that change it.

The store is the single source of truth the views render from. Fetches run
through *run_in_background*; their results are applied through *post*. A GUI
must pass a *post* that hands the callable to its main thread (as
``gui.DashboardWindow`` does) so that state is only mutated there. The
default *post* runs the callable on the fetching thread, which is only safe
without a GUI or with a synchronous *run_in_background*.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

from delivery_dashboard.navigation import Location
from delivery_dashboard.state import (
    CheckInfo,
    CheckResult,
    OngoingVersions,
    ReleaseInfo,
    State,
)
from delivery_dashboard.url_codec import DEFAULT_PRODUCT, DEFAULT_SERVICE, local_url_from_version

logger = logging.getLogger(__name__)


class Backend(Protocol):
    def ongoing_versions(self) -> OngoingVersions: ...

    def release_info(self, version: str) -> ReleaseInfo: ...

    def check_result(self, check: CheckInfo) -> CheckResult: ...


def start_daemon_thread(fn: Callable[[], None]) -> None:
    thread = threading.Thread(target=fn, daemon=True)
    thread.start()


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class Store:
    def __init__(
        self,
        backend: Backend,
        location: Location,
        *,
        run_in_background: Callable[[Callable[[], None]], None] = start_daemon_thread,
        post: Callable[[Callable[[], None]], None] = _call_now,
        notify: Callable[[str, str], None] | None = None,
        service: str = DEFAULT_SERVICE,
        product: str = DEFAULT_PRODUCT,
    ) -> None:
        self._backend = backend
        self._location = location
        self._run_in_background = run_in_background
        self._post = post
        self._notify = notify
        self._service = service
        self._product = product
        self._state = State()
        self._listeners: list[Callable[[State], None]] = []
        self._in_flight: set[str] = set()  # versions with a status fetch running

    @property
    def state(self) -> State:
        return self._state

    def subscribe(self, listener: Callable[[State], None]) -> Callable[[], None]:
        """Call *listener* with the new state after every change.

        Returns a function that removes the subscription.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _update(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    # ── Intents ──

    def update_version_input(self, text: str) -> None:
        self._update(version_input=text)

    def set_version(self, version: str) -> None:
        if version == self._state.version:
            return
        self._update(
            version=version,
            version_input=version,
            release_info=None,
            check_results={},
        )

    def submit_version(self) -> None:
        version = self._state.version_input.strip()
        self.set_version(version)
        self.request_status(version)

    def update_url(self) -> None:
        version = self._state.version
        if version:
            self._location.hash = local_url_from_version(version, self._service, self._product)
        else:
            self._location.hash = ""

    def request_ongoing_versions(self) -> None:
        def _fetch() -> None:
            try:
                versions = self._backend.ongoing_versions()
            except Exception as e:
                logger.warning("Cannot fetch ongoing versions: %s", e)
                return
            self._post(lambda: self._update(latest_channel_versions=versions))

        self._run_in_background(_fetch)

    def request_status(self, version: str | None = None) -> None:
        """Fetch release info and every check result for *version*.

        Defaults to the selected version; does nothing when no version is
        selected or a fetch for the same version is still running.
        """
        version = version or self._state.version
        if not version:
            return
        if version in self._in_flight:
            logger.debug("Status fetch for %s already running", version)
            return
        self._in_flight.add(version)

        def _fetch() -> None:
            try:
                try:
                    info = self._backend.release_info(version)
                except Exception as e:
                    logger.warning("Cannot fetch release info for %s: %s", version, e)
                    return
                self._post(lambda: self._apply_release_info(version, info))

                for check in info.checks:
                    try:
                        result = self._backend.check_result(check)
                    except Exception as e:
                        logger.warning("Check %r failed for %s: %s", check.title, version, e)
                        result = CheckResult(status="error", message=str(e), link="")
                    self._post(
                        lambda t=check.title, r=result: self._apply_check_result(version, t, r)
                    )
            finally:
                self._post(lambda: self._in_flight.discard(version))

        self._run_in_background(_fetch)

    # ── Results (main thread) ──

    def _apply_release_info(self, version: str, info: ReleaseInfo) -> None:
        if version != self._state.version:
            logger.debug("Discarding stale release info for %s", version)
            return
        previous = self._state.check_results
        kept = {c.title: previous[c.title] for c in info.checks if c.title in previous}
        self._update(release_info=info, check_results=kept)

    def _apply_check_result(self, version: str, title: str, result: CheckResult) -> None:
        info = self._state.release_info
        if version != self._state.version or info is None:
            logger.debug("Discarding stale %r result for %s", title, version)
            return

        previous = self._state.check_results.get(title)
        merged = dict(self._state.check_results)
        merged[title] = result
        ordered = {c.title: merged[c.title] for c in info.checks if c.title in merged}
        self._update(check_results=ordered)

        if previous is not None and previous.status != result.status and self._notify:
            self._notify(
                f"{self._product.capitalize()} {version}",
                f"{title}: {previous.status} → {result.status}",
            )
