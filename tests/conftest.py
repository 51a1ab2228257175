"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest

from delivery_dashboard.state import CheckInfo, CheckResult, OngoingVersions, ReleaseInfo

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeTimerHost:
    """One-shot timers driven by a simulated clock (milliseconds)."""

    def __init__(self) -> None:
        self.now = 0
        self._next_id = 0
        self.timers: dict[int, tuple[int, Callable[[], None]]] = {}
        self.scheduled: list[int] = []  # delays passed to after()

    def after(self, ms: int, callback: Callable[[], None]) -> int:
        self._next_id += 1
        self.timers[self._next_id] = (self.now + ms, callback)
        self.scheduled.append(ms)
        return self._next_id

    def after_cancel(self, timer_id: object) -> None:
        self.timers.pop(timer_id, None)  # type: ignore[arg-type]

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [(t, i) for i, (t, _) in self.timers.items() if t <= target]
            if not due:
                break
            when, timer_id = min(due)
            _, callback = self.timers.pop(timer_id)
            self.now = when
            callback()
        self.now = target


class RecordingStore:
    """Records the intents it receives, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def request_ongoing_versions(self) -> None:
        self.calls.append(("request_ongoing_versions",))

    def request_status(self, version: str | None = None) -> None:
        self.calls.append(("request_status", version))

    def submit_version(self) -> None:
        self.calls.append(("submit_version",))

    def set_version(self, version: str) -> None:
        self.calls.append(("set_version", version))

    def update_version_input(self, text: str) -> None:
        self.calls.append(("update_version_input", text))

    def update_url(self) -> None:
        self.calls.append(("update_url",))


class FakeBackend:
    """In-memory backend keyed by version."""

    def __init__(self) -> None:
        self.versions = OngoingVersions(
            nightly="59.0a1", beta="58.0b6", release="57.0", esr="52.5.0esr"
        )
        self.releases: dict[str, ReleaseInfo] = {}
        self.results: dict[str, CheckResult | Exception] = {}  # check url -> result
        self.calls: list[str] = []

    def add_release(self, version: str, channel: str, checks: dict[str, CheckResult]) -> None:
        infos = []
        for title, result in checks.items():
            url = f"https://pollbot.test/v1/firefox/{version}/{title}"
            infos.append(CheckInfo(title=title, url=url))
            self.results[url] = result
        self.releases[version] = ReleaseInfo(channel=channel, checks=infos)

    def ongoing_versions(self) -> OngoingVersions:
        self.calls.append("ongoing_versions")
        return self.versions

    def release_info(self, version: str) -> ReleaseInfo:
        self.calls.append(f"release_info:{version}")
        try:
            return self.releases[version]
        except KeyError:
            raise RuntimeError(f"unknown version {version}") from None

    def check_result(self, check: CheckInfo) -> CheckResult:
        self.calls.append(f"check:{check.title}")
        result = self.results[check.url]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture(scope="session")
def qapp():
    """Shared QApplication instance for tests that need Qt."""
    from PyQt6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture
def timer_host() -> FakeTimerHost:
    return FakeTimerHost()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
