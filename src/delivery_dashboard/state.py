"""Dashboard state shape and the records it holds."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one named check for a version."""

    status: str  # "exists" | "missing" | "incomplete" | "error"
    message: str = ""
    link: str = ""


@dataclass(frozen=True)
class CheckInfo:
    """A check advertised by the backend for a version."""

    title: str
    url: str


@dataclass(frozen=True)
class OngoingVersions:
    """Latest known version on each channel."""

    nightly: str
    beta: str
    release: str
    esr: str


@dataclass(frozen=True)
class ReleaseInfo:
    channel: str
    checks: list[CheckInfo] = field(default_factory=list)


# check title -> result, in the order the backend lists the checks
CheckResults = dict[str, CheckResult]


@dataclass
class State:
    version_input: str = ""
    version: str = ""
    latest_channel_versions: OngoingVersions | None = None
    release_info: ReleaseInfo | None = None
    check_results: CheckResults = field(default_factory=dict)
