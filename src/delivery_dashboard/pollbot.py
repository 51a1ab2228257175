"""Pollbot API client — release info and check results over plain HTTP/JSON."""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request

from delivery_dashboard import __version__
from delivery_dashboard.settings import PollbotSettings
from delivery_dashboard.state import CheckInfo, CheckResult, OngoingVersions, ReleaseInfo


class PollbotError(Exception):
    """The Pollbot server could not be reached or returned unusable data."""


class PollbotClient:
    """Blocking client; the store calls it from background threads."""

    def __init__(
        self,
        server_url: str,
        product: str = "firefox",
        timeout: float = 10.0,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.product = product
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: PollbotSettings) -> PollbotClient:
        return cls(settings.server_url, product=settings.product, timeout=settings.timeout)

    def _get_json(self, url: str) -> dict:
        req = urllib.request.Request(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": f"delivery-dashboard/{__version__}",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except (urllib.error.URLError, OSError) as e:
            raise PollbotError(f"{url}: {e}") from e
        except ValueError as e:
            raise PollbotError(f"{url}: invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise PollbotError(f"{url}: expected a JSON object")
        return data

    def ongoing_versions(self) -> OngoingVersions:
        data = self._get_json(f"{self.server_url}/{self.product}/ongoing-versions")
        try:
            return OngoingVersions(
                nightly=str(data["nightly"]),
                beta=str(data["beta"]),
                release=str(data["release"]),
                esr=str(data["esr"]),
            )
        except KeyError as e:
            raise PollbotError(f"ongoing-versions: missing channel {e}") from e

    def release_info(self, version: str) -> ReleaseInfo:
        quoted = urllib.parse.quote(version, safe="")
        data = self._get_json(f"{self.server_url}/{self.product}/{quoted}")
        raw_checks = data.get("checks", [])
        if not isinstance(raw_checks, list):
            raise PollbotError(f"{version}: expected a list of checks")
        checks = [
            CheckInfo(title=str(c.get("title", "")), url=str(c.get("url", "")))
            for c in raw_checks
            if isinstance(c, dict)
        ]
        return ReleaseInfo(channel=str(data.get("channel", "")), checks=checks)

    def check_result(self, check: CheckInfo) -> CheckResult:
        data = self._get_json(check.url)
        # Status is passed through as-is; unknown values surface in the labeler
        return CheckResult(
            status=str(data.get("status", "")),
            message=str(data.get("message", "")),
            link=str(data.get("link", "")),
        )
