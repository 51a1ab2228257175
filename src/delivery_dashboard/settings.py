"""Application settings management — persisted to %APPDATA%/delivery_dashboard/settings.json."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field


@dataclass
class PollbotSettings:
    """Where release status is fetched from."""

    server_url: str = "https://pollbot.services.mozilla.com/v1"
    service: str = "pollbot"
    product: str = "firefox"
    timeout: float = 10.0


@dataclass
class AppSettings:
    """Top-level application settings."""

    pollbot: PollbotSettings = field(default_factory=PollbotSettings)
    refresh_interval_ms: int = 60000
    notification_permission: str = "default"  # "default" | "granted" | "denied"


def _settings_dir() -> str:
    """Return the settings directory path (%APPDATA%/delivery_dashboard/)."""
    appdata = os.environ.get("APPDATA", "")
    if not appdata:
        appdata = os.path.expanduser("~")
    return os.path.join(appdata, "delivery_dashboard")


def _settings_path() -> str:
    """Return the full path to settings.json."""
    return os.path.join(_settings_dir(), "settings.json")


def load_settings() -> AppSettings:
    """Load settings from disk. Returns defaults if file missing or corrupt."""
    path = _settings_path()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError, ValueError):
        return AppSettings()

    if not isinstance(data, dict):
        return AppSettings()

    defaults = PollbotSettings()
    pb_data = data.get("pollbot", {})
    if not isinstance(pb_data, dict):
        pb_data = {}

    try:
        pollbot = PollbotSettings(
            server_url=str(pb_data.get("server_url", defaults.server_url)),
            service=str(pb_data.get("service", defaults.service)),
            product=str(pb_data.get("product", defaults.product)),
            timeout=float(pb_data.get("timeout", defaults.timeout)),
        )
        refresh_interval_ms = int(data.get("refresh_interval_ms", AppSettings.refresh_interval_ms))
    except (TypeError, ValueError):
        return AppSettings()

    if refresh_interval_ms <= 0:
        refresh_interval_ms = AppSettings.refresh_interval_ms

    permission = str(data.get("notification_permission", "default"))
    if permission not in ("default", "granted", "denied"):
        permission = "default"
    return AppSettings(
        pollbot=pollbot,
        refresh_interval_ms=refresh_interval_ms,
        notification_permission=permission,
    )


def save_settings(settings: AppSettings) -> None:
    """Save settings to disk. Creates the directory if needed."""
    directory = _settings_dir()
    os.makedirs(directory, exist_ok=True)

    path = _settings_path()
    data = asdict(settings)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
