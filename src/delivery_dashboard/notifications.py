"""One-shot notification permission request and best-effort delivery."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from delivery_dashboard.settings import AppSettings, save_settings

logger = logging.getLogger(__name__)

PERMISSION_DEFAULT = "default"
PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"

_TERMINAL = (PERMISSION_GRANTED, PERMISSION_DENIED)


class PermissionHost(Protocol):
    permission: str

    def request_permission(self, on_result: Callable[[str], None]) -> None: ...


class NotificationGate:
    """Ask for notification permission at most once.

    The permission state lives in the host; the gate only checks it before
    asking and never prompts a user who already answered.
    """

    def __init__(self, host: PermissionHost | None) -> None:
        self._host = host
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def ensure_requested(self) -> None:
        host = self._host
        if host is None or self._pending:
            return
        try:
            if host.permission in _TERMINAL:
                return
            self._pending = True
            host.request_permission(self._on_result)
        except Exception as e:
            self._pending = False
            logger.debug("Notification permission unavailable: %s", e)

    def _on_result(self, permission: str) -> None:
        self._pending = False
        logger.debug("Notification permission is now %s", permission)


class SettingsPermissionHost:
    """Permission state persisted in the application settings file.

    *ask* is called to prompt the user and returns True to allow
    notifications.
    """

    def __init__(self, settings: AppSettings, ask: Callable[[], bool]) -> None:
        self._settings = settings
        self._ask = ask

    @property
    def permission(self) -> str:
        return self._settings.notification_permission

    def request_permission(self, on_result: Callable[[str], None]) -> None:
        granted = self._ask()
        self._settings.notification_permission = (
            PERMISSION_GRANTED if granted else PERMISSION_DENIED
        )
        try:
            save_settings(self._settings)
        except OSError as e:
            logger.warning("Cannot save notification permission: %s", e)
        on_result(self._settings.notification_permission)


class Notifier:
    """Deliver notifications through *show* when permission is granted."""

    def __init__(self, host: PermissionHost | None, show: Callable[[str, str], None]) -> None:
        self._host = host
        self._show = show

    def __call__(self, title: str, body: str) -> None:
        if self._host is None or self._host.permission != PERMISSION_GRANTED:
            return
        try:
            self._show(title, body)
        except Exception as e:
            logger.debug("Notification not delivered: %s", e)
