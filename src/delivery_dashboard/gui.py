"""PyQt6 window for the delivery dashboard."""

from __future__ import annotations

import itertools
import logging
import sys
from collections.abc import Callable

from PyQt6.QtCore import QObject, Qt, QTimer, QUrl, pyqtSignal
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import (
    QApplication,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStyle,
    QSystemTrayIcon,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from delivery_dashboard import __version__
from delivery_dashboard.controller import VersionSyncController
from delivery_dashboard.labels import UnhandledStatusError
from delivery_dashboard.models import CheckResultsTableModel, build_check_rows
from delivery_dashboard.navigation import Location
from delivery_dashboard.notifications import NotificationGate, Notifier, SettingsPermissionHost
from delivery_dashboard.polling import PollingScheduler
from delivery_dashboard.pollbot import PollbotClient
from delivery_dashboard.settings import AppSettings, load_settings
from delivery_dashboard.state import OngoingVersions, State
from delivery_dashboard.store import Backend, Store, start_daemon_thread
from delivery_dashboard.url_codec import DEFAULT_PRODUCT, DEFAULT_SERVICE, local_url_from_version

logger = logging.getLogger(__name__)

_VERSION_PROMPT = (
    "Learn more about a specific version. <b>Select or enter your version number.</b>"
)


def release_menu_items(
    versions: OngoingVersions | None,
    service: str = DEFAULT_SERVICE,
    product: str = DEFAULT_PRODUCT,
) -> list[tuple[str, str]]:
    """Return ``(text, fragment)`` pairs for the channel sidebar.

    Empty while the ongoing versions are not known yet.
    """
    if versions is None:
        return []
    channels = [
        ("Nightly", versions.nightly),
        ("Beta", versions.beta),
        ("Release", versions.release),
        ("ESR", versions.esr),
    ]
    return [
        (f"{title}: {version}", local_url_from_version(version, service, product))
        for title, version in channels
    ]


def dashboard_heading(state: State) -> str:
    if state.version == "":
        return _VERSION_PROMPT
    channel = state.release_info.channel if state.release_info else ""
    return f"Channel: {channel}"


class QtTimerHost(QObject):
    """``after``/``after_cancel`` one-shot timers on the Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._ids = itertools.count(1)
        self._timers: dict[int, QTimer] = {}

    def after(self, ms: int, callback: Callable[[], None]) -> int:
        timer_id = next(self._ids)
        timer = QTimer(self)
        timer.setSingleShot(True)

        def _fire() -> None:
            self._timers.pop(timer_id, None)
            timer.deleteLater()
            callback()

        timer.timeout.connect(_fire)
        self._timers[timer_id] = timer
        timer.start(ms)
        return timer_id

    def after_cancel(self, timer_id: object) -> None:
        timer = self._timers.pop(timer_id, None)  # type: ignore[arg-type]
        if timer is not None:
            timer.stop()
            timer.deleteLater()


class _MainThreadPoster(QObject):
    """Run callables posted from worker threads on the GUI thread."""

    posted = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.posted.connect(self._run)

    def _run(self, fn: Callable[[], None]) -> None:
        fn()


class DashboardWindow(QMainWindow):
    def __init__(
        self,
        settings: AppSettings,
        location: Location | None = None,
        backend: Backend | None = None,
        refresh_interval_ms: int | None = None,
        run_in_background: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"Delivery Dashboard v{__version__}")
        self.resize(900, 600)

        self._settings = settings
        self._service = settings.pollbot.service
        self._product = settings.pollbot.product
        self.location = location if location is not None else Location()

        self._tray = QSystemTrayIcon(
            self.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation), self
        )
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray.show()

        self._timer_host = QtTimerHost(self)
        self._poster = _MainThreadPoster(self)
        permission_host = SettingsPermissionHost(settings, self._ask_notification_permission)

        self.store = Store(
            backend if backend is not None else PollbotClient.from_settings(settings.pollbot),
            self.location,
            post=self._poster.posted.emit,
            run_in_background=run_in_background or start_daemon_thread,
            notify=Notifier(permission_host, self._show_notification),
            service=self._service,
            product=self._product,
        )
        self.controller = VersionSyncController(
            self.store,
            self.location,
            PollingScheduler(self._timer_host),
            NotificationGate(permission_host),
            refresh_interval_ms or settings.refresh_interval_ms,
        )

        self._create_widgets()
        self._unsubscribe = self.store.subscribe(self._render)
        self._render(self.store.state)

    def _create_widgets(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        layout = QHBoxLayout(central)

        # ── Left: search + current release ──
        left = QVBoxLayout()
        layout.addLayout(left, stretch=3)

        search_row = QHBoxLayout()
        self._search = QLineEdit()
        self._search.setPlaceholderText(f'{self._product.capitalize()} version, eg. "57.0"')
        self._search.textEdited.connect(self.controller.update_version_input)
        self._search.returnPressed.connect(self.controller.submit_version)
        search_row.addWidget(self._search)
        self._clear_btn = QPushButton("✕")
        self._clear_btn.setFixedWidth(30)
        self._clear_btn.clicked.connect(self.controller.dismiss_version)
        search_row.addWidget(self._clear_btn)
        left.addLayout(search_row)

        self._heading = QLabel()
        self._heading.setTextFormat(Qt.TextFormat.RichText)
        self._heading.setWordWrap(True)
        left.addWidget(self._heading)

        self._error_label = QLabel()
        self._error_label.setStyleSheet("color: #8B0000;")
        self._error_label.setWordWrap(True)
        self._error_label.hide()
        left.addWidget(self._error_label)

        self._check_model = CheckResultsTableModel(self)
        self._table = QTableView()
        self._table.setModel(self._check_model)
        self._table.verticalHeader().hide()
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self._table.doubleClicked.connect(self._open_check_link)
        left.addWidget(self._table, stretch=1)

        # ── Right: channel versions ──
        releases = QGroupBox(f"{self._product.capitalize()} Releases")
        releases_layout = QVBoxLayout(releases)
        self._releases = QListWidget()
        self._releases.itemActivated.connect(self._on_release_activated)
        self._releases.itemClicked.connect(self._on_release_activated)
        releases_layout.addWidget(self._releases)
        layout.addWidget(releases, stretch=1)

    # ── Rendering ──

    def _render(self, state: State) -> None:
        if self._search.text() != state.version_input:
            self._search.setText(state.version_input)

        self._render_releases(state.latest_channel_versions)
        self._heading.setText(dashboard_heading(state))

        if state.version == "":
            self._error_label.hide()
            self._table.hide()
            self._check_model.set_rows([])
            return

        try:
            rows = build_check_rows(state.check_results)
        except UnhandledStatusError as e:
            logger.exception("Cannot render check results for %s", state.version)
            self._check_model.set_rows([])
            self._table.hide()
            self._error_label.setText(f"Cannot display check results: {e}")
            self._error_label.show()
            return

        self._error_label.hide()
        self._check_model.set_rows(rows)
        self._table.show()

    def _render_releases(self, versions: OngoingVersions | None) -> None:
        items = release_menu_items(versions, self._service, self._product)
        self._releases.clear()
        if not items:
            self._releases.addItem("Loading…")
            return
        for text, fragment in items:
            item = QListWidgetItem(text)
            item.setData(Qt.ItemDataRole.UserRole, fragment)
            self._releases.addItem(item)

    # ── Event handlers ──

    def _on_release_activated(self, item: QListWidgetItem) -> None:
        fragment = item.data(Qt.ItemDataRole.UserRole)
        if fragment:
            self.location.hash = fragment

    def _open_check_link(self, index) -> None:
        row = self._check_model.get_row(index.row())
        if row is not None and row.link:
            QDesktopServices.openUrl(QUrl(row.link))

    def _ask_notification_permission(self) -> bool:
        answer = QMessageBox.question(
            self,
            "Notifications",
            "Show a desktop notification when a check changes status?",
        )
        return answer == QMessageBox.StandardButton.Yes

    def _show_notification(self, title: str, body: str) -> None:
        if self._tray.isVisible():
            self._tray.showMessage(title, body)
        else:
            self.statusBar().showMessage(f"{title}: {body}", 10000)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.controller.unmount()
        self._unsubscribe()
        self._tray.hide()
        super().closeEvent(event)


def run_gui(fragment: str = "", refresh_interval_ms: int | None = None) -> int:
    """Open the dashboard window and run the Qt event loop."""
    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = DashboardWindow(
        load_settings(),
        Location(fragment),
        refresh_interval_ms=refresh_interval_ms,
    )
    window.show()
    window.controller.mount()
    return app.exec()
