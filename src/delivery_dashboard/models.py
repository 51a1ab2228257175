"""Data models for the PyQt6 GUI — check results table model."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import QAbstractTableModel, QModelIndex, Qt

from delivery_dashboard.labels import STYLE_COLORS, status_label
from delivery_dashboard.state import CheckResults


@dataclass
class CheckRow:
    """One row in the check table."""

    title: str = ""
    text: str = ""  # "exists" / "Error: timeout" ...
    style_class: str = ""  # "success" | "danger" | "info" | "warning"
    message: str = ""
    link: str = ""


def build_check_rows(check_results: CheckResults) -> list[CheckRow]:
    """Convert check results to table rows, keeping their order.

    Raises :class:`~delivery_dashboard.labels.UnhandledStatusError` for a
    status outside the known set.
    """
    rows: list[CheckRow] = []
    for title, result in check_results.items():
        label = status_label(result.status, result.message)
        rows.append(
            CheckRow(
                title=title,
                text=label.text,
                style_class=label.style_class,
                message=result.message,
                link=result.link,
            )
        )
    return rows


COLUMNS = ["Check", "Status"]
_COL_COUNT = len(COLUMNS)

COL_TITLE = 0
COL_STATUS = 1


class CheckResultsTableModel(QAbstractTableModel):
    """Model backing the check QTableView."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows: list[CheckRow] = []

    # ── Public API ──

    def set_rows(self, rows: list[CheckRow]) -> None:
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def get_row(self, row: int) -> CheckRow | None:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    def all_rows(self) -> list[CheckRow]:
        return self._rows

    # ── QAbstractTableModel interface ──

    def rowCount(self, parent=None):  # noqa: N802
        return len(self._rows)

    def columnCount(self, parent=None):  # noqa: N802
        return _COL_COUNT

    def data(self, index: QModelIndex, role=Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None

        row = self._rows[index.row()]
        col = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if col == COL_TITLE:
                return row.title
            if col == COL_STATUS:
                return row.text
            return None

        if role == Qt.ItemDataRole.ToolTipRole:
            return row.message or None

        if role == Qt.ItemDataRole.BackgroundRole and col == COL_STATUS:
            color = STYLE_COLORS.get(row.style_class)
            if color:
                from PyQt6.QtGui import QColor

                return QColor(color)
            return None

        if role == Qt.ItemDataRole.ForegroundRole and col == COL_STATUS:
            if row.style_class:
                from PyQt6.QtGui import QColor

                return QColor("#ffffff")
            return None

        if role == Qt.ItemDataRole.TextAlignmentRole:
            if col == COL_STATUS:
                return Qt.AlignmentFlag.AlignCenter
            return Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        return None

    def headerData(self, section, orientation, role=Qt.ItemDataRole.DisplayRole):  # noqa: N802
        if (
            orientation == Qt.Orientation.Horizontal
            and role == Qt.ItemDataRole.DisplayRole
            and 0 <= section < _COL_COUNT
        ):
            return COLUMNS[section]
        return None

    def flags(self, index: QModelIndex):
        base = super().flags(index)
        return base | Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
