"""Tests for delivery_dashboard.models (CheckRow, build_check_rows, CheckResultsTableModel)."""

from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt

from delivery_dashboard.labels import STYLE_COLORS, UnhandledStatusError
from delivery_dashboard.models import (
    COL_STATUS,
    COL_TITLE,
    COLUMNS,
    CheckResultsTableModel,
    CheckRow,
    build_check_rows,
)
from delivery_dashboard.state import CheckResult

# ── build_check_rows ──


class TestBuildCheckRows:
    def test_basic_conversion(self):
        rows = build_check_rows(
            {
                "archive": CheckResult("exists", "Published", "https://archive.test"),
                "release-notes": CheckResult("error", "timeout", ""),
            }
        )
        assert rows == [
            CheckRow("archive", "exists", "success", "Published", "https://archive.test"),
            CheckRow("release-notes", "Error: timeout", "warning", "timeout", ""),
        ]

    def test_keeps_order(self):
        results = {
            "b": CheckResult("missing"),
            "a": CheckResult("incomplete"),
        }
        assert [r.title for r in build_check_rows(results)] == ["b", "a"]

    def test_empty(self):
        assert build_check_rows({}) == []

    def test_unknown_status_raises(self):
        with pytest.raises(UnhandledStatusError):
            build_check_rows({"archive": CheckResult("bogus")})


# ── CheckResultsTableModel ──


class TestCheckResultsTableModel:
    @pytest.fixture
    def model(self, qapp):
        return CheckResultsTableModel()

    @pytest.fixture
    def sample_rows(self):
        return [
            CheckRow("archive", "exists", "success", "Published", "https://archive.test"),
            CheckRow("release-notes", "missing", "danger", "", ""),
            CheckRow("plain", "", "", "", ""),
        ]

    def test_empty_model(self, model):
        assert model.rowCount() == 0
        assert model.columnCount() == len(COLUMNS)

    def test_set_rows(self, model, sample_rows):
        model.set_rows(sample_rows)
        assert model.rowCount() == 3
        assert model.all_rows()[1].title == "release-notes"

    def test_get_row(self, model, sample_rows):
        model.set_rows(sample_rows)
        assert model.get_row(0).title == "archive"
        assert model.get_row(3) is None
        assert model.get_row(-1) is None

    def test_display_role(self, model, sample_rows):
        model.set_rows(sample_rows)
        assert model.data(model.index(0, COL_TITLE), Qt.ItemDataRole.DisplayRole) == "archive"
        assert model.data(model.index(0, COL_STATUS)) == "exists"

    def test_tooltip_role(self, model, sample_rows):
        model.set_rows(sample_rows)
        assert model.data(model.index(0, COL_STATUS), Qt.ItemDataRole.ToolTipRole) == "Published"
        assert model.data(model.index(1, COL_STATUS), Qt.ItemDataRole.ToolTipRole) is None

    def test_background_role(self, model, sample_rows):
        model.set_rows(sample_rows)
        color = model.data(model.index(1, COL_STATUS), Qt.ItemDataRole.BackgroundRole)
        assert color.name() == STYLE_COLORS["danger"]
        assert model.data(model.index(1, COL_TITLE), Qt.ItemDataRole.BackgroundRole) is None
        assert model.data(model.index(2, COL_STATUS), Qt.ItemDataRole.BackgroundRole) is None

    def test_alignment_role(self, model, sample_rows):
        model.set_rows(sample_rows)
        align = model.data(model.index(0, COL_STATUS), Qt.ItemDataRole.TextAlignmentRole)
        assert align == Qt.AlignmentFlag.AlignCenter

    def test_header_data(self, model):
        assert model.headerData(0, Qt.Orientation.Horizontal) == "Check"
        assert model.headerData(1, Qt.Orientation.Horizontal) == "Status"
        assert model.headerData(5, Qt.Orientation.Horizontal) is None
        assert model.headerData(0, Qt.Orientation.Vertical) is None
