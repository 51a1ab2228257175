"""Display labels for check statuses."""

from __future__ import annotations

from dataclasses import dataclass

STATUS_STYLES = {
    "error": "warning",
    "exists": "success",
    "incomplete": "info",
    "missing": "danger",
}

# Colours used by the views for each style class
STYLE_COLORS = {
    "success": "#5cb85c",
    "danger": "#d9534f",
    "info": "#5bc0de",
    "warning": "#f0ad4e",
}


class UnhandledStatusError(ValueError):
    """A check result carries a status outside the known set."""

    def __init__(self, status: str) -> None:
        super().__init__(f"Unhandled check status: {status!r}")
        self.status = status


@dataclass(frozen=True)
class StatusLabel:
    text: str
    style_class: str


def status_label(status: str, message: str = "") -> StatusLabel:
    """Map a raw check status to its label text and style class.

    Raises :class:`UnhandledStatusError` for unknown statuses instead of
    falling back to a default label.
    """
    try:
        style_class = STATUS_STYLES[status]
    except KeyError:
        raise UnhandledStatusError(status) from None
    text = f"Error: {message}" if status == "error" else status
    return StatusLabel(text=text, style_class=style_class)
