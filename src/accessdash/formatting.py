"""Display helpers for report and asset tables."""

from datetime import datetime

_BYTE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int | float) -> str:
    """Human-readable size with one decimal, capped at GB."""
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {_BYTE_UNITS[unit]}"


def format_date(value: str | None) -> str:
    """Render an ISO timestamp as e.g. ``Mar 5, 2026, 02:07 PM``."""
    if not value:
        return "N/A"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed:%Y, %I:%M %p}"


def format_dimensions(width: int, height: int) -> str:
    if not width and not height:
        return "N/A"
    return f"{width} × {height}"


def split_folders(raw: str | None) -> list[str]:
    """Turn the comma-separated folder field into a list."""
    if not raw:
        return []
    return [folder.strip() for folder in raw.split(",") if folder.strip()]
