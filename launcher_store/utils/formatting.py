"""
Helper functions for formatting data into human-readable strings.
"""

from datetime import datetime

_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_size(bytes_size: int) -> str:
    """Formats a byte count for display, e.g. '512 B' or '145.3 MB'."""
    if bytes_size < 1024:
        return f"{max(bytes_size, 0)} B"
    size = float(bytes_size)
    for unit in _SIZE_UNITS:
        size /= 1024
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f"{size:.1f} {unit}"


def format_release_time(release_time: datetime | None) -> str:
    """Formats a manifest release timestamp, or a dash when it is unknown."""
    if release_time is None:
        return "-"
    return release_time.strftime("%Y-%m-%d %H:%M")
