"""Human-readable formatting helpers."""

from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB")
_BASE = 1024


def format_file_size(size: float) -> str:
    """Format a byte count using base-1024 units.

    Sizes below 1 KB are printed without decimals (``"500 B"``); larger
    sizes use two decimals (``"1.50 KB"``).  ``TB`` is the largest unit.

    Raises
    ------
    ValueError
        If *size* is negative.
    """
    if size < 0:
        raise ValueError(f"size must be >= 0, got {size}")
    if size == 0:
        return "0 B"

    value = float(size)
    unit_index = 0
    while value >= _BASE and unit_index < len(_UNITS) - 1:
        value /= _BASE
        unit_index += 1

    if unit_index == 0:
        return f"{value:g} {_UNITS[0]}"
    return f"{value:.2f} {_UNITS[unit_index]}"
