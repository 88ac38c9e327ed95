"""Display helpers shared by the dashboard builder and any template layer.

All functions are pure. Every variation (irregular plural forms, units) is
passed in explicitly.
"""
from __future__ import annotations

BYTE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def pluralize(count: int, singular: str = "", plural: str = "s") -> str:
    """Return the suffix matching ``count``.

    ``pluralize(1, "y", "ies") == "y"``; ``0`` and anything above ``1`` take
    the plural form.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return singular if count == 1 else plural


def filesizeformat(num_bytes: int, base: int = 1024) -> str:
    """Humanize a byte count using binary units.

    Below ``base`` the raw integer is shown (``"512 B"``). Otherwise the value
    is expressed in the largest unit with a magnitude of at least one, rounded
    to one decimal place with a trailing ``.0`` dropped: ``1024 -> "1 KB"``,
    ``1536 -> "1.5 KB"``.
    """
    if num_bytes < 0:
        raise ValueError(f"byte count must be non-negative, got {num_bytes}")
    if num_bytes < base:
        return f"{int(num_bytes)} {BYTE_UNITS[0]}"

    value = float(num_bytes)
    idx = 0
    while value >= base and idx < len(BYTE_UNITS) - 1:
        value /= base
        idx += 1

    rounded = round(value, 1)
    if rounded >= base and idx < len(BYTE_UNITS) - 1:
        rounded = round(rounded / base, 1)
        idx += 1

    text = f"{rounded:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {BYTE_UNITS[idx]}"


def format_duration(seconds: float) -> str:
    """``93784 -> "1d 2h 3m 4s"``; leading zero components are omitted."""
    if seconds < 0:
        raise ValueError(f"duration must be non-negative, got {seconds}")
    remaining = int(seconds)
    days, remaining = divmod(remaining, 86400)
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)

    parts: list[str] = []
    for value, unit in ((days, "d"), (hours, "h"), (minutes, "m")):
        if value or parts:
            parts.append(f"{value}{unit}")
    parts.append(f"{secs}s")
    return " ".join(parts)
