"""Host and process telemetry for the admin dashboard."""
from __future__ import annotations

import logging
import os
import platform
import time
from collections.abc import Callable
from typing import TypeVar

import psutil

from gitarena.domain.entities import SystemSnapshot
from gitarena.domain.results import FieldUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read(field: str, reader: Callable[[], T]) -> T | FieldUnavailable:
    try:
        value = reader()
    except Exception as exc:
        logger.debug("Telemetry field %s unavailable: %s", field, exc)
        return FieldUnavailable(field=field, reason=str(exc) or exc.__class__.__name__)
    if value is None or value == "":
        return FieldUnavailable(field=field, reason="empty value")
    return value


class SystemTelemetryCollector:
    """Best-effort snapshot of OS, architecture, uptime, memory and PID.

    Every field is read on its own; a field the host refuses to report is
    replaced with ``FieldUnavailable`` and the rest of the snapshot survives.
    """

    def __init__(self, process: psutil.Process | None = None) -> None:
        self._process = process

    def _process_uptime(self) -> float:
        process = self._process or psutil.Process(os.getpid())
        return max(0.0, time.time() - process.create_time())

    def snapshot(self) -> SystemSnapshot:
        memory = _read("memory", psutil.virtual_memory)
        if isinstance(memory, FieldUnavailable):
            available: int | FieldUnavailable = FieldUnavailable("memory_available_bytes", memory.reason)
            total: int | FieldUnavailable = FieldUnavailable("memory_total_bytes", memory.reason)
        else:
            total = _read("memory_total_bytes", lambda: int(memory.total))
            available = _read("memory_available_bytes", lambda: int(memory.available))
            if isinstance(total, int) and isinstance(available, int) and available > total:
                available = total

        return SystemSnapshot(
            os_name=_read("os_name", platform.system),
            os_version=_read("os_version", platform.release),
            architecture=_read("architecture", platform.machine),
            uptime_seconds=_read("uptime_seconds", self._process_uptime),
            memory_available_bytes=available,
            memory_total_bytes=total,
            process_id=_read("process_id", os.getpid),
        )
