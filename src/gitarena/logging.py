"""Process-wide logging setup.

Every record carries the run id of the current process so that log lines
from concurrent workers can be told apart.
"""
from __future__ import annotations

import logging
import uuid

from gitarena.config import settings

_RUN_ID = uuid.uuid4().hex[:8]


def get_run_id() -> str:
    return _RUN_ID


class _RunIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID
        return True


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stream handler to the ``gitarena`` logger (idempotent)."""
    root = logging.getLogger("gitarena")
    root.setLevel(level or settings.LOG_LEVEL)
    if not any(getattr(h, "_gitarena", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(run_id)s] %(levelname)s %(name)s: %(message)s")
        )
        handler.addFilter(_RunIdFilter())
        handler._gitarena = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root


logger = configure_logging()
