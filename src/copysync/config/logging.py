"""Logging setup shared by entry points."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "COPYSYNC_LOG_LEVEL"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the
    level defaults to ``COPYSYNC_LOG_LEVEL`` or INFO, with a terse format
    suitable for CLI output. Pass ``force=True`` to reconfigure during tests.
    """

    if level is None:
        level_name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper()
        resolved = logging.getLevelName(level_name)
        level = resolved if isinstance(resolved, int) else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
