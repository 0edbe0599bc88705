"""Logging setup for scripts using restform."""

import logging

from restform.config import get_settings


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure root logging for a script or service entry point.

    The library itself only emits records through module loggers; call this
    from an application entry point, never from library code.

    Args:
        level: Logging level. If None, uses the log_level setting.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
