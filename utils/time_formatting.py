"""Reusable helpers for formatting entry timestamps."""

from __future__ import annotations

import datetime as dt
from typing import Union

from utils import common

logger = common.get_logger("time_formatting")

Number = Union[int, float]
TimeValue = Union[dt.datetime, Number]


def format_clock_time(value: TimeValue) -> str:
    """Return the ``HH:MM:SS`` wall-clock time for a datetime or epoch seconds."""
    if isinstance(value, dt.datetime):
        return value.strftime("%H:%M:%S")

    try:
        moment = dt.datetime.fromtimestamp(float(value))
    except (TypeError, ValueError, OverflowError, OSError):
        logger.debug("Invalid timestamp for clock formatting: %r", value)
        return "00:00:00"
    return moment.strftime("%H:%M:%S")


__all__ = ["format_clock_time"]
