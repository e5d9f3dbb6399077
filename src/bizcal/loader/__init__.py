# src/bizcal/loader/__init__.py
"""
bizcal.loader
~~~~~~~~~~~~~

Named calendars from YAML documents.  A calendar file holds up to three
keys::

    working_days: [monday, tuesday, wednesday, thursday, friday]
    holidays:
      - 2014-06-12
    extra_working_dates:
      - 2014-06-01

Basic usage::

    from bizcal.loader import CalendarCache, CalendarLoader

    loader = CalendarLoader(["/etc/calendars", {"adhoc": {"holidays": []}}])
    cal = loader.load("adhoc")

    cache = CalendarCache(loader)
    cache.load_cached("adhoc") is cache.load_cached("adhoc")   # → True

Public API
----------
CalendarLoader     Name → Calendar lookup along a load path.
CalendarCache      Thread-safe, load-once-per-name cache over a loader.
CalendarData       Validated calendar document.
Settings           Environment-backed settings (BIZCAL_LOAD_PATH, BIZCAL_LOG_LEVEL).
load_calendar      One-shot convenience wrapper around CalendarLoader.
configure_logging  Attach a stderr handler to the ``bizcal`` logger.
"""

from __future__ import annotations

from bizcal.loader.cache import CalendarCache
from bizcal.loader.config import Settings, configure_logging
from bizcal.loader.loader import (
    DATA_DIR,
    VALID_KEYS,
    CalendarData,
    CalendarLoader,
    load_calendar,
)

__all__ = [
    "CalendarCache",
    "CalendarData",
    "CalendarLoader",
    "DATA_DIR",
    "Settings",
    "VALID_KEYS",
    "configure_logging",
    "load_calendar",
]
