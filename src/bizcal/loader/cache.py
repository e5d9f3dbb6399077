from __future__ import annotations

import logging
import threading
from typing import Optional

from bizcal.calendar import Calendar
from bizcal.loader.loader import CalendarLoader

logger = logging.getLogger(__name__)


class CalendarCache:
    """
    Load-once-per-name store of calendars.

    ``load_cached`` holds a single lock across the lookup and the load, so
    concurrent callers asking for the same name trigger exactly one load and
    all receive the same instance.  Failed loads are not cached.
    """

    def __init__(self, loader: Optional[CalendarLoader] = None) -> None:
        self._loader = loader if loader is not None else CalendarLoader()
        self._lock = threading.Lock()
        self._calendars: dict[str, Calendar] = {}

    def load_cached(self, name: str) -> Calendar:
        with self._lock:
            calendar = self._calendars.get(name)
            if calendar is None:
                calendar = self._loader.load(name)
                self._calendars[name] = calendar
                logger.debug("Cached calendar %r", name)
            return calendar

    def clear(self) -> None:
        with self._lock:
            self._calendars.clear()

    @property
    def loader(self) -> CalendarLoader:
        return self._loader

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._calendars

    def __len__(self) -> int:
        with self._lock:
            return len(self._calendars)

    def __repr__(self) -> str:
        return f"CalendarCache(calendars={sorted(self._calendars)})"
