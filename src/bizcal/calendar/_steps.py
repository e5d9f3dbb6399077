"""
One "day" of movement for each supported date representation.

``DateStep`` moves a ``datetime.date`` by one calendar day, ``DateTimeStep``
moves a ``datetime.datetime`` by a fixed 86400 seconds of elapsed time
(tzinfo is kept; across a DST change the wall-clock time moves with the
offset) and ``Datetime64Step`` does the same for ``numpy.datetime64``
values, keeping their unit.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Protocol

import numpy as np

_ONE_DAY = timedelta(days=1)
_DAY_SECONDS = timedelta(seconds=86400)


class DayStep(Protocol):
    def advance(self, value: Any, days: int) -> Any: ...


class DateStep:
    def advance(self, value: date, days: int) -> date:
        return value + days * _ONE_DAY

    def __repr__(self) -> str:
        return "DateStep()"


class DateTimeStep:
    def advance(self, value: datetime, days: int) -> datetime:
        if value.utcoffset() is None:
            return value + days * _DAY_SECONDS
        # Python adds timedeltas to aware datetimes in wall-clock time.
        moved = value.astimezone(timezone.utc) + days * _DAY_SECONDS
        return moved.astimezone(value.tzinfo)

    def __repr__(self) -> str:
        return "DateTimeStep()"


class Datetime64Step:
    def advance(self, value: np.datetime64, days: int) -> np.datetime64:
        unit, _ = np.datetime_data(value.dtype)
        if unit == "D":
            return value + np.timedelta64(days, "D")
        return value + np.timedelta64(days * 86400, "s")

    def __repr__(self) -> str:
        return "Datetime64Step()"


DATE_STEP = DateStep()
DATETIME_STEP = DateTimeStep()
DATETIME64_STEP = Datetime64Step()


def step_for(value: Any) -> DayStep:
    """Default step for ``value`` when the caller does not pick one."""
    # datetime subclasses date, so it has to be checked first.
    if isinstance(value, datetime):
        return DATETIME_STEP
    if isinstance(value, date):
        return DATE_STEP
    if isinstance(value, np.datetime64):
        return DATETIME64_STEP
    raise TypeError(f"Expected a date, datetime or numpy.datetime64; got {type(value)!r}.")


def as_date(value: Any) -> date:
    """Calendar-date component of ``value``; time of day is dropped."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise ValueError("NaT has no calendar date.")
        return value.astype("datetime64[D]").item()
    raise TypeError(f"Expected a date, datetime or numpy.datetime64; got {type(value)!r}.")
