# src/bizcal/calendar/__init__.py
"""
bizcal.calendar
~~~~~~~~~~~~~~~

Business-day arithmetic.  A Calendar combines a set of working weekdays with
explicit holidays and explicit extra working dates, and answers questions
such as "is this a business day?" or "what is three business days later?".

Basic usage::

    from datetime import date
    from bizcal.calendar import Calendar

    cal = Calendar(holidays=["2014-06-12"])          # Mon–Fri by default
    cal.is_business_day(date(2014, 6, 12))          # → False
    cal.add_business_days(date(2014, 6, 13), 1)     # → date(2014, 6, 16)
    cal.business_days_between(date(2014, 6, 2), date(2014, 6, 9))  # → 5

``datetime.datetime`` and ``numpy.datetime64`` values are accepted wherever a
date is; rolling a datetime keeps its time of day.

Public API
----------
Calendar                  The main class.
DayStep                   Protocol for "advance by N days" adapters.
DateStep, DateTimeStep,
Datetime64Step            The shipped DayStep adapters.
CalendarError             Base exception for all calendar-related errors.
InvalidDayError           Unknown working-day name.
DateParseError            Unparsable holiday / extra working date.
InvariantViolationError   Contradictory calendar configuration.
"""

from __future__ import annotations

from bizcal.calendar._exceptions import (
    CalendarError,
    CalendarNotFoundError,
    DateParseError,
    InvalidCalendarDataError,
    InvalidDayError,
    InvariantViolationError,
)
from bizcal.calendar._steps import (
    DateStep,
    DateTimeStep,
    Datetime64Step,
    DayStep,
    as_date,
    step_for,
)
from bizcal.calendar.calendar import DAY_NAMES, DEFAULT_WORKING_DAYS, Calendar

__all__ = [
    "Calendar",
    "DAY_NAMES",
    "DEFAULT_WORKING_DAYS",
    "DayStep",
    "DateStep",
    "DateTimeStep",
    "Datetime64Step",
    "as_date",
    "step_for",
    "CalendarError",
    "CalendarNotFoundError",
    "DateParseError",
    "InvalidCalendarDataError",
    "InvalidDayError",
    "InvariantViolationError",
]
