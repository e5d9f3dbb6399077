from __future__ import annotations

import operator
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence, TypeVar

import numpy as np
from dateutil import parser as _dateparser

from ._exceptions import DateParseError, InvalidDayError, InvariantViolationError
from ._steps import DayStep, as_date, step_for

DAY_NAMES: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
DEFAULT_WORKING_DAYS: tuple[str, ...] = DAY_NAMES[:5]

# 1970-01-01 was a Thursday.
_EPOCH_WEEKDAY = 3

DateLike = TypeVar("DateLike", date, datetime, np.datetime64)


def _day_name(d: date) -> str:
    return DAY_NAMES[d.weekday()]


def _parse_date(value: Any) -> date:
    try:
        if isinstance(value, (date, np.datetime64)):
            return as_date(value)
        if isinstance(value, str):
            try:
                return _dateparser.isoparse(value).date()
            except ValueError:
                # Slash dates read day-first: 01/02/2014 is 1 February.
                return _dateparser.parse(value, dayfirst=True).date()
    except (ValueError, OverflowError) as exc:
        raise DateParseError(f"Cannot parse date {value!r}.") from exc
    raise DateParseError(f"Expected a date or a date string; got {value!r}.")


def _parse_dates(values: Optional[Iterable[Any]]) -> frozenset[date]:
    if values is None:
        return frozenset()
    if isinstance(values, (str, bytes, date)):
        raise DateParseError(f"Expected a sequence of dates; got {values!r}.")
    return frozenset(_parse_date(v) for v in values)


def _day_array(dates: frozenset[date]) -> tuple[np.ndarray, np.ndarray]:
    """Sorted ``datetime64[D]`` array of ``dates`` and their weekday indices."""
    days = np.array(sorted(dates), dtype="datetime64[D]")
    weekdays = (days.astype(np.int64) + _EPOCH_WEEKDAY) % 7
    return days, weekdays


def _weekdays_between(
    days: np.ndarray, weekdays: np.ndarray, lo: np.datetime64, hi: np.datetime64
) -> np.ndarray:
    i, j = np.searchsorted(days, np.array([lo, hi], dtype="datetime64[D]"), side="left")
    return weekdays[i:j]


def _fmt_dates(dates: Iterable[date]) -> str:
    return ", ".join(d.isoformat() for d in sorted(dates))


class Calendar:
    """
    Immutable business-day calendar.

    A date is a *working day* when its weekday is one of ``working_days`` or
    it is listed in ``extra_working_dates``; it is a *business day* when it is
    a working day and not one of ``holidays``.

    Every query accepts ``datetime.date``, ``datetime.datetime`` or
    ``numpy.datetime64``; only the calendar date takes part in the decision.
    Rolling and delta operations return the same representation they were
    given, moved by whole days of the chosen :class:`DayStep`.
    """

    DAY_NAMES = DAY_NAMES
    DEFAULT_WORKING_DAYS = DEFAULT_WORKING_DAYS

    def __init__(
        self,
        name: Optional[str] = None,
        working_days: Optional[Sequence[str]] = None,
        holidays: Optional[Iterable[Any]] = None,
        extra_working_dates: Optional[Iterable[Any]] = None,
    ) -> None:
        self._name = name
        self._extra_working_dates = _parse_dates(extra_working_dates)
        self._working_days = self._normalise_working_days(working_days)
        self._holidays = _parse_dates(holidays)

        overlap = self._holidays & self._extra_working_dates
        if overlap:
            raise InvariantViolationError(
                f"Holidays cannot be extra working dates: {_fmt_dates(overlap)}."
            )

        self._weekmask: np.ndarray = np.array(
            [day in self._working_days for day in DAY_NAMES], dtype=bool
        )
        self._np_holidays, self._holiday_weekdays = _day_array(self._holidays)
        self._np_extra, self._extra_weekdays = _day_array(self._extra_working_dates)

    # ── construction helpers ─────────────────────────────────────────────

    def _normalise_working_days(
        self, working_days: Optional[Sequence[str]]
    ) -> tuple[str, ...]:
        if isinstance(working_days, str):
            raise InvalidDayError(
                f"Working days must be a sequence of day names; got {working_days!r}."
            )

        normalised: set[str] = set()
        for day in working_days or DEFAULT_WORKING_DAYS:
            code = day.strip().lower()[:3] if isinstance(day, str) else None
            if code not in DAY_NAMES:
                raise InvalidDayError(f"Invalid day {day!r}.")
            normalised.add(code)

        clashes = [
            d for d in sorted(self._extra_working_dates) if _day_name(d) in normalised
        ]
        if clashes:
            raise InvariantViolationError(
                f"Extra working dates cannot be on working days: {_fmt_dates(clashes)}."
            )
        return tuple(day for day in DAY_NAMES if day in normalised)

    @staticmethod
    def _step(value: Any, step: Optional[DayStep]) -> DayStep:
        return step if step is not None else step_for(value)

    # ── day classification ───────────────────────────────────────────────

    def is_working_day(self, value: Any) -> bool:
        d = as_date(value)
        return d in self._extra_working_dates or bool(self._weekmask[d.weekday()])

    def is_holiday(self, value: Any) -> bool:
        return as_date(value) in self._holidays

    def is_business_day(self, value: Any) -> bool:
        """True for a working day that is not a holiday."""
        d = as_date(value)
        return self.is_working_day(d) and not self.is_holiday(d)

    # ── rolling ──────────────────────────────────────────────────────────

    def roll_forward(self, value: DateLike, *, step: Optional[DayStep] = None) -> DateLike:
        """``value`` itself if it is a business day, else the next one."""
        step = self._step(value, step)
        while not self.is_business_day(value):
            value = step.advance(value, 1)
        return value

    def roll_backward(self, value: DateLike, *, step: Optional[DayStep] = None) -> DateLike:
        """``value`` itself if it is a business day, else the previous one."""
        step = self._step(value, step)
        while not self.is_business_day(value):
            value = step.advance(value, -1)
        return value

    def next_business_day(self, value: DateLike, *, step: Optional[DayStep] = None) -> DateLike:
        """First business day strictly after ``value``."""
        step = self._step(value, step)
        value = step.advance(value, 1)
        while not self.is_business_day(value):
            value = step.advance(value, 1)
        return value

    def previous_business_day(
        self, value: DateLike, *, step: Optional[DayStep] = None
    ) -> DateLike:
        """Last business day strictly before ``value``."""
        step = self._step(value, step)
        value = step.advance(value, -1)
        while not self.is_business_day(value):
            value = step.advance(value, -1)
        return value

    # ── delta arithmetic ─────────────────────────────────────────────────

    @staticmethod
    def _check_delta(delta: int) -> int:
        n = operator.index(delta)
        if n < 0:
            raise ValueError(f"Business-day delta must be non-negative; got {n}.")
        return n

    def add_business_days(
        self, value: DateLike, delta: int, *, step: Optional[DayStep] = None
    ) -> DateLike:
        """
        Move ``delta`` business days forward.  Counting starts from
        ``roll_forward(value)``, so::

            monday + 1 = tuesday
            friday + 1 = monday
            sunday + 1 = tuesday

        A delta of 0 returns the rolled date; a negative delta raises
        ``ValueError`` (use :meth:`subtract_business_days`).
        """
        n = self._check_delta(delta)
        step = self._step(value, step)
        value = self.roll_forward(value, step=step)
        for _ in range(n):
            value = self.next_business_day(value, step=step)
        return value

    def subtract_business_days(
        self, value: DateLike, delta: int, *, step: Optional[DayStep] = None
    ) -> DateLike:
        """
        Move ``delta`` business days backward, starting from
        ``roll_backward(value)``::

            friday - 1 = thursday
            monday - 1 = friday
            sunday - 1 = thursday
        """
        n = self._check_delta(delta)
        step = self._step(value, step)
        value = self.roll_backward(value, step=step)
        for _ in range(n):
            value = self.previous_business_day(value, step=step)
        return value

    # ── range counting ───────────────────────────────────────────────────

    def business_days_between(self, date1: Any, date2: Any) -> int:
        """
        Number of business days in ``[date1, date2)``, i.e. from the start of
        ``date1`` to the start of ``date2``::

            business_days_between(mon, wed) == 2   # no holidays

        If ``date2`` precedes ``date1`` the count is negated.
        """
        start, end = as_date(date1), as_date(date2)
        if end < start:
            return -self.business_days_between(end, start)

        # Whole weeks contain every weekday exactly once per week, so they are
        # counted from the week mask and corrected for holidays on working
        # weekdays and extra working dates on non-working weekdays.  Only the
        # short tail is walked day by day.
        num_full_weeks, remaining_days = divmod((end - start).days, 7)
        tail_start = end - timedelta(days=remaining_days)

        num_biz_days = num_full_weeks * len(self._working_days)

        lo = np.datetime64(start, "D")
        hi = np.datetime64(tail_start, "D")
        holiday_wd = _weekdays_between(self._np_holidays, self._holiday_weekdays, lo, hi)
        extra_wd = _weekdays_between(self._np_extra, self._extra_weekdays, lo, hi)
        num_biz_days -= int(self._weekmask[holiday_wd].sum())
        num_biz_days += int((~self._weekmask[extra_wd]).sum())

        num_biz_days += sum(
            self.is_business_day(tail_start + timedelta(days=i))
            for i in range(remaining_days)
        )
        return num_biz_days

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def working_days(self) -> tuple[str, ...]:
        return self._working_days

    @property
    def holidays(self) -> frozenset[date]:
        return self._holidays

    @property
    def extra_working_dates(self) -> frozenset[date]:
        return self._extra_working_dates

    def _key(self) -> tuple[Any, ...]:
        return (self._name, self._working_days, self._holidays, self._extra_working_dates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"Calendar(name={self._name!r}, "
            f"working_days={list(self._working_days)}, "
            f"holidays={len(self._holidays)}, "
            f"extra_working_dates={len(self._extra_working_dates)})"
        )
