class CalendarError(Exception):
    """Base exception for all calendar-related errors."""


class InvalidDayError(CalendarError, ValueError):
    """A working-day token does not name one of the seven weekdays."""


class DateParseError(CalendarError, ValueError):
    """A holiday or extra working date could not be parsed into a date."""


class InvariantViolationError(CalendarError, ValueError):
    """Holidays, working days and extra working dates contradict each other."""


class CalendarNotFoundError(CalendarError, LookupError):
    """No calendar with the requested name exists on the load path."""


class InvalidCalendarDataError(CalendarError, ValueError):
    """A calendar document is malformed or carries unknown keys."""
