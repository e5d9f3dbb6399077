from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

import yaml

from bizcal.calendar import Calendar, CalendarNotFoundError, InvalidCalendarDataError
from bizcal.loader.config import Settings

logger = logging.getLogger(__name__)

VALID_KEYS: tuple[str, ...] = ("holidays", "working_days", "extra_working_dates")
DATA_DIR: Path = Path(__file__).resolve().parent / "data"

# A directory of ``<name>.yml`` files, or an in-memory ``{name: document}``.
LoadPathEntry = Union[str, "os.PathLike[str]", Mapping[str, Any]]


def _as_tuple(key: str, value: Any) -> Optional[tuple[Any, ...]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise InvalidCalendarDataError(
            f"'{key}' must be a list; got {type(value).__name__}."
        )
    return tuple(value)


@dataclass(frozen=True, slots=True)
class CalendarData:
    """Deserialized calendar document, before any date parsing."""

    working_days: Optional[tuple[Any, ...]] = None
    holidays: Optional[tuple[Any, ...]] = None
    extra_working_dates: Optional[tuple[Any, ...]] = None

    @classmethod
    def from_mapping(cls, data: Any) -> CalendarData:
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidCalendarDataError(
                f"Calendar data must be a mapping; got {type(data).__name__}."
            )
        unknown = set(data) - set(VALID_KEYS)
        if unknown:
            raise InvalidCalendarDataError(
                f"Only valid keys are: {', '.join(VALID_KEYS)} "
                f"(got {', '.join(sorted(map(str, unknown)))})."
            )
        return cls(**{key: _as_tuple(key, data.get(key)) for key in VALID_KEYS})

    def build(self, name: Optional[str] = None) -> Calendar:
        return Calendar(
            name=name,
            working_days=self.working_days,
            holidays=self.holidays,
            extra_working_dates=self.extra_working_dates,
        )


def _read_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError, OSError) as exc:
        raise InvalidCalendarDataError(f"Cannot parse calendar file {path}: {exc}") from exc
    return {} if data is None else data


class CalendarLoader:
    """
    Finds calendar documents by name along an ordered load path and turns
    them into :class:`Calendar` instances.

    Each load-path entry is either a directory holding ``<name>.yml`` files or
    a mapping of calendar name to an already-deserialized document.  The
    first entry that knows the name wins.  Without an explicit load path the
    directories from ``BIZCAL_LOAD_PATH`` are searched, then the calendars
    bundled with the package.
    """

    def __init__(self, load_paths: Optional[Sequence[LoadPathEntry]] = None) -> None:
        if load_paths is None:
            load_paths = [*Settings.from_env().load_path, DATA_DIR]
        self._load_paths: list[LoadPathEntry] = list(load_paths)

    @property
    def load_paths(self) -> tuple[LoadPathEntry, ...]:
        return tuple(self._load_paths)

    def find_calendar_data(self, name: str) -> Optional[Any]:
        for entry in self._load_paths:
            if isinstance(entry, Mapping):
                data = entry.get(name)
                if data is not None:
                    logger.debug("Calendar %r found in in-memory load path entry", name)
                    return data
                continue

            path = Path(entry) / f"{name}.yml"
            if path.is_file():
                logger.debug("Calendar %r found at %s", name, path)
                return _read_yaml(path)
        return None

    def load(self, name: str) -> Calendar:
        data = self.find_calendar_data(name)
        if data is None:
            raise CalendarNotFoundError(f"No such calendar '{name}'")

        calendar = CalendarData.from_mapping(data).build(name)
        logger.info(
            "Loaded calendar %r: working_days=%s, %d holidays, %d extra working dates",
            name,
            ",".join(calendar.working_days),
            len(calendar.holidays),
            len(calendar.extra_working_dates),
        )
        return calendar

    def __repr__(self) -> str:
        return f"CalendarLoader(load_paths={self._load_paths!r})"


def load_calendar(
    name: str, load_paths: Optional[Sequence[LoadPathEntry]] = None
) -> Calendar:
    return CalendarLoader(load_paths).load(name)
