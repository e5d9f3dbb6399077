"""
tests/loader/test_loader.py

Covers:
  - Loading from directories of YAML files and from in-memory mappings
  - Load-path ordering and the bundled calendars
  - Key validation and malformed documents
  - Missing calendars
  - Environment-backed settings and logging setup
"""

from __future__ import annotations

import logging
import os
from datetime import date

import pytest

from bizcal.calendar import (
    Calendar,
    CalendarError,
    CalendarNotFoundError,
    DateParseError,
    InvalidCalendarDataError,
    InvariantViolationError,
)
from bizcal.loader import (
    DATA_DIR,
    CalendarData,
    CalendarLoader,
    Settings,
    configure_logging,
    load_calendar,
)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def calendar_dir(tmp_path):
    (tmp_path / "bacs.yml").write_text(
        "working_days:\n"
        "  - monday\n"
        "  - tuesday\n"
        "  - wednesday\n"
        "  - thursday\n"
        "  - friday\n"
        "holidays:\n"
        "  - 2014-06-12\n"
        "  - '1st Jan, 2014'\n"
        "extra_working_dates:\n"
        "  - 2014-06-01\n",
        encoding="utf-8",
    )
    (tmp_path / "empty.yml").write_text("", encoding="utf-8")
    return tmp_path


# ── Directory entries ─────────────────────────────────────────────────────────

class TestDirectoryLoad:

    def test_loads_yaml(self, calendar_dir):
        cal = CalendarLoader([calendar_dir]).load("bacs")
        assert isinstance(cal, Calendar)
        assert cal.name == "bacs"
        assert cal.working_days == ("mon", "tue", "wed", "thu", "fri")
        assert cal.holidays == frozenset({date(2014, 6, 12), date(2014, 1, 1)})
        assert cal.extra_working_dates == frozenset({date(2014, 6, 1)})

    def test_string_path(self, calendar_dir):
        assert CalendarLoader([str(calendar_dir)]).load("bacs").name == "bacs"

    def test_empty_file_is_default_calendar(self, calendar_dir):
        cal = CalendarLoader([calendar_dir]).load("empty")
        assert cal.working_days == Calendar.DEFAULT_WORKING_DAYS
        assert cal.holidays == frozenset()

    def test_find_calendar_data_returns_document(self, calendar_dir):
        data = CalendarLoader([calendar_dir]).find_calendar_data("bacs")
        assert data["holidays"][0] == date(2014, 6, 12)

    def test_missing_file_returns_none(self, calendar_dir):
        assert CalendarLoader([calendar_dir]).find_calendar_data("nope") is None

    def test_yaml_syntax_error(self, tmp_path):
        (tmp_path / "broken.yml").write_text("holidays: [2014-06-12\n", encoding="utf-8")
        with pytest.raises(InvalidCalendarDataError):
            CalendarLoader([tmp_path]).load("broken")

    def test_undecodable_file(self, tmp_path):
        (tmp_path / "binary.yml").write_bytes(b"holidays:\n  - \xff\xfe2014-06-12\n")
        with pytest.raises(InvalidCalendarDataError) as info:
            CalendarLoader([tmp_path]).load("binary")
        assert isinstance(info.value.__cause__, UnicodeDecodeError)


# ── Mapping entries ───────────────────────────────────────────────────────────

class TestMappingLoad:

    def test_loads_mapping(self):
        loader = CalendarLoader([{"adhoc": {"holidays": ["2014-06-12"]}}])
        cal = loader.load("adhoc")
        assert cal.name == "adhoc"
        assert not cal.is_business_day(date(2014, 6, 12))

    def test_mapping_without_name_is_skipped(self, calendar_dir):
        loader = CalendarLoader([{"other": {}}, calendar_dir])
        assert loader.load("bacs").name == "bacs"

    def test_first_entry_wins(self, calendar_dir):
        loader = CalendarLoader([{"bacs": {"working_days": ["sat"]}}, calendar_dir])
        assert loader.load("bacs").working_days == ("sat",)

    def test_directory_before_mapping(self, calendar_dir):
        loader = CalendarLoader([calendar_dir, {"bacs": {"working_days": ["sat"]}}])
        assert loader.load("bacs").working_days[0] == "mon"


# ── Validation ────────────────────────────────────────────────────────────────

class TestValidation:

    def test_unknown_key_rejected(self):
        loader = CalendarLoader([{"bad": {"holidays": [], "business_days": ["mon"]}}])
        with pytest.raises(InvalidCalendarDataError, match="Only valid keys are"):
            loader.load("bad")

    def test_non_mapping_document_rejected(self):
        with pytest.raises(InvalidCalendarDataError):
            CalendarLoader([{"bad": ["2014-06-12"]}]).load("bad")

    def test_non_list_value_rejected(self):
        with pytest.raises(InvalidCalendarDataError):
            CalendarLoader([{"bad": {"holidays": "2014-06-12"}}]).load("bad")

    def test_invalid_dates_propagate(self):
        with pytest.raises(DateParseError):
            CalendarLoader([{"bad": {"holidays": ["garbage"]}}]).load("bad")

    def test_invariants_propagate(self):
        doc = {"holidays": ["2018-01-06"], "extra_working_dates": ["2018-01-06"]}
        with pytest.raises(InvariantViolationError):
            CalendarLoader([{"bad": doc}]).load("bad")

    def test_calendar_data_from_mapping(self):
        data = CalendarData.from_mapping({"working_days": ["mon"], "holidays": None})
        assert data == CalendarData(working_days=("mon",))
        assert data.build("x") == Calendar(name="x", working_days=["mon"])

    def test_calendar_data_from_none(self):
        assert CalendarData.from_mapping(None) == CalendarData()


# ── Missing calendars ─────────────────────────────────────────────────────────

class TestMissing:

    def test_no_such_calendar(self, calendar_dir):
        with pytest.raises(CalendarNotFoundError, match="No such calendar 'nope'"):
            CalendarLoader([calendar_dir]).load("nope")

    def test_not_found_is_lookup_error(self):
        assert issubclass(CalendarNotFoundError, LookupError)
        assert issubclass(CalendarNotFoundError, CalendarError)

    def test_empty_load_path(self):
        with pytest.raises(CalendarNotFoundError):
            CalendarLoader([]).load("weekdays")


# ── Defaults, settings, logging ───────────────────────────────────────────────

class TestDefaults:

    def test_bundled_weekdays(self, monkeypatch):
        monkeypatch.delenv("BIZCAL_LOAD_PATH", raising=False)
        cal = CalendarLoader().load("weekdays")
        assert cal.working_days == ("mon", "tue", "wed", "thu", "fri")
        assert cal.holidays == frozenset()

    def test_default_path_ends_with_bundled_data(self, monkeypatch):
        monkeypatch.delenv("BIZCAL_LOAD_PATH", raising=False)
        assert CalendarLoader().load_paths == (DATA_DIR,)

    def test_env_path_searched_first(self, monkeypatch, calendar_dir, tmp_path_factory):
        override = tmp_path_factory.mktemp("override")
        (override / "weekdays.yml").write_text("working_days: [sat, sun]\n", encoding="utf-8")
        monkeypatch.setenv("BIZCAL_LOAD_PATH", os.pathsep.join([str(override), str(calendar_dir)]))
        loader = CalendarLoader()
        assert loader.load("weekdays").working_days == ("sat", "sun")
        assert loader.load("bacs").name == "bacs"

    def test_load_calendar_helper(self, calendar_dir):
        assert load_calendar("bacs", [calendar_dir]).name == "bacs"


class TestSettings:

    def test_defaults(self):
        s = Settings.from_env({})
        assert s.load_path == ()
        assert s.log_level == "WARNING"

    def test_from_env(self, tmp_path):
        env = {
            "BIZCAL_LOAD_PATH": f"{tmp_path}{os.pathsep} {os.pathsep}/srv/calendars",
            "BIZCAL_LOG_LEVEL": " debug ",
        }
        s = Settings.from_env(env)
        assert [str(p) for p in s.load_path] == [str(tmp_path), os.path.normpath("/srv/calendars")]
        assert s.log_level == "DEBUG"

    def test_blank_values_fall_back(self):
        s = Settings.from_env({"BIZCAL_LOAD_PATH": "  ", "BIZCAL_LOG_LEVEL": ""})
        assert s == Settings()


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def _restore_logger(self):
        logger = logging.getLogger("bizcal")
        handlers, level = list(logger.handlers), logger.level
        try:
            yield
        finally:
            logger.handlers = handlers
            logger.setLevel(level)

    def test_explicit_level(self):
        logger = configure_logging("debug")
        assert logger.name == "bizcal"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("BIZCAL_LOG_LEVEL", "INFO")
        assert configure_logging().level == logging.INFO

    @pytest.mark.parametrize("level", ["verbos", "BASIC_FORMAT", ""])
    def test_unknown_level_rejected(self, level):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level)

    def test_unknown_env_level_rejected(self, monkeypatch):
        monkeypatch.setenv("BIZCAL_LOG_LEVEL", "verbos")
        with pytest.raises(ValueError):
            configure_logging()

    def test_level_name_is_case_insensitive(self):
        assert configure_logging(" Warn ").level == logging.WARNING

    def test_repeated_calls_do_not_stack_handlers(self):
        configure_logging(logging.INFO)
        configure_logging(logging.INFO)
        assert len(logging.getLogger("bizcal").handlers) == 1

    def test_load_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="bizcal"):
            CalendarLoader([{"adhoc": {}}]).load("adhoc")
        assert any("Loaded calendar 'adhoc'" in r.getMessage() for r in caplog.records)
