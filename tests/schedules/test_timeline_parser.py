from __future__ import annotations

import logging
from datetime import datetime

import pytest

from src.shift_attendance.shift_attendance.core.exceptions import SourceUnavailable
from src.shift_attendance.shift_attendance.schedules.csv_schedule_repository import CsvTimetableSource, parse_csv_text
from src.shift_attendance.shift_attendance.schedules.parser import parse_flag, parse_timeline, people_from_headers


def test_csv_source_sorts_and_skips_bad_rows(schedule_csv, caplog):
    with caplog.at_level(logging.WARNING):
        timeline = CsvTimetableSource(schedule_csv).load()

    assert timeline.people == ("Alex", "Cole", "Vincent")
    assert len(timeline) == 8
    assert timeline.skipped_rows == 1
    assert "not a time" in caplog.text

    instants = [s.instant for s in timeline.samples]
    assert instants == sorted(instants)
    assert timeline.anchor == datetime(2026, 1, 18, 12, 0)


def test_flags_are_trimmed_and_case_insensitive():
    assert parse_flag("TRUE")
    assert parse_flag(" true ")
    assert parse_flag("True")
    assert not parse_flag("FALSE")
    assert not parse_flag("")
    assert not parse_flag(None)
    assert not parse_flag("yes")
    assert not parse_flag("1")


def test_unsorted_rows_are_sorted_and_duplicates_keep_last_row():
    headers = ["Time", "Alex"]
    rows = [
        {"Time": "1/18/2026 14:00:00", "Alex": "FALSE"},
        {"Time": "1/18/2026 12:00:00", "Alex": "TRUE"},
        {"Time": "1/18/2026 14:00:00", "Alex": "TRUE"},
    ]

    timeline = parse_timeline(rows, headers)

    assert [s.instant.hour for s in timeline.samples] == [12, 14]
    assert timeline.samples[1].is_on("Alex") is True


def test_missing_cell_is_false():
    timeline = parse_timeline([{"Time": "1/18/2026 12:00"}], ["Time", "Alex"])
    assert timeline.samples[0].is_on("Alex") is False


def test_seconds_are_dropped():
    timeline = parse_timeline([{"Time": "1/18/2026 12:00:42", "Alex": "TRUE"}], ["Time", "Alex"])
    assert timeline.anchor == datetime(2026, 1, 18, 12, 0)


def test_iso_times_are_accepted():
    timeline = parse_timeline([{"Time": "2026-01-18T12:30", "Alex": "TRUE"}], ["Time", "Alex"])
    assert timeline.anchor == datetime(2026, 1, 18, 12, 30)


def test_people_from_headers_skips_time_and_blank_columns():
    assert people_from_headers(["Time", "Alex", "", " Cole ", None]) == ("Alex", "Cole")


def test_no_person_columns_is_fatal():
    with pytest.raises(SourceUnavailable):
        parse_csv_text("Time\n1/18/2026 12:00:00\n")


def test_empty_source_is_fatal():
    with pytest.raises(SourceUnavailable):
        parse_csv_text("   \n")


def test_all_rows_malformed_is_fatal():
    with pytest.raises(SourceUnavailable):
        parse_csv_text("Time,Alex\nnope,TRUE\n")


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(SourceUnavailable):
        CsvTimetableSource(tmp_path / "missing.csv").load()


def test_configured_zone_makes_aware_instants():
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    try:
        tz = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")

    timeline = parse_csv_text("Time,Alex\n1/18/2026 12:00:00,TRUE\n", tz=tz)
    assert timeline.anchor.tzinfo is tz
    assert timeline.anchor.hour == 12


def test_malformed_row_reports_its_line_in_the_file(caplog):
    text = "\n\nTime,Alex\n1/18/2026 12:00:00,TRUE\n\n , \nbad,TRUE\n1/18/2026 14:00:00,FALSE\n"

    with caplog.at_level(logging.WARNING):
        timeline = parse_csv_text(text)

    assert len(timeline) == 2
    assert timeline.skipped_rows == 1
    assert "Row 7: invalid Time 'bad'" in caplog.text


def test_blank_rows_given_directly_are_ignored():
    rows = [{"Time": "", "Alex": " "}, {"Time": "1/18/2026 12:00:00", "Alex": "TRUE"}]
    assert len(parse_timeline(rows, ["Time", "Alex"])) == 1
