import datetime

import pytest

from timeview.sources.ical import IcsCalendarParser, Property, parse_duration, unescape, unfold


def calendar(*event_lines, events=1):
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0"]
    for _ in range(events):
        lines += ["BEGIN:VEVENT", *event_lines, "END:VEVENT"]
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def parser():
    return IcsCalendarParser()


def test_event_with_start_and_end(parser):
    entry, = parser.parse(calendar(
        "DTSTART:20240115T090000Z",
        "DTEND:20240115T103000Z",
        "SUMMARY:Planning",
    ))
    assert entry.date == datetime.date(2024, 1, 15)
    assert entry.duration == pytest.approx(1.5)
    assert entry.title == "Planning"
    assert entry.note == ""
    assert entry.tags == ()


def test_all_day_event_defaults_to_one_hour(parser):
    entry, = parser.parse(calendar("DTSTART;VALUE=DATE:20240115", "SUMMARY:Offsite"))
    assert entry.date == datetime.date(2024, 1, 15)
    assert entry.duration == 1.0


def test_fixed_offset_zone_keeps_wall_clock_day(parser):
    entry, = parser.parse(calendar("DTSTART;TZID=Asia/Shanghai:20240115T233000", "SUMMARY:Late call"))
    assert entry.date == datetime.date(2024, 1, 15)


def test_mixed_zones_compare_wall_clock_times(parser):
    entry, = parser.parse(calendar(
        "DTSTART;TZID=Europe/Warsaw:20240115T090000",
        "DTEND;TZID=Asia/Taipei:20240115T120000",
        "SUMMARY:Sync",
    ))
    assert entry.date == datetime.date(2024, 1, 15)
    assert entry.duration == 3.0


@pytest.mark.parametrize("value, expected", [
    ("PT2H30M", 2.5),
    ("PT30M", 1.0),
    ("PT0S", 1.0),
    ("P1DT2H", 26.0),
])
def test_duration_property(parser, value, expected):
    entry, = parser.parse(calendar("DTSTART:20240115T090000", f"DURATION:{value}", "SUMMARY:Work"))
    assert entry.duration == pytest.approx(expected)


def test_short_end_is_floored(parser):
    entry, = parser.parse(calendar("DTSTART:20240115T090000", "DTEND:20240115T091500", "SUMMARY:Coffee"))
    assert entry.duration == 1.0


def test_first_duration_source_wins(parser):
    entry, = parser.parse(calendar(
        "DTSTART:20240115T090000",
        "DURATION:PT3H",
        "DTEND:20240115T180000",
        "SUMMARY:Workshop",
    ))
    assert entry.duration == 3.0


def test_end_before_start_is_applied_once_start_is_known(parser):
    entry, = parser.parse(calendar(
        "DTEND:20240115T130000",
        "DURATION:PT1H",
        "DTSTART:20240115T090000",
        "SUMMARY:Reordered",
    ))
    assert entry.duration == 4.0


def test_text_unescaping_and_categories(parser):
    entry, = parser.parse(calendar(
        "DTSTART:20240115T090000",
        r"SUMMARY:Lunch\, team \\ friends",
        r"DESCRIPTION:first line\nsecond\, with comma",
        "CATEGORIES:Work, Meetings",
    ))
    assert entry.title == "Lunch, team \\ friends"
    assert entry.note == "first line\nsecond, with comma"
    assert entry.category == "Work"
    assert entry.tags == ("Work", "Meetings")


@pytest.mark.parametrize("value, category, tags", [
    (",work", "", ("", "work")),
    ("", "", ("",)),
    (" Home ,", "Home", ("Home", "")),
])
def test_categories_keep_empty_items(parser, value, category, tags):
    entry, = parser.parse(calendar("DTSTART:20240115", "SUMMARY:Chores", f"CATEGORIES:{value}"))
    assert entry.category == category
    assert entry.tags == tags


def test_folded_description_is_unfolded_before_unescaping(parser):
    text = ("BEGIN:VEVENT\r\n"
            "DTSTART:20240115T090000\r\n"
            "SUMMARY:Review\r\n"
            "DESCRIPTION:first part of a lo\r\n"
            " ng note\\\r\n"
            " nsecond line\r\n"
            "END:VEVENT\r\n")
    entry, = parser.parse(text)
    assert entry.note == "first part of a long note\nsecond line"


@pytest.mark.parametrize("lines", [
    ("DTSTART:20240115T090000",),
    ("SUMMARY:No start",),
    ("DTSTART:not a date", "SUMMARY:Bad start"),
])
def test_incomplete_events_are_dropped(parser, lines):
    assert parser.parse(calendar(*lines)) == []


def test_bad_property_keeps_accumulated_fields(parser):
    entry, = parser.parse(calendar(
        "DTSTART:20240115T090000",
        "SUMMARY:Survivor",
        "DTEND:20241399T000000",
        "DESCRIPTION:still here",
    ))
    assert entry.title == "Survivor"
    assert entry.note == "still here"
    assert entry.duration == 1.0


def test_properties_outside_events_are_ignored(parser):
    text = "SUMMARY:Calendar name\nDTSTART:20240101T000000\n" + calendar("DTSTART:20240115", "SUMMARY:Only", events=2)
    entries = parser.parse(text)
    assert [entry.title for entry in entries] == ["Only", "Only"]


def test_unfold_handles_mixed_line_breaks():
    assert unfold("A:1\r\n  two\rB:2\n\tthree") == ["A:1 two", "B:2three"]


def test_property_parsing():
    prop = Property.parse("DTSTART;TZID=Asia/Shanghai;VALUE=DATE-TIME:20240115T090000")
    assert prop.name == "DTSTART"
    assert prop.tzid == "Asia/Shanghai"
    assert prop.params["VALUE"] == "DATE-TIME"
    assert prop.value == "20240115T090000"
    assert Property.parse("no separator") is None


def test_helpers():
    assert parse_duration("PT1H30M15S") == pytest.approx(1.5 + 15 / 3600)
    assert unescape(r"a\\n\,b") == "a\\n,b"


def test_alarm_properties_do_not_leak_into_the_event(parser):
    entry, = parser.parse(calendar(
        "DTSTART:20240115T090000",
        "BEGIN:VALARM",
        "ACTION:DISPLAY",
        "TRIGGER:-PT15M",
        "DURATION:PT5M",
        "DESCRIPTION:Reminder",
        "END:VALARM",
        "SUMMARY:Standup",
        "DESCRIPTION:Daily sync",
        "DURATION:PT2H",
    ))
    assert entry.title == "Standup"
    assert entry.note == "Daily sync"
    assert entry.duration == 2.0


def test_alarm_before_summary_keeps_event_fields(parser):
    entry, = parser.parse(calendar(
        "SUMMARY:Review",
        "DESCRIPTION:Quarterly",
        "BEGIN:VALARM",
        "SUMMARY:Alarm title",
        "DESCRIPTION:Reminder",
        "DTSTART:20240301T080000",
        "END:VALARM",
        "DTSTART:20240115T090000",
    ))
    assert entry.title == "Review"
    assert entry.note == "Quarterly"
    assert entry.date == datetime.date(2024, 1, 15)
    assert entry.duration == 1.0
