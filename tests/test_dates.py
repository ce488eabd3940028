import datetime

import pytest

from timeview.model.dates import DateGrammar, DateResolver, MMDDYY, default_grammars, expand_year


def grammar(name):
    return next(g for g in default_grammars() if g.name == name)


@pytest.mark.parametrize("raw, year", [
    ("01/15/00", 2000),
    ("01/15/24", 2024),
    ("03/04/49", 2049),
    ("03/04/50", 1950),
    ("12/31/99", 1999),
])
def test_two_digit_years_use_fixed_century_pivot(raw, year):
    assert DateResolver().resolve(raw).year == year
    assert MMDDYY.try_parse(raw).year == year


def test_expand_year_leaves_full_years_alone():
    assert expand_year(2024) == 2024
    assert expand_year(7) == 2007
    assert expand_year(87) == 1987


@pytest.mark.parametrize("name, raw, expected", [
    ("MM/DD/YY", "01/15/24 trailing", datetime.datetime(2024, 1, 15)),
    ("YYYY/MM/DD", "2024/01/15", datetime.datetime(2024, 1, 15)),
    ("DD-MM-YYYY", "15-01-2024", datetime.datetime(2024, 1, 15)),
    ("YYYY-MM-DD", "2024-01-15 anything", datetime.datetime(2024, 1, 15)),
    ("DD.MM.YYYY", "15.01.2024", datetime.datetime(2024, 1, 15)),
    ("Mon DD, YYYY", "jan 15, 2024", datetime.datetime(2024, 1, 15)),
    ("Mon DD, YYYY", "Feb 3 2024", datetime.datetime(2024, 2, 3)),
    ("MM/DD/YY HH:MM", "01/15/24 9:05", datetime.datetime(2024, 1, 15, 9, 5)),
    ("MM/DD/YY HH:MM", "01/15/24 12:30 AM", datetime.datetime(2024, 1, 15, 0, 30)),
    ("MM/DD/YY HH:MM", "01/15/24 12:30 PM", datetime.datetime(2024, 1, 15, 12, 30)),
    ("MM/DD/YY HH:MM", "01/15/24 1:05 pm", datetime.datetime(2024, 1, 15, 13, 5)),
    ("YYYY/MM/DD HH:MM", "2024/01/15 18:45", datetime.datetime(2024, 1, 15, 18, 45)),
])
def test_regex_grammars(name, raw, expected):
    assert grammar(name).try_parse(raw) == expected


@pytest.mark.parametrize("name, raw", [
    ("MM/DD/YY", "13/01/24"),
    ("YYYY-MM-DD", "2023-02-30"),
    ("DD.MM.YYYY", "32.01.2024"),
    ("MM/DD/YY", "01/15/2024"),
    ("YYYY/MM/DD", "x 2024/01/15"),
])
def test_regex_grammars_reject_invalid_or_unanchored_dates(name, raw):
    assert grammar(name).try_parse(raw) is None


def test_generic_grammar_requires_a_complete_date():
    generic = grammar("generic")
    assert generic.try_parse("2024-01-15T08:30:00") == datetime.datetime(2024, 1, 15, 8, 30)
    assert generic.try_parse("March 2024") is None
    assert generic.try_parse("10:30") is None
    assert generic.try_parse("12") is None


def test_resolver_keeps_time_of_day():
    assert DateResolver().resolve("  01/15/24 09:00 ") == datetime.datetime(2024, 1, 15, 9, 0)


def test_resolver_falls_back_to_regex_grammars_on_noisy_text():
    resolver = DateResolver()
    assert resolver.resolve("2024/01/15 standup") == datetime.datetime(2024, 1, 15)
    assert resolver.resolve("Jan 15, 2024 standup") == datetime.datetime(2024, 1, 15)


@pytest.mark.parametrize("raw", [None, "", "   ", "someday", "13/45/24"])
def test_resolver_returns_none_when_nothing_matches(raw):
    assert DateResolver().resolve(raw) is None


def test_resolve_date_truncates_to_calendar_day():
    assert DateResolver().resolve_date("2024-01-15T23:59:00") == datetime.date(2024, 1, 15)


def test_grammar_order_is_configurable():
    resolver = DateResolver([MMDDYY])
    assert resolver.resolve("2024-01-15") is None
    assert resolver.resolve("01/15/24") == datetime.datetime(2024, 1, 15)


def test_date_grammar_is_abstract():
    with pytest.raises(TypeError):
        DateGrammar()
