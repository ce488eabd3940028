import abc
import datetime
import logging
import re
import typing

import dateutil.parser

log = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


def expand_year(year: int) -> int:
    """Two-digit years below 50 land in the 2000s, the rest in the 1900s."""
    if year < 100:
        return year + (2000 if year < 50 else 1900)
    return year


def to_24h(hour: int, marker: typing.Optional[str]) -> int:
    if marker:
        marker = marker.upper()
        if marker == 'PM' and hour < 12:
            return hour + 12
        if marker == 'AM' and hour == 12:
            return 0
    return hour


class DateGrammar(abc.ABC):

    name = ''

    @abc.abstractmethod
    def try_parse(self, text: str) -> typing.Optional[datetime.datetime]:
        return None

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.name}>'


class _CenturyParserInfo(dateutil.parser.parserinfo):

    def convertyear(self, year, century_specified=False):
        if not century_specified:
            return expand_year(year)
        return year


class GenericDateGrammar(DateGrammar):
    """
    Free-form parsing through dateutil.

    Only complete dates are accepted: the text is parsed against two
    different default dates and rejected when the results disagree, which
    means year, month or day was missing from the input.
    """

    name = 'generic'

    _defaults = (datetime.datetime(2000, 1, 1), datetime.datetime(2001, 2, 2))

    def __init__(self):
        self._parserinfo = _CenturyParserInfo()

    def try_parse(self, text):
        try:
            first, second = (dateutil.parser.parse(text, parserinfo=self._parserinfo, default=default)
                             for default in self._defaults)
        except (ValueError, OverflowError):
            return None
        if first != second:
            return None
        return first


class RegexDateGrammar(DateGrammar):
    """Regex anchored at the start of the text with explicitly bound fields."""

    def __init__(self, name, pattern, fields: typing.Sequence[str], two_digit_year=False):
        self.name = name
        self._regex = re.compile(pattern, re.IGNORECASE)
        self._fields = fields
        self._two_digit_year = two_digit_year

    def try_parse(self, text):
        match = self._regex.match(text)
        if not match:
            return None
        values = dict(zip(self._fields, match.groups()))
        try:
            return self.build(values)
        except ValueError as e:
            log.debug(f'{self.name} matched {text!r} but built no valid date: {e}')
            return None

    def build(self, values: typing.Mapping[str, str]) -> datetime.datetime:
        year = int(values['year'])
        if self._two_digit_year:
            year = expand_year(year)
        month = values['month']
        month = MONTH_ABBREVIATIONS[month.lower()] if month.isalpha() else int(month)
        hour = to_24h(int(values.get('hour') or 0), values.get('marker'))
        return datetime.datetime(year, month, int(values['day']), hour, int(values.get('minute') or 0))


class DateResolver:
    """
    Turns loosely formatted date strings into datetimes.

    Grammars are tried in order and the first success wins. The returned
    value keeps its time of day; callers building a time entry keep the
    calendar day only.
    """

    def __init__(self, grammars: typing.Sequence[DateGrammar] = None):
        self._grammars = list(grammars) if grammars is not None else default_grammars()

    @property
    def grammars(self) -> typing.List[DateGrammar]:
        return self._grammars

    def resolve(self, raw) -> typing.Optional[datetime.datetime]:
        if raw is None:
            return None
        text = str(raw).strip()
        if not text:
            return None
        for grammar in self._grammars:
            result = grammar.try_parse(text)
            if result is not None:
                return result
        log.debug(f'no date grammar matched {text!r}')
        return None

    def resolve_date(self, raw) -> typing.Optional[datetime.date]:
        result = self.resolve(raw)
        return result.date() if result is not None else None


_END = r'(?:\s|$)'

MMDDYY = RegexDateGrammar('MM/DD/YY', r'(\d{1,2})/(\d{1,2})/(\d{2})' + _END,
                          ('month', 'day', 'year'), two_digit_year=True)


def default_grammars() -> typing.List[DateGrammar]:
    return [
        GenericDateGrammar(),
        MMDDYY,
        RegexDateGrammar('YYYY/MM/DD', r'(\d{4})/(\d{1,2})/(\d{1,2})' + _END, ('year', 'month', 'day')),
        RegexDateGrammar('DD-MM-YYYY', r'(\d{1,2})-(\d{1,2})-(\d{4})' + _END, ('day', 'month', 'year')),
        RegexDateGrammar('YYYY-MM-DD', r'(\d{4})-(\d{1,2})-(\d{1,2})' + _END, ('year', 'month', 'day')),
        RegexDateGrammar('DD.MM.YYYY', r'(\d{1,2})\.(\d{1,2})\.(\d{4})' + _END, ('day', 'month', 'year')),
        RegexDateGrammar('Mon DD, YYYY', r'(' + '|'.join(MONTH_ABBREVIATIONS) + r')\s+(\d{1,2}),?\s+(\d{4})' + _END,
                         ('month', 'day', 'year')),
        RegexDateGrammar('MM/DD/YY HH:MM', r'(\d{1,2})/(\d{1,2})/(\d{2})\s+(\d{1,2}):(\d{2})\s*(AM|PM)?',
                         ('month', 'day', 'year', 'hour', 'minute', 'marker'), two_digit_year=True),
        RegexDateGrammar('YYYY/MM/DD HH:MM', r'(\d{4})/(\d{1,2})/(\d{1,2})\s+(\d{1,2}):(\d{2})',
                         ('year', 'month', 'day', 'hour', 'minute')),
    ]
