import collections
import datetime
import math
import typing

from timeview.common import DaysRange, TimeEntry


class EntryFilter:

    def __init__(self, keyword: str = '', min_duration: float = 0, max_duration: float = 24):
        if min_duration > max_duration:
            raise ValueError(f'minimum duration ({min_duration}) is above maximum duration ({max_duration})')
        self._keyword = (keyword or '').lower()
        self._min_duration = min_duration
        self._max_duration = max_duration

    def matches_keyword(self, entry: TimeEntry) -> bool:
        if not self._keyword:
            return True
        fields = (entry.title, entry.note, entry.category) + entry.tags
        return any(self._keyword in field.lower() for field in fields)

    def matches_duration(self, entry: TimeEntry) -> bool:
        return self._min_duration <= entry.duration <= self._max_duration

    def __call__(self, entry: TimeEntry) -> bool:
        return self.matches_keyword(entry) and self.matches_duration(entry)

    def apply(self, entries: typing.Iterable[TimeEntry]) -> typing.List[TimeEntry]:
        return [entry for entry in entries if self(entry)]


def expand_occurrences(entries: typing.Iterable[TimeEntry]) -> typing.List[datetime.date]:
    """Each entry counts once per started hour: a 1.5 h entry yields its date twice."""
    occurrences = []
    for entry in entries:
        occurrences.extend([entry.date] * math.ceil(entry.duration))
    return occurrences


def latest_year(entries: typing.Iterable[TimeEntry]) -> typing.Optional[int]:
    return max((entry.date.year for entry in entries), default=None)


class DailyIntensity:

    def __init__(self, year: int):
        self._year = year
        self._range = DaysRange.whole_year(year)
        self._counts = collections.Counter()

    @property
    def year(self) -> int:
        return self._year

    def add(self, date: datetime.date, count: int = 1):
        if date in self._range:
            self._counts[date] += count

    def extend(self, occurrences: typing.Iterable[datetime.date]):
        for date in occurrences:
            self.add(date)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    @property
    def active_days(self) -> int:
        return len(self._counts)

    def __getitem__(self, date: datetime.date) -> int:
        return self._counts.get(date, 0)

    def flush(self) -> typing.Iterable[typing.Tuple[datetime.date, int]]:
        for date in self._range:
            yield date, self[date]
