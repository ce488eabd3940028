import calendar
import csv
import datetime
import typing
from dataclasses import dataclass

UNTITLED = 'Untitled Event'


def end_of_year(year: int) -> datetime.date:
    return datetime.date(year, 12, calendar.monthrange(year, 12)[1])


class DaysRange:

    def __init__(self, start_date, end_date):
        if start_date > end_date:
            raise ValueError(f'start date ({start_date.strftime("%Y-%m-%d")}) '
                             f'is after end date ({end_date.strftime("%Y-%m-%d")}')
        self._start = start_date
        self._end = end_date

    def __iter__(self):
        delta = self._end - self._start
        for i in range(delta.days + 1):
            yield self._start + datetime.timedelta(days=i)

    def __contains__(self, date: datetime.date):
        return self._start <= date <= self._end

    @classmethod
    def whole_year(cls, year: int):
        return cls(datetime.date(year, 1, 1), end_of_year(year))


@dataclass(frozen=True)
class TimeEntry:
    date: datetime.date
    duration: float
    title: str
    note: str = ''
    category: str = ''
    tags: typing.Tuple[str, ...] = ()

    def __post_init__(self):
        if isinstance(self.date, datetime.datetime):
            object.__setattr__(self, 'date', self.date.date())
        if not self.duration > 0:
            raise ValueError(f'duration must be positive, got {self.duration}')
        if not self.title:
            raise ValueError('title cannot be empty')
        object.__setattr__(self, 'tags', tuple(self.tags))

    @property
    def key(self) -> str:
        return f'{self.date.isoformat()}_{self.title}'


class CsvWriter:

    def __init__(self, filepath, header=None):
        self._filepath = filepath
        self._header = header

    def __enter__(self):
        self._file = open(self._filepath, 'w+', newline='', encoding='utf-8')
        self._writer = csv.writer(self._file)
        if self._header:
            self._writer.writerow(self._header)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._file.close()

    def write(self, row: list[str]):
        self._writer.writerow(row)


class TimeEntryCsvWriter(CsvWriter):

    def __init__(self, filepath):
        super().__init__(filepath, header=[
            'date',
            'duration',
            'title',
            'note',
            'category',
            'tags'
        ])

    def write_entry(self, entry: TimeEntry):
        self.write([
            entry.date.strftime("%Y-%m-%d"),
            f"{float(f'{entry.duration:.2f}'):g}",
            entry.title,
            entry.note,
            entry.category,
            '; '.join(entry.tags)
        ])
