import csv
import io
import logging
import typing

from timeview.common import TimeEntry, UNTITLED
from timeview.model.text import extract_tags
from timeview.sources.base import SourceParser, ROW_ERRORS

log = logging.getLogger(__name__)

START_DATE = 'Start date'
END_DATE = 'End date'
DURATION = 'Duration'
TITLE = 'Title'
NOTES = 'Notes'

_SURPLUS = '__surplus__'


class TimesheetRow:

    def __init__(self, row: typing.Mapping[str, str], number: int = 0):
        self._row = row
        self.number = number

    @property
    def raw(self) -> typing.Mapping[str, str]:
        return self._row

    @property
    def start_date(self) -> str:
        return self._row.get(START_DATE, '')

    @property
    def end_date(self) -> str:
        return self._row.get(END_DATE, '')

    @property
    def duration(self) -> str:
        return self._row.get(DURATION, '')

    @property
    def title(self) -> str:
        return self._row.get(TITLE, '')

    @property
    def notes(self) -> str:
        return self._row.get(NOTES, '')

    @property
    def values(self) -> typing.List[str]:
        return list(self._row.values())

    def is_blank(self) -> bool:
        return not any(self.values)


def read_rows(text: str) -> typing.Iterator[TimesheetRow]:
    """Yields data rows; a line the csv module rejects is logged and skipped."""
    reader = csv.reader(io.StringIO(text))
    header = None
    while True:
        try:
            cells = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            log.warning(f'row {reader.line_num}: unreadable ({e})')
            continue
        cells = [cell.strip() for cell in cells]
        if header is None:
            header = cells
            continue
        row = dict(zip(header, cells))
        for position, cell in enumerate(cells[len(header):]):
            row[f'{_SURPLUS}{position}'] = cell
        yield TimesheetRow(row, reader.line_num)


class TimesheetCsvParser(SourceParser):
    """
    Calendar/timesheet CSV exports with a "Start date,End date,Duration,Title,Notes" header.

    Zero-length activities still count: durations are floored to 0.1 h.
    """

    extensions = ('.csv',)
    min_duration = 0.1

    def parse(self, text: str) -> typing.List[TimeEntry]:
        entries = []
        for row in read_rows(text):
            number = row.number
            if row.is_blank() or not row.start_date:
                continue
            if self._noise.matches(*row.values):
                log.debug(f'row {number}: skipping boilerplate')
                continue
            try:
                entry = self.parse_row(row)
            except ROW_ERRORS as e:
                log.warning(f'row {number}: skipped ({e})')
                continue
            if entry is None:
                log.debug(f'row {number}: unparseable start date {row.start_date!r}')
                continue
            entries.append(entry)
        return entries

    def parse_row(self, row: TimesheetRow) -> typing.Optional[TimeEntry]:
        date = self._dates.resolve_date(row.start_date)
        if date is None:
            return None
        hours = self._durations.resolve(row.duration,
                                        start_raw=row.start_date,
                                        end_raw=row.end_date,
                                        title_raw=row.title)
        clean = extract_tags(row.title)
        return TimeEntry(date=date,
                         duration=self.floor(hours),
                         title=clean.title or UNTITLED,
                         note=row.notes,
                         category=clean.category,
                         tags=clean.tags)
