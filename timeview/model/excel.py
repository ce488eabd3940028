import typing

from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.styles.colors import Color

from timeview.common import TimeEntry
from timeview.model.heatmap import DailyIntensity


class BaseSheet:
    """Titled worksheet with a styled header row and fixed column widths."""

    _title = ''
    _header: typing.Dict[str, str] = {}
    _header_font = Font(color='FF000000', bold=True)
    _header_fill = PatternFill("solid", fgColor=Color(indexed=22))
    _columns_width: typing.Dict[str, int] = {}
    _wrapped = Alignment(wrap_text=True, vertical='top')

    def __init__(self, sheet):
        self._sheet = sheet
        sheet.title = self._title
        for cell, cell_title in self._header.items():
            self.set_value(cell, cell_title, font=self._header_font, fill=self._header_fill)
        for column, width in self._columns_width.items():
            sheet.column_dimensions[column].width = width

    def set_value(self, cell, value, font=None, fill=None, wrap=False):
        self._sheet[cell] = value
        if font:
            self[cell].font = font
        if fill:
            self[cell].fill = fill
        if wrap:
            self[cell].alignment = self._wrapped

    def set_date(self, cell, value):
        self.set_value(cell, value)
        self[cell].number_format = 'yyyy-mm-dd'

    def __setitem__(self, key, value):
        self.set_value(key, value)

    def __getitem__(self, item):
        return self._sheet[item]


class EntriesSheet(BaseSheet):
    _title = 'Entries'

    _header = {
        'A1': 'Date',
        'B1': 'Hours',
        'C1': 'Title',
        'D1': 'Note',
        'E1': 'Category',
        'F1': 'Tags',
    }
    _columns_width = {
        'A': 12,
        'B': 8,
        'C': 40,
        'D': 50,
        'E': 15,
        'F': 30,
    }

    def __init__(self, sheet, entries: typing.Iterable[TimeEntry]):
        super().__init__(sheet)
        for row, entry in enumerate(entries, start=2):
            self.set_date(f'A{row}', entry.date)
            self[f'B{row}'] = round(entry.duration, 2)
            self[f'C{row}'] = entry.title
            self.set_value(f'D{row}', entry.note, wrap=True)
            self[f'E{row}'] = entry.category
            self[f'F{row}'] = ', '.join(entry.tags)


class HeatmapSheet(BaseSheet):
    _title = 'Heatmap'

    _header = {
        'A1': 'Day',
        'B1': 'Occurrences',
        'D1': 'Year',
        'D2': 'Total',
        'D3': 'Active days',
    }
    _columns_width = {
        'A': 12,
        'B': 14,
        'D': 14,
        'E': 10,
    }

    def __init__(self, sheet, intensity: DailyIntensity):
        super().__init__(sheet)
        self['E1'] = intensity.year
        self['E2'] = intensity.total
        self['E3'] = intensity.active_days
        for row, (date, count) in enumerate(intensity.flush(), start=2):
            self.set_date(f'A{row}', date)
            self[f'B{row}'] = count
