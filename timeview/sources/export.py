import json
import logging
import typing

from timeview.common import TimeEntry, UNTITLED
from timeview.model.dates import MMDDYY
from timeview.sources.base import SourceParser, ROW_ERRORS

log = logging.getLogger(__name__)

# canonical field -> source keys, in precedence order
FIELD_ALIASES = {
    'title': ('title', 'name', 'summary'),
    'note': ('note', 'notes', 'description', 'desc'),
    'category': ('category', 'type'),
    'date': ('date', 'startDate', 'start_date'),
    'end': ('endDate', 'end_date'),
}


class ExportItem:

    def __init__(self, item: typing.Mapping[str, typing.Any], aliases=None):
        self._item = item
        self._aliases = aliases or FIELD_ALIASES

    def lookup(self, field: str):
        for key in self._aliases[field]:
            value = self._item.get(key)
            if value:
                return value
        return None

    def text(self, field: str) -> str:
        value = self.lookup(field)
        return str(value) if value is not None else ''

    @property
    def title(self) -> str:
        return self.text('title')

    @property
    def note(self) -> str:
        return self.text('note')

    @property
    def category(self) -> str:
        return self.text('category')

    @property
    def date(self) -> str:
        value = self.lookup('date')
        return value if isinstance(value, str) else ''

    @property
    def end(self) -> str:
        value = self.lookup('end')
        return value if isinstance(value, str) else ''

    @property
    def duration(self):
        return self._item.get('duration') or None

    @property
    def tags(self) -> typing.Tuple[str, ...]:
        tags = self._item.get('tags')
        if isinstance(tags, list):
            return tuple(str(tag) for tag in tags)
        if isinstance(tags, str):
            return tuple(tag.strip() for tag in tags.split(',') if tag.strip())
        return ()


class EntryDeduplicator:
    """
    Merges entries sharing a key.

    A later entry replaces the stored one only when its note is non-empty
    and strictly longer; output keeps the order keys were first seen in.
    """

    def __init__(self):
        self._entries: typing.Dict[str, TimeEntry] = {}

    def add(self, entry: TimeEntry, key: str = None):
        key = key if key is not None else entry.key
        existing = self._entries.get(key)
        if existing is None or (entry.note and len(entry.note) > len(existing.note)):
            self._entries[key] = entry

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def entries(self) -> typing.List[TimeEntry]:
        return list(self._entries.values())


class JsonExportParser(SourceParser):
    """
    JSON arrays of loosely typed objects, as exported by assorted trackers.

    Anything that is not a JSON array yields no entries. Durations are
    floored to one hour and default to one hour when absent.
    """

    extensions = ('.json',)
    min_duration = 1.0

    def parse(self, text: str) -> typing.List[TimeEntry]:
        try:
            data = json.loads(text)
        except ValueError as e:
            log.warning(f'unreadable JSON: {e}')
            return []
        if not isinstance(data, list):
            log.warning(f'expected a JSON array, got {type(data).__name__}')
            return []

        deduplicator = EntryDeduplicator()
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                log.debug(f'item {index}: not an object')
                continue
            item = ExportItem(item)
            if self._noise.matches(item.title, item.note):
                log.debug(f'item {index}: skipping boilerplate')
                continue
            try:
                entry = self.parse_item(item)
            except ROW_ERRORS as e:
                log.warning(f'item {index}: skipped ({e})')
                continue
            if entry is None:
                log.debug(f'item {index}: invalid date {item.date!r}')
                continue
            deduplicator.add(entry, key=f'{entry.date.isoformat()}_{item.title}')
        return deduplicator.entries()

    def parse_item(self, item: ExportItem) -> typing.Optional[TimeEntry]:
        start = MMDDYY.try_parse(item.date) or self._dates.resolve(item.date)
        if start is None:
            return None
        hours = self._durations.resolve(item.duration, start_raw=item.date, end_raw=item.end)
        return TimeEntry(date=start.date(),
                         duration=self.floor(hours),
                         title=item.title or UNTITLED,
                         note=item.note,
                         category=item.category,
                         tags=item.tags)
