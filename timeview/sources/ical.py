import datetime
import enum
import logging
import re
import typing

from timeview.common import TimeEntry
from timeview.model.durations import elapsed_hours
from timeview.sources.base import SourceParser, ROW_ERRORS

log = logging.getLogger(__name__)

# Zones that get a fixed +08:00 offset; untagged values are read as +08:00 as well
FIXED_OFFSET_ZONES = ('Shanghai', 'Taipei')
FIXED_OFFSET = datetime.timezone(datetime.timedelta(hours=8))

_LINE_BREAK = re.compile(r'\r\n|\r|\n')
_COMPACT_DATE = re.compile(r'^(\d{4})(\d{2})(\d{2})(?:T(\d{2})(\d{2})(\d{2})?Z?)?$')
_DURATION_PART = re.compile(r'(\d+)([DHMS])')
_DURATION_UNITS = {'D': 24.0, 'H': 1.0, 'M': 1 / 60, 'S': 1 / 3600}
_SUMMARY_ESCAPES = re.compile(r'\\([\\,;])')
_DESCRIPTION_ESCAPES = re.compile(r'\\([\\,;nN])')


def unfold(text: str) -> typing.List[str]:
    """Joins continuation lines (leading space or tab) onto the previous line."""
    lines = []
    for line in _LINE_BREAK.split(text):
        if line[:1] in (' ', '\t') and lines:
            lines[-1] += line[1:]
        else:
            lines.append(line)
    return lines


def unescape(value: str, pattern=_DESCRIPTION_ESCAPES) -> str:
    return pattern.sub(lambda m: '\n' if m.group(1) in 'nN' else m.group(1), value)


def parse_duration(value: str) -> float:
    """Sums the D/H/M/S components of an ISO 8601 duration such as "PT1H30M"."""
    hours = 0.0
    for amount, unit in _DURATION_PART.findall(value.upper()):
        hours += int(amount) * _DURATION_UNITS[unit]
    return hours


class Property(typing.NamedTuple):
    name: str
    params: typing.Dict[str, str]
    value: str

    @classmethod
    def parse(cls, line: str) -> typing.Optional['Property']:
        head, separator, value = line.partition(':')
        if not separator:
            return None
        name, *params = head.split(';')
        return cls(name.strip().upper(),
                   dict(param.partition('=')[::2] for param in params),
                   value.strip())

    @property
    def tzid(self) -> str:
        return self.params.get('TZID', '')


class State(enum.Enum):
    OUTSIDE_EVENT = 'outside'
    IN_EVENT = 'in_event'


class EventRecord:

    def __init__(self):
        self.start: typing.Optional[datetime.datetime] = None
        self.pending_end: typing.Optional[datetime.datetime] = None
        self.duration: typing.Optional[float] = None
        self.title = ''
        self.note = ''
        self.category = ''
        self.tags: typing.Tuple[str, ...] = ()

    def is_complete(self) -> bool:
        return self.start is not None and bool(self.title)


class IcsCalendarParser(SourceParser):
    """
    iCalendar files, one time entry per VEVENT.

    Timezones follow a fixed policy instead of a zone database: Shanghai and
    Taipei zones as well as untagged values are read at +08:00, other TZIDs
    as naive local time. DTEND and DURATION are floored to one hour and an
    event with neither lasts one hour.
    """

    extensions = ('.ics',)
    min_duration = 1.0

    def parse(self, text: str) -> typing.List[TimeEntry]:
        entries = []
        state = State.OUTSIDE_EVENT
        event = None
        # depth of sub-components (VALARM and the like) inside the current event
        nested = 0
        for number, line in enumerate(unfold(text), start=1):
            line = line.strip()
            if line == 'BEGIN:VEVENT':
                state, event, nested = State.IN_EVENT, EventRecord(), 0
                continue
            if state is not State.IN_EVENT:
                continue
            if line.startswith('BEGIN:'):
                nested += 1
                continue
            if nested:
                if line.startswith('END:'):
                    nested -= 1
                continue
            if line == 'END:VEVENT':
                entry = self.close_event(event)
                if entry is not None:
                    entries.append(entry)
                else:
                    log.debug(f'line {number}: dropping event without date or summary')
                state, event = State.OUTSIDE_EVENT, None
                continue
            try:
                prop = Property.parse(line)
                if prop is not None:
                    self.apply(event, prop)
            except ROW_ERRORS as e:
                log.warning(f'line {number}: cannot parse {line!r} ({e})')
        return entries

    def apply(self, event: EventRecord, prop: Property):
        if prop.name == 'DTSTART':
            start = self.decode_datetime(prop)
            if start is not None:
                event.start = start
                if event.pending_end is not None and event.duration is None:
                    self.set_end(event, event.pending_end)
        elif prop.name == 'DTEND':
            if event.duration is not None:
                return
            end = self.decode_datetime(prop)
            if end is None:
                return
            if event.start is None:
                event.pending_end = end
            else:
                self.set_end(event, end)
        elif prop.name == 'DURATION':
            if event.duration is None and event.pending_end is None:
                event.duration = self.floor(parse_duration(prop.value))
        elif prop.name == 'SUMMARY':
            event.title = unescape(prop.value, _SUMMARY_ESCAPES).strip()
        elif prop.name == 'DESCRIPTION':
            event.note = unescape(prop.value).strip()
        elif prop.name == 'CATEGORIES':
            categories = tuple(c.strip() for c in prop.value.split(','))
            event.category = categories[0]
            event.tags = categories

    def set_end(self, event: EventRecord, end: datetime.datetime):
        event.duration = self.floor(elapsed_hours(event.start, end))
        event.pending_end = None

    def decode_datetime(self, prop: Property) -> typing.Optional[datetime.datetime]:
        match = _COMPACT_DATE.match(prop.value)
        if not match:
            return self._dates.resolve(prop.value)
        year, month, day, hour, minute, second = (int(group or 0) for group in match.groups())
        tzinfo = FIXED_OFFSET
        if prop.tzid and not any(zone in prop.tzid for zone in FIXED_OFFSET_ZONES):
            tzinfo = None
        return datetime.datetime(year, month, day, hour, minute, second, tzinfo=tzinfo)

    def close_event(self, event: EventRecord) -> typing.Optional[TimeEntry]:
        if not event.is_complete():
            return None
        return TimeEntry(date=event.start.date(),
                         duration=event.duration or 1.0,
                         title=event.title,
                         note=event.note,
                         category=event.category,
                         tags=event.tags)
