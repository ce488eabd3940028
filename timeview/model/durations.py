import datetime
import logging
import math
import re
import typing

from timeview.model.dates import DateResolver

log = logging.getLogger(__name__)

# "<N>小时[<M>分钟]", i.e. "N hours [M minutes]"
HOURS_PHRASE = re.compile(r'(\d+)小时\s*(?:(\d+)分钟?)?')


def parse_hours_phrase(text) -> typing.Optional[float]:
    if not isinstance(text, str):
        return None
    match = HOURS_PHRASE.search(text)
    if not match:
        return None
    return int(match.group(1)) + int(match.group(2) or 0) / 60


def parse_plain_float(text: str) -> typing.Optional[float]:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def elapsed_hours(start: datetime.datetime, end: datetime.datetime) -> float:
    """Hours from start to end; when only one side carries an offset both are compared as wall-clock times."""
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
    return (end - start).total_seconds() / 3600


class DurationResolver:
    """
    Derives elapsed hours for a record, most reliable signal first:
    an explicit number, a numeric string, a "N小时M分钟" phrase in the
    explicit value or the title, and finally the start/end difference.

    Returns 0.0 when nothing resolves; each source format applies its own floor.
    """

    def __init__(self, dates: DateResolver = None):
        self._dates = dates or DateResolver()

    def resolve(self, explicit=None, start_raw=None, end_raw=None, title_raw=None) -> float:
        if isinstance(explicit, (int, float)) and not isinstance(explicit, bool) and math.isfinite(explicit):
            return float(explicit)
        if isinstance(explicit, str):
            value = parse_plain_float(explicit)
            if value is not None:
                return value
        for text in (explicit, title_raw):
            value = parse_hours_phrase(text)
            if value is not None:
                return value
        if start_raw and end_raw:
            start = self._dates.resolve(start_raw)
            end = self._dates.resolve(end_raw)
            if start is not None and end is not None:
                return elapsed_hours(start, end)
        return 0.0
