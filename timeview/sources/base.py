import abc
import typing

from timeview.common import TimeEntry
from timeview.model.dates import DateResolver
from timeview.model.durations import DurationResolver
from timeview.model.text import NoiseFilter


# Errors a single malformed row or property may raise
ROW_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError, OverflowError)


class SourceParser(abc.ABC):

    extensions: typing.Tuple[str, ...] = ()
    min_duration = 1.0

    def __init__(self, dates: DateResolver = None, noise: NoiseFilter = None):
        self._dates = dates or DateResolver()
        self._durations = DurationResolver(self._dates)
        self._noise = noise or NoiseFilter()

    @abc.abstractmethod
    def parse(self, text: str) -> typing.List[TimeEntry]:
        return []

    def floor(self, hours: float) -> float:
        return max(hours, self.min_duration)
