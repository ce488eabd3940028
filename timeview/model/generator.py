import datetime
import logging
import math
import random
import typing

from timeview.sources.timesheet import START_DATE, END_DATE, DURATION, TITLE, NOTES

log = logging.getLogger(__name__)

HEADER = [START_DATE, END_DATE, DURATION, TITLE, NOTES]
DEFAULT_SIZES = (3000, 6000)
DEFAULT_START = datetime.date(2024, 1, 1)
ROWS_PER_DAY = 8

ACTIVITIES = (
    '睡眠', '深度睡眠', '午休',
    '工作', '编程', '开会', '写文档',
    '运动', '跑步', '游泳', '健身',
    '阅读', '学习', '看视频',
    '冥想', '休息', '散步',
)
TAGS = ('[#重要]', '[#日常]', '[#健康]', '[#工作]', '[#生活]', '')
NOTES_POOL = ('感觉不错', '需要改进', '继续保持', '有点累', '效率很高', '状态一般', '')


def format_timestamp(value: datetime.datetime) -> str:
    """US-style "M/D/YYYY HH:MM", as calendar exports write it."""
    return f'{value.month}/{value.day}/{value.year} {value.hour:02d}:{value.minute:02d}'


class TimesheetGenerator:
    """
    Synthetic timesheet rows for load testing the importers.

    Rows advance one calendar day every eight records; each one starts at a
    random minute of its day and lasts 0.5 to 12 hours in 0.1 h steps.
    Pass a seed to get the same file twice.
    """

    def __init__(self, start_date: datetime.date = DEFAULT_START, seed: int = None):
        self._start_date = start_date
        self._random = random.Random(seed)

    def duration(self) -> float:
        return round(self._random.random() * 11.5 + 0.5, 1)

    def title(self) -> str:
        return f'{self._random.choice(TAGS)} {self._random.choice(ACTIVITIES)}'.strip()

    def note(self) -> str:
        return self._random.choice(NOTES_POOL)

    def row(self, index: int) -> typing.List[str]:
        day = self._start_date + datetime.timedelta(days=index // ROWS_PER_DAY)
        start = datetime.datetime(day.year, day.month, day.day,
                                  self._random.randrange(24), self._random.randrange(60))
        duration = self.duration()
        fraction, whole = math.modf(duration)
        end = start + datetime.timedelta(hours=whole, minutes=round(fraction * 60))
        return [format_timestamp(start), format_timestamp(end), f'{duration:g}', self.title(), self.note()]

    def rows(self, count: int) -> typing.Iterator[typing.List[str]]:
        log.debug(f'generating {count} rows from {self._start_date}')
        for index in range(count):
            yield self.row(index)
