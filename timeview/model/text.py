import re
import typing


class NoisePhrase(typing.NamedTuple):
    text: str
    locale: str


# Instructional and holiday boilerplate that calendar exports mix in with real rows
NOISE_PHRASES = (
    NoisePhrase('如需隐藏节假日', 'zh'),
    NoisePhrase('To hide observances', 'en'),
    NoisePhrase('This is a half-day holiday', 'en'),
    NoisePhrase('这是半天假', 'zh'),
    NoisePhrase('请前往 Google 日历的"设置"', 'zh'),
    NoisePhrase('Go to Google Calendar settings', 'en'),
    NoisePhrase('中国节假日', 'zh'),
    NoisePhrase('Chinese holidays', 'en'),
)

_BRACKETS = re.compile(r'\[(.*?)\]')
_PARENTHESES = re.compile(r'\(.*?\)')
_WHITESPACE = re.compile(r'\s+')


class CleanTitle(typing.NamedTuple):
    title: str
    tags: typing.Tuple[str, ...]

    @property
    def category(self) -> str:
        return self.tags[0] if self.tags else ''


def extract_tags(title: str) -> CleanTitle:
    """
    Strips "[...]" and "(...)" annotations from a title.

    Bracketed segments starting with "#" become tags, e.g.
    "[#work] Standup (daily)" gives title "Standup" and tags ("work",).
    """
    tags = []

    def collect(match):
        content = match.group(1)
        if content.startswith('#'):
            tags.append(content[1:])
        return ''

    title = _BRACKETS.sub(collect, title or '')
    title = _PARENTHESES.sub('', title)
    title = _WHITESPACE.sub(' ', title).strip()
    return CleanTitle(title, tuple(tags))


class NoiseFilter:

    def __init__(self, phrases: typing.Iterable[NoisePhrase] = NOISE_PHRASES):
        self._phrases = tuple(phrases)
        self._needles = tuple(phrase.text.lower() for phrase in self._phrases)

    @property
    def phrases(self) -> typing.Tuple[NoisePhrase, ...]:
        return self._phrases

    def extend(self, phrases: typing.Iterable[NoisePhrase]) -> 'NoiseFilter':
        return NoiseFilter(self._phrases + tuple(phrases))

    def matches(self, *values) -> bool:
        for value in values:
            if value is None:
                continue
            haystack = str(value).lower()
            if any(needle in haystack for needle in self._needles):
                return True
        return False
