import typing

import click

from timeview.common import TimeEntry
from timeview.model.text import NoiseFilter, NoisePhrase
from timeview.sources import Document, SourceRegistry


class TimeviewContext:

    def __init__(self, config: typing.Mapping = None):
        self._config = config or {}
        self._noise = NoiseFilter().extend(self.extra_noise)
        self._sources = SourceRegistry(noise=self._noise)

    @property
    def extra_noise(self) -> typing.List[NoisePhrase]:
        phrases = []
        for item in self._config.get('noise') or []:
            if isinstance(item, str):
                phrases.append(NoisePhrase(item, ''))
            else:
                phrases.append(NoisePhrase(item['text'], item.get('locale', '')))
        return phrases

    @property
    def workers(self) -> int:
        return int(self._config.get('workers', 4))

    @property
    def noise(self) -> NoiseFilter:
        return self._noise

    @property
    def sources(self) -> SourceRegistry:
        return self._sources

    def load(self, paths: typing.Iterable[str]) -> typing.List[TimeEntry]:
        documents = []
        for path in paths:
            if self._sources.parser_for(path) is None:
                click.echo(f'skipping {path}: unsupported file type, expected one of '
                           f'{", ".join(self._sources.extensions)}', err=True)
                continue
            with open(path, 'r', encoding='utf-8-sig') as f:
                documents.append(Document(path, f.read()))
        return self._sources.parse_documents(documents, max_workers=self.workers)


pass_timeview = click.make_pass_decorator(TimeviewContext, ensure=True)
