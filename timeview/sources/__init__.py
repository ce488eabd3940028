import logging
import os
import typing
from concurrent.futures import ThreadPoolExecutor

from timeview.common import TimeEntry
from timeview.model.dates import DateResolver
from timeview.model.text import NoiseFilter
from timeview.sources.base import SourceParser
from timeview.sources.export import JsonExportParser
from timeview.sources.ical import IcsCalendarParser
from timeview.sources.timesheet import TimesheetCsvParser

log = logging.getLogger(__name__)

PARSER_TYPES = (TimesheetCsvParser, JsonExportParser, IcsCalendarParser)


class Document(typing.NamedTuple):
    name: str
    text: str


class SourceRegistry:
    """Routes documents to a parser by file extension."""

    def __init__(self, noise: NoiseFilter = None, dates: DateResolver = None):
        dates = dates or DateResolver()
        self._parsers: typing.Dict[str, SourceParser] = {}
        for parser_type in PARSER_TYPES:
            parser = parser_type(dates=dates, noise=noise)
            for extension in parser_type.extensions:
                self._parsers[extension] = parser

    @property
    def extensions(self) -> typing.List[str]:
        return sorted(self._parsers)

    def parser_for(self, filename: str) -> typing.Optional[SourceParser]:
        extension = os.path.splitext(filename)[1].lower()
        return self._parsers.get(extension)

    def parse_document(self, name: str, text: str) -> typing.List[TimeEntry]:
        parser = self.parser_for(name)
        if parser is None:
            log.debug(f'{name}: no parser for this extension')
            return []
        entries = parser.parse(text)
        log.info(f'{name}: {len(entries)} entries')
        return entries

    def parse_documents(self, documents: typing.Iterable[Document], max_workers: int = 4) -> typing.List[TimeEntry]:
        """
        Parses documents concurrently and concatenates their entries in submission order.
        A document whose parse fails is logged and contributes nothing.
        """
        documents = list(documents)
        if not documents:
            return []
        entries = []
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(documents)))) as executor:
            futures = [(document.name, executor.submit(self.parse_document, document.name, document.text))
                       for document in documents]
            for name, future in futures:
                try:
                    entries.extend(future.result())
                except Exception as e:
                    log.error(f'{name}: import failed: {e}', exc_info=True)
        return entries


_default_registry = SourceRegistry()


def parser_for(filename: str) -> typing.Optional[SourceParser]:
    return _default_registry.parser_for(filename)


def parse_document(name: str, text: str) -> typing.List[TimeEntry]:
    return _default_registry.parse_document(name, text)


def parse_documents(documents: typing.Iterable[Document], max_workers: int = 4) -> typing.List[TimeEntry]:
    return _default_registry.parse_documents(documents, max_workers=max_workers)
