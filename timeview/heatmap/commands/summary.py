import os
import typing

import click
from openpyxl.workbook import Workbook

from timeview.context import pass_timeview, TimeviewContext
from timeview.model.excel import EntriesSheet, HeatmapSheet
from timeview.model.heatmap import DailyIntensity, EntryFilter, expand_occurrences, latest_year


@click.argument('files', nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option('--keyword', '-k', help='Keep entries whose title, note, category or tags contain this text', default='')
@click.option('--min-duration', help='Minimum entry duration in hours', type=click.FloatRange(min=0), default=0)
@click.option('--max-duration', help='Maximum entry duration in hours', type=click.FloatRange(min=0), default=24)
@click.option('--year', '-y', help='Year in YYYY format, defaults to the latest year found', type=int, default=None)
@click.option('--output', '-o',
              help='Heatmap workbook path',
              required=True,
              default='reports/heatmap.xlsx',
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@click.command()
@pass_timeview
def summary(timeview: TimeviewContext, files: typing.Tuple[str, ...], keyword: str,
            min_duration: float, max_duration: float, year: int, output: str):
    if not files:
        raise click.UsageError('provide at least one .csv, .json or .ics file')
    try:
        entry_filter = EntryFilter(keyword, min_duration, max_duration)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--min-duration/--max-duration')

    loaded = timeview.load(files)
    year = year or latest_year(loaded)
    if year is None:
        click.echo('no entries found, nothing to summarize')
        return
    entries = [entry for entry in entry_filter.apply(loaded) if entry.date.year == year]

    intensity = DailyIntensity(year)
    intensity.extend(expand_occurrences(entries))

    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    workbook = Workbook()
    HeatmapSheet(workbook.active, intensity)
    EntriesSheet(workbook.create_sheet(), entries)
    workbook.save(output)

    click.echo(f'year:         {year}\n'
               f'entries:      {len(entries)}\n'
               f'occurrences:  {intensity.total}\n'
               f'active days:  {intensity.active_days}')
