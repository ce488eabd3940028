import os
import typing

import click

from timeview.common import TimeEntryCsvWriter
from timeview.context import pass_timeview, TimeviewContext


@click.argument('files', nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o',
              help='Output CSV path',
              required=True,
              default='reports/entries.csv',
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@click.command()
@pass_timeview
def export(timeview: TimeviewContext, files: typing.Tuple[str, ...], output: str):
    if not files:
        raise click.UsageError('provide at least one .csv, .json or .ics file')
    entries = timeview.load(files)
    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with TimeEntryCsvWriter(output) as writer:
        for entry in entries:
            writer.write_entry(entry)
    click.echo(f'exported {len(entries)} entries to {output}')
