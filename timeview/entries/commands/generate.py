import os
import typing

import click

from timeview.common import CsvWriter
from timeview.model.generator import DEFAULT_SIZES, DEFAULT_START, HEADER, TimesheetGenerator


@click.option('--rows', '-n', help='Rows per file, repeat for several files', type=click.IntRange(min=0),
              multiple=True, default=DEFAULT_SIZES)
@click.option('--output', '-o',
              help='Output CSV path, "{rows}" is replaced by the row count',
              required=True,
              default='test-data/timeview_{rows}_rows.csv',
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@click.option('--start-date', help='First day in YYYY-MM-DD format', type=click.DateTime(formats=['%Y-%m-%d']),
              default=DEFAULT_START.isoformat())
@click.option('--seed', help='Random seed for reproducible files', type=int, default=None)
@click.command()
def generate(rows: typing.Tuple[int, ...], output: str, start_date, seed: int):
    """Writes synthetic timesheet CSVs in the calendar export format."""
    paths = [output.replace('{rows}', str(count)) for count in rows]
    if len(set(paths)) != len(paths):
        raise click.BadParameter('use "{rows}" in the path when generating several files', param_hint='--output')
    for count, path in zip(rows, paths):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        generator = TimesheetGenerator(start_date.date(), seed)
        with CsvWriter(path, header=HEADER) as writer:
            for row in generator.rows(count):
                writer.write(row)
        click.echo(f'generated {count} rows in {path}')
