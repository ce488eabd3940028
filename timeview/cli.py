import logging
import os

import click
from yaml import load
try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from timeview.context import TimeviewContext
from timeview.entries.commands import entries
from timeview.heatmap.commands import heatmap

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s'


@click.group(context_settings={'auto_envvar_prefix': 'TIMEVIEW'})
@click.option('--config', default='config.yaml', type=click.Path(), help='YAML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def entry_point(ctx, config, verbose):
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if verbose else logging.WARNING)
    settings = {}
    if os.path.exists(config):
        with open(config, 'r', encoding='utf-8') as f:
            settings = load(f.read(), Loader=Loader) or {}
        ctx.default_map = settings
    ctx.obj = TimeviewContext(settings)


entry_point.add_command(entries)
entry_point.add_command(heatmap)


if __name__ == '__main__':
    entry_point()
