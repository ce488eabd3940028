import click
from .summary import summary


@click.group()
def heatmap():
    pass


heatmap.add_command(summary)
