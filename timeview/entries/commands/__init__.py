import click
from .export import export
from .generate import generate


@click.group()
def entries():
    pass


entries.add_command(export)
entries.add_command(generate)
