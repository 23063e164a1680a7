"""
CLI for DataTree.

Loads a JSON node list and inspects or edits it in memory.
"""
import click

from datatree.commands.tree import move, remove, show, value


@click.group()
def cli():
    """Inspect tree-shaped JSON data with tri-state selection."""
    pass


cli.add_command(show)
cli.add_command(value)
cli.add_command(move)
cli.add_command(remove)


if __name__ == '__main__':
    cli()
