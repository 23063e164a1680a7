"""
Tree commands for the DataTree CLI.

Every command loads a JSON node list, applies the requested selection or
edit in memory and prints the result. Input files are never written.
"""
import json
from pathlib import Path
from typing import Optional, Tuple

import click

from datatree.constants import (
    DEFAULT_INDENT_WIDTH,
    DEFAULT_LABEL_KEYS,
    ROOT_KEY,
    STATE_MARKERS,
    ConfigManager,
)
from datatree.core import DataTree
from datatree.exceptions import ConfigurationError, DataTreeError
from datatree.managers import DiagnosticEchoListener
from datatree.models.base import ValueMode

VALUE_MODES = {
    "all": None,
    "only-parent": ValueMode.ONLY_PARENT,
    "only-leaf": ValueMode.ONLY_LEAF,
}


def tree_options(func):
    """Options shared by every tree command."""
    func = click.option("-v", "--verbose", is_flag=True, help="Echo ignored operations to stderr.")(func)
    func = click.option("--child-key", help="Field holding child nodes.")(func)
    func = click.option("--pid-key", help="Field holding the parent id.")(func)
    func = click.option("--id-key", help="Field holding the node id.")(func)
    func = click.option(
        "-c", "--config", "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Path to a datatree.json config file.",
    )(func)
    func = click.option("-s", "--select", "selected", multiple=True, help="Node id to check (repeatable).")(func)
    func = click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))(func)
    return func


def read_nodes(path: Path) -> list:
    """Read a JSON node list.

    Raises:
        ConfigurationError: If the file is not JSON or not a list/object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise ConfigurationError(f"Could not read '{path}': {e}")
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ConfigurationError(f"'{path}' must contain a JSON list of nodes.")
    return data


def build_tree(
    file: Path,
    selected: Tuple[str, ...],
    config_path: Optional[Path],
    id_key: Optional[str],
    pid_key: Optional[str],
    child_key: Optional[str],
    verbose: bool,
) -> Tuple[DataTree, ConfigManager]:
    """Load file into a DataTree and apply the selection."""
    config = ConfigManager(config_path=config_path)
    key_mapping = config.get_key_mapping()
    for key, override in (("id", id_key), ("pid", pid_key), ("child", child_key)):
        if override:
            key_mapping[key] = override

    tree = DataTree(key_mapping=key_mapping)
    if verbose:
        tree.subscribe(DiagnosticEchoListener())

    try:
        tree.load(read_nodes(file))
    except DataTreeError as e:
        raise click.ClickException(str(e))

    if selected:
        tree.set_selection([resolve_id(tree, raw) for raw in selected])
    return tree, config


def resolve_id(tree: DataTree, raw: str):
    """Map a command-line id to the id type used in the index.

    JSON ids may be numbers; try the string first, then its integer form.
    """
    if raw in tree.index_relation:
        return raw
    try:
        number = int(raw)
    except ValueError:
        return raw
    return number if number in tree.index_relation else raw


def node_label(content: Optional[dict]) -> str:
    if not content:
        return ""
    for key in DEFAULT_LABEL_KEYS:
        if content.get(key) is not None:
            return str(content[key])
    return ""


def echo_tree(tree: DataTree, indent_width: int) -> None:
    """Print the tree with one state marker per node."""
    lines = []

    def _line(node_id, entry, content, depth):
        if node_id is ROOT_KEY:
            return None
        label = node_label(content)
        indent = " " * (indent_width * (depth - 1))
        marker = STATE_MARKERS[int(entry.state)]
        lines.append(f"{indent}{marker} {node_id}" + (f" {label}" if label else ""))
        return None

    tree.traverse(_line)
    if not lines:
        click.echo("(empty tree)")
        return
    for line in lines:
        click.echo(line)


@click.command()
@tree_options
def show(file, selected, config_path, id_key, pid_key, child_key, verbose):
    """Show the tree in FILE with selection markers."""
    tree, config = build_tree(file, selected, config_path, id_key, pid_key, child_key, verbose)
    echo_tree(tree, config.get_int("indent_width", DEFAULT_INDENT_WIDTH))


@click.command()
@tree_options
@click.option(
    "-m", "--mode",
    type=click.Choice(list(VALUE_MODES)),
    default="all",
    show_default=True,
    help="Which checked ids to print.",
)
def value(file, selected, config_path, id_key, pid_key, child_key, verbose, mode):
    """Print the checked ids of FILE, one per line."""
    tree, _ = build_tree(file, selected, config_path, id_key, pid_key, child_key, verbose)
    for node_id in tree.get_value(VALUE_MODES[mode]):
        click.echo(node_id)


@click.command()
@tree_options
@click.argument("node_id")
@click.argument("target_id", required=False)
def move(file, selected, config_path, id_key, pid_key, child_key, verbose, node_id, target_id):
    """Move NODE_ID under TARGET_ID (top level if omitted) and show the result."""
    tree, config = build_tree(file, selected, config_path, id_key, pid_key, child_key, verbose)
    target = resolve_id(tree, target_id) if target_id is not None else ROOT_KEY
    if not tree.move(resolve_id(tree, node_id), target):
        raise click.ClickException(f"Cannot move '{node_id}' to '{target_id or 'top level'}'.")
    echo_tree(tree, config.get_int("indent_width", DEFAULT_INDENT_WIDTH))


@click.command()
@tree_options
@click.argument("node_id")
def remove(file, selected, config_path, id_key, pid_key, child_key, verbose, node_id):
    """Remove NODE_ID with its subtree and show the result."""
    tree, config = build_tree(file, selected, config_path, id_key, pid_key, child_key, verbose)
    if not tree.remove(resolve_id(tree, node_id)):
        raise click.ClickException(f"Node '{node_id}' not found.")
    echo_tree(tree, config.get_int("indent_width", DEFAULT_INDENT_WIDTH))
