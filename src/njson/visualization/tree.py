"""Rich tree rendering of NJSON value trees."""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..parsers.writer import format_scalar
from ..values import kind_of

_console = Console()

_KIND_STYLES = {
    "Int": "cyan",
    "Float": "cyan",
    "Str": "green",
    "Char": "green",
    "Bool": "yellow",
    "Null": "dim",
    "Map": "bold blue",
    "Array": "bold magenta",
}


def _label(name: str, value: object) -> str:
    kind = kind_of(value)
    style = _KIND_STYLES[kind]
    if isinstance(value, (dict, list)):
        detail = f"{len(value)} item{'s' if len(value) != 1 else ''}"
    else:
        detail = escape(format_scalar(value))
    return f"[bold]{escape(name)}[/bold] [{style}]{kind}[/{style}] {detail}"


def _add_children(node: Tree, value: object) -> None:
    if isinstance(value, dict):
        items = [(str(k), v) for k, v in value.items()]
    elif isinstance(value, list):
        items = [(f"[{i}]", v) for i, v in enumerate(value)]
    else:
        return
    for name, child in items:
        branch = node.add(_label(name, child))
        _add_children(branch, child)


def build_tree(value: object, label: str = "$") -> Tree:
    """Build a rich Tree with one node per value, labelled with key/index, kind and scalar text."""
    root = Tree(_label(label, value), guide_style="dim")
    _add_children(root, value)
    return root


def print_value_tree(value: object, label: str = "$", console: Console | None = None) -> None:
    """Print a value tree (see build_tree)."""
    (console or _console).print(build_tree(value, label))
