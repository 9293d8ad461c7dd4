"""NJSON CLI — entry point.

Commands:
    njson check <file>...            Parse files and report errors
    njson fmt   <file>               Re-render a file canonically
    njson show  <file> [--path a.b]  Display the value tree
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .config import settings
from .document import dump, dumps, load
from .errors import NJsonError
from .mapping.paths import get_by_path, split_path
from .values import kind_of

console = Console()
err_console = Console(stderr=True)


# ── Helpers ─────────────────────────────────────────────────────────────────


def _fail(file: Path, exc: Exception) -> None:
    err_console.print(f"[red]FAIL[/red] {escape(str(file))}: {escape(str(exc))}")


def _summary(tree: object) -> str:
    size = len(tree)  # type: ignore[arg-type]
    return f"{kind_of(tree)}, {size} top-level entr{'ies' if size != 1 else 'y'}"


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="njson")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Inspect and reformat NJSON documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(files: tuple[Path, ...]) -> None:
    """Parse each file and report the first error in each.

    Exits with status 1 if any file fails to parse.

    \b
    Examples:
      njson check save.njson
      njson check data/*.njson
    """
    failed = 0
    for file in files:
        try:
            tree = load(file)
        except NJsonError as exc:
            _fail(file, exc)
            failed += 1
            continue
        console.print(f"[green]OK[/green]   {escape(str(file))} [dim]({_summary(tree)})[/dim]")

    if failed:
        err_console.print(f"[red]{failed} of {len(files)} file{'s' if len(files) != 1 else ''} failed[/red]")
        sys.exit(1)


# ── fmt ──────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--indent", "-i", default=None, type=click.IntRange(min=0),
              help="Spaces per level (0 = single line). Defaults to NJSON_INDENT.")
@click.option("--write", "-w", "in_place", is_flag=True, help="Rewrite the file instead of printing.")
def fmt(file: Path, indent: int | None, in_place: bool) -> None:
    """Re-render a file in canonical form (comments are dropped).

    \b
    Examples:
      njson fmt save.njson
      njson fmt save.njson --indent 0
      njson fmt save.njson --write
    """
    try:
        tree = load(file)
    except NJsonError as exc:
        _fail(file, exc)
        sys.exit(1)

    if in_place:
        dump(tree, file, indent=indent)
        err_console.print(f"[dim]Formatted {escape(str(file))}[/dim]")
    else:
        click.echo(dumps(tree, indent=indent), nl=False)


# ── show ─────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--path", "-p", "dotted", default="", help="Dotted path of the value to show (e.g. stats.level).")
@click.option("--cache/--no-cache", default=False, help="Serve the parsed tree from Redis when unchanged.",
              show_default=True)
def show(file: Path, dotted: str, cache: bool) -> None:
    """Display a document as a tree annotated with value kinds.

    \b
    Examples:
      njson show save.njson
      njson show save.njson --path player.stats
    """
    from .visualization.tree import print_value_tree

    try:
        segments = split_path(dotted) if dotted else None
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--path") from exc

    try:
        if cache:
            from .cache.redis_cache import DocumentCache

            tree = DocumentCache(url=settings.redis_url, ttl=settings.cache_ttl).load(file)
        else:
            tree = load(file)

        value = tree
        if segments:
            if not isinstance(tree, dict):
                err_console.print("[red]--path needs a document whose root is a map[/red]")
                sys.exit(1)
            value = get_by_path(tree, segments)
    except NJsonError as exc:
        _fail(file, exc)
        sys.exit(1)
    except KeyError:
        err_console.print(f"[yellow]No value at path {escape(dotted)!r}[/yellow]")
        sys.exit(1)

    print_value_tree(value, label=dotted or file.name, console=console)


if __name__ == "__main__":
    main()
