"""astnorm CLI — the main entry point for the fixture AST normalizer."""

import json

import click
from rich.console import Console
from rich.markup import escape

from astnorm import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """astnorm — Fluent AST fixture normalizer.

    Rewrites JSON-serialized Fluent ASTs into the compact, diff-friendly
    shape used by parser and serializer fixtures.
    """


def _load_config(config_path: str | None, keep_blank_lines: bool = False):
    import yaml

    from astnorm.config import NormalizeConfig, load_config

    if config_path:
        try:
            config = load_config(config_path)
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            console.print(f"[red]Failed to load config {escape(config_path)}:[/] {escape(str(e))}")
            raise SystemExit(1)
    else:
        config = NormalizeConfig()

    if keep_blank_lines:
        config.keep_blank_lines = True
    return config


# ── Normalize ────────────────────────────────────────────────────────


@main.command()
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "-c", "config_path", default=None, help="YAML config file")
@click.option("--check", is_flag=True, help="Report files that would change without writing them")
@click.option("--keep-blank-lines", is_flag=True, help="Keep blank lines when splitting text")
def normalize(directory: str, config_path: str | None, check: bool, keep_blank_lines: bool):
    """Normalize every JSON fixture in DIRECTORY (default: current directory).

    Stops at the first file that is not valid JSON.
    """
    from astnorm.pipeline import discover_fixtures, normalize_file

    config = _load_config(config_path, keep_blank_lines)
    files = discover_fixtures(directory, config.pattern)

    if not files:
        console.print(f"[yellow]No files matching {escape(config.pattern)} in {escape(directory)}.[/]")
        return

    stale = []
    for path in files:
        try:
            result = normalize_file(path, config, check=check)
        except json.JSONDecodeError as e:
            console.print(f"[red]Failed to parse {escape(path.name)}:[/] {e}")
            raise SystemExit(1)

        if result.written:
            console.print(f'The file "{escape(path.name)}" has been saved!')
        elif result.changed:
            stale.append(path)
            console.print(f"  [red]x[/] {escape(path.name)} is not normalized")

    if check:
        if stale:
            console.print(f"\n[red]FAIL[/] {len(stale)} of {len(files)} file(s) would change")
            raise SystemExit(1)
        console.print(f"[green]OK[/] {len(files)} file(s) already normalized")


# ── Rules ────────────────────────────────────────────────────────────


@main.command()
@click.option("--config", "-c", "config_path", default=None, help="YAML config file")
def rules(config_path: str | None):
    """Print the active type-pruning table as JSON."""
    config = _load_config(config_path)
    console.print_json(json.dumps(config.rules.to_dict()))


if __name__ == "__main__":
    main()
