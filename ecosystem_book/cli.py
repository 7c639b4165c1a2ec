"""Click CLI with index, closure, show, build, and serve subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from ecosystem_book import __version__
from ecosystem_book.analysis import (
    Index,
    direct_dependencies,
    in_closure_dependents,
    out_of_closure_dependents,
    rank_by_in_closure_reverse_deps,
)
from ecosystem_book.config import find_config, load_config
from ecosystem_book.errors import ConfigError, DecodeError
from ecosystem_book.models import BookConfig
from ecosystem_book.pipeline import run_book, run_closure, run_index

_INDEX_DIR = click.Path(exists=True, file_okay=False, path_type=Path)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log traversal details")
def cli(verbose: bool):
    """ecosystem-book: map a package ecosystem from a registry index."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _make_config(
    index_dir: Path | None,
    seeds: tuple[str, ...] = (),
    respider: bool | None = None,
    output_dir: Path | None = None,
    config_path: Path | None = None,
) -> BookConfig:
    """Defaults, then the config file, then command-line options."""
    config_path = config_path or find_config(Path.cwd())
    try:
        config = load_config(config_path) if config_path else BookConfig()
    except ConfigError as e:
        raise click.ClickException(str(e))

    if index_dir is not None:
        config.index_dir = index_dir
    if seeds:
        config.seeds = list(seeds)
    if respider is not None:
        config.respider_upward = respider
    if output_dir is not None:
        config.output_dir = output_dir
    return config


def _load_index(config: BookConfig, progress=None) -> Index:
    try:
        return run_index(config, progress=progress)
    except (DecodeError, ValueError) as e:
        raise click.ClickException(str(e))


def _seed_option(f):
    return click.option(
        "--seed", "-s", "seeds", multiple=True,
        help="Seed package (repeatable); defaults to the configured seeds",
    )(f)


def _respider_option(f):
    return click.option(
        "--respider/--no-respider", default=None,
        help="Also spider upward from packages pulled in by dependencies",
    )(f)


@cli.command()
@click.argument("index_dir", type=_INDEX_DIR)
def index(index_dir: Path):
    """Build the index and print its size."""
    config = _make_config(index_dir)
    idx = _load_index(config)

    dangling = idx.dangling_names()
    click.echo(f"Packages:          {len(idx.packages)}")
    click.echo(f"Versions:          {idx.version_count}")
    click.echo(f"Reverse dep keys:  {len(idx.reverse_deps)}")
    click.echo(f"Unpublished deps:  {len(dangling)}")
    for name in sorted(dangling):
        click.echo(f"  {click.style(name, fg='yellow')}")


@cli.command()
@click.argument("index_dir", type=_INDEX_DIR)
@_seed_option
@_respider_option
def closure(index_dir: Path, seeds: tuple[str, ...], respider: bool | None):
    """Compute and list the closure of the seed packages."""
    config = _make_config(index_dir, seeds=seeds, respider=respider)
    idx = _load_index(config)
    try:
        result = run_closure(idx, config)
    except ValueError as e:
        raise click.ClickException(str(e))

    ranking = {name: count for count, name in rank_by_in_closure_reverse_deps(result.members, idx)}
    for name in sorted(result.members):
        color = "cyan" if name in result.seed else None
        click.echo(f"  {ranking[name]:>5}  {click.style(name, fg=color)}")
    click.echo()

    click.echo(f"closure size = {len(result.members)}")
    if result.missing_seeds:
        click.echo(f"missing seeds = {', '.join(sorted(result.missing_seeds))}")
    if result.skipped:
        click.echo(f"unpublished members = {', '.join(sorted(result.skipped))}")
    click.echo(f"maybe_respider = {sorted(result.maybe_respider)}")


@cli.command()
@click.argument("index_dir", type=_INDEX_DIR)
@click.argument("name")
@_seed_option
@_respider_option
def show(index_dir: Path, name: str, seeds: tuple[str, ...], respider: bool | None):
    """Show the dependencies and reverse dependencies of one package."""
    config = _make_config(index_dir, seeds=seeds, respider=respider)
    idx = _load_index(config)
    if not idx.has_package(name) and name not in idx.reverse_deps:
        raise click.ClickException(f"Unknown package: {name}")

    try:
        members = run_closure(idx, config).members
    except ValueError as e:
        raise click.ClickException(str(e))
    in_closure = "yes" if name in members else "no"

    click.echo(click.style(name, fg="cyan", bold=True))
    click.echo(f"  versions:   {', '.join(sorted(idx.packages.get(name, {}))) or '(unpublished)'}")
    click.echo(f"  in closure: {in_closure}")

    sections = [
        ("Dependencies", sorted(direct_dependencies(name, idx))),
        ("Reverse dependencies (in closure)", in_closure_dependents(name, members, idx)),
        ("Reverse dependencies (outside closure)", out_of_closure_dependents(name, members, idx)),
    ]
    for title, names in sections:
        click.echo(f"\n{title}: {len(names)}")
        for dep in names:
            click.echo(f"  {dep}")


@cli.command()
@click.argument("index_dir", type=_INDEX_DIR, required=False)
@click.option("-o", "--output", "output_dir", type=click.Path(path_type=Path), help="Output directory")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file")
@_seed_option
@_respider_option
def build(
    index_dir: Path | None,
    output_dir: Path | None,
    config_path: Path | None,
    seeds: tuple[str, ...],
    respider: bool | None,
):
    """Build the index, compute the closure, and write the book."""
    config = _make_config(
        index_dir, seeds=seeds, respider=respider,
        output_dir=output_dir, config_path=config_path,
    )

    def progress(stage: str, current: int, total: int):
        if total > 0:
            click.echo(f"  {stage}: {current}/{total}", nl=(current == total))
        else:
            click.echo(f"  {stage}...")

    click.echo(f"Building {config.title} from {config.index_dir} -> {config.output_dir}\n")

    idx = _load_index(config, progress=progress)
    try:
        closure_result = run_closure(idx, config, progress=progress)
    except ValueError as e:
        raise click.ClickException(str(e))
    result = run_book(idx, closure_result, config, progress=progress)

    click.echo(f"\nDone! {result.closure_size} crates, {len(result.files_created)} file(s) in {result.output_dir}")
    click.echo(f"  summary:  {result.summary_path}")
    click.echo(f"  manifest: {result.manifest_path}")


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the query API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the API server. "
            "Install with: pip install 'ecosystem-book[web]'"
        )

    from ecosystem_book.web import create_app

    click.echo(f"Starting ecosystem-book API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
