"""Interchange catalog CLI main entry point."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer

from interchange.config import CatalogConfig
from interchange.core.ids import make_id_generator
from interchange.engine.catalog import Catalog
from interchange.engine.ingest import IngestReport, apply_relations
from interchange.storage.csv_store import load_catalog, save_catalog
from interchange.storage.errors import (
    InterchangeStorageError,
    RelationParseError,
    StoreNotFoundError,
    StoreWriteError,
)
from interchange.storage.relations import read_relations

app = typer.Typer(
    name="interchange",
    help="Interchangeable part number catalog",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="TOML file with a [catalog] table"),
]
StoreOption = Annotated[
    Path,
    typer.Option("--store", "-s", help="Store directory to read"),
]


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log progress at INFO level")
    ] = False,
) -> None:
    """Group interchangeable part numbers and track links between groups."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def get_config(path: Path | None, id_scheme: str | None = None) -> CatalogConfig:
    """Load configuration, letting a command-line id scheme win."""
    try:
        config = CatalogConfig.load(path)
    except (OSError, ValueError) as exc:
        _fail(f"Cannot read config {path}: {exc}")
    if id_scheme is not None:
        settings = config.to_dict()
        settings["id_scheme"] = id_scheme
        try:
            config = CatalogConfig(**settings)
        except ValueError as exc:
            _fail(str(exc))
    return config


def open_store(directory: Path, config: CatalogConfig) -> Catalog:
    """Load an existing store, or start empty when there is none."""
    id_generator = make_id_generator(config.id_scheme, config.id_prefix)
    try:
        return load_catalog(directory, config, id_generator)
    except StoreNotFoundError:
        typer.secho(
            f"Existing store not found at {directory}; starting empty",
            fg=typer.colors.YELLOW,
        )
        return Catalog(id_generator)
    except InterchangeStorageError as exc:
        _fail(f"Cannot load store {directory}: {exc}")


def read_store(directory: Path, config: CatalogConfig) -> Catalog:
    """Load a store that must exist."""
    try:
        return load_catalog(directory, config, make_id_generator(config.id_scheme, config.id_prefix))
    except InterchangeStorageError as exc:
        _fail(str(exc))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def ingest(
    first: Annotated[
        Path,
        typer.Argument(help="Relation file, or an existing store when three paths are given"),
    ],
    second: Annotated[
        Path,
        typer.Argument(help="Output store, or the relation file when three paths are given"),
    ],
    third: Annotated[
        Optional[Path],
        typer.Argument(help="Output store when an existing store is given first"),
    ] = None,
    config_path: ConfigOption = None,
    id_scheme: Annotated[
        Optional[str],
        typer.Option("--ids", help="Group id scheme: uuid or counter"),
    ] = None,
) -> None:
    """Apply a relation file to a store.

    Examples:
        interchange ingest relations.csv store/
        interchange ingest old_store/ relations.csv new_store/
    """
    if third is None:
        existing, relations_path, output = second, first, second
    else:
        existing, relations_path, output = first, second, third

    config = get_config(config_path, id_scheme)
    catalog = open_store(existing, config)

    try:
        report = apply_relations(catalog, read_relations(relations_path, config))
    except FileNotFoundError:
        _fail(f"Relation file not found: {relations_path}")
    except RelationParseError as exc:
        _fail(f"Malformed relation file {relations_path}: {exc}")

    try:
        save_catalog(catalog, output, config)
    except StoreWriteError as exc:
        _fail(str(exc))

    _print_report(report, catalog)
    typer.secho("Done", fg=typer.colors.GREEN)


@app.command()
def show(
    part: Annotated[str, typer.Argument(help="Part number to look up")],
    store: StoreOption,
    config_path: ConfigOption = None,
    as_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the group of a part number and the groups it links to."""
    catalog = read_store(store, get_config(config_path))
    group_id = catalog.group_of(part)
    if group_id is None:
        _fail(f"Unknown part number: {part}")

    group = catalog.get_group(group_id)
    if group is None:
        _fail(f"Group {group_id} of {part} is not live")
    data = {
        "part": part,
        "group": group.id,
        "main": group.main,
        "members": sorted(group.members),
        "links_to": sorted(catalog.successors(group_id)),
        "linked_from": sorted(catalog.predecessors(group_id)),
    }

    if as_json:
        typer.echo(json.dumps(data, indent=2))
        return

    typer.secho(f"{part}", bold=True)
    typer.echo(f"  group:   {data['group']}")
    typer.echo(f"  main:    {data['main'] or '-'}")
    typer.echo(f"  members: {', '.join(data['members'])}")
    for label, key in (("links to", "links_to"), ("linked from", "linked_from")):
        for other_id in data[key]:
            other = catalog.get_group(other_id)
            main = other.main if other is not None and other.main else other_id
            typer.echo(f"  {label}: {main} ({other_id})")


@app.command()
def stats(
    store: StoreOption,
    config_path: ConfigOption = None,
    as_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show part, group, main and link counts for a store."""
    catalog = read_store(store, get_config(config_path))
    counts = catalog.stats().to_dict()
    if as_json:
        typer.echo(json.dumps(counts, indent=2))
        return
    for key, value in counts.items():
        typer.echo(f"{key.capitalize():<8} {value:,}")


@app.command()
def check(
    store: StoreOption,
    config_path: ConfigOption = None,
) -> None:
    """Validate a store's registry, groups and links against each other."""
    catalog = read_store(store, get_config(config_path))
    problems = catalog.check()
    if not problems:
        typer.secho("Store is consistent", fg=typer.colors.GREEN)
        return
    for problem in problems:
        typer.secho(f"  {problem}", fg=typer.colors.RED)
    typer.secho(f"{len(problems)} problem(s) found", fg=typer.colors.RED)
    raise typer.Exit(1)


# =============================================================================
# Helpers
# =============================================================================


def _print_report(report: IngestReport, catalog: Catalog) -> None:
    counts = catalog.stats()
    typer.echo(
        f"Applied {report.applied:,} relations "
        f"({report.skipped:,} skipped, {report.merges:,} merges, {report.cycles:,} cycles)"
    )
    if report.skipped_lines:
        lines = ", ".join(str(line) for line in report.skipped_lines[:10])
        more = "..." if len(report.skipped_lines) > 10 else ""
        typer.secho(f"  skipped lines: {lines}{more}", fg=typer.colors.YELLOW)
    typer.echo(
        f"Catalog: {counts.parts:,} parts in {counts.groups:,} groups, {counts.links:,} links"
    )


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)
