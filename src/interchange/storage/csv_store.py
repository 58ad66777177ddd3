"""Flat-file persistence for a catalog.

A store is a directory holding delimited tables, each with a header:

- groups: ``part_number, id`` for every registered part
- mains:  ``part_number, id`` for every group with a main
- links:  ``id_from, id_to`` for every directed link
- retired: ``id`` for every group id retired by a merge

The retired table keeps counter ids from being minted again after a
reload. It is optional on load, so stores without one still open.

Loading always builds a fresh Catalog, so a failed load never leaves a
half-populated catalog behind.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from interchange.config import CatalogConfig
from interchange.core.ids import CounterIds, IdGenerator
from interchange.engine.catalog import Catalog
from interchange.storage.errors import StoreFormatError, StoreNotFoundError, StoreWriteError

logger = logging.getLogger(__name__)

GROUP_COLUMNS = ("part_number", "id")
MAIN_COLUMNS = ("part_number", "id")
LINK_COLUMNS = ("id_from", "id_to")
RETIRED_COLUMNS = ("id",)


def store_exists(directory: Path, config: CatalogConfig | None = None) -> bool:
    """Check whether every required table of a store is present."""
    config = config or CatalogConfig()
    return all((directory / name).is_file() for name in _table_names(config))


def load_catalog(
    directory: Path,
    config: CatalogConfig | None = None,
    id_generator: IdGenerator | None = None,
) -> Catalog:
    """Read a store directory into a new Catalog.

    Mains and links that refer to ids with no members are dropped with a
    warning, as are self-loop links.

    Raises:
        StoreNotFoundError: If the directory or a required table is missing.
        StoreFormatError: If a table header does not match.
    """
    config = config or CatalogConfig()
    for name in _table_names(config):
        if not (directory / name).is_file():
            raise StoreNotFoundError(directory / name)

    catalog = Catalog(id_generator)

    group_ids: set[str] = set()
    for part_number, group_id in _read_table(directory / config.groups_file, GROUP_COLUMNS, config):
        catalog.restore_part(part_number, group_id)
        group_ids.add(group_id)

    for part_number, group_id in _read_table(directory / config.mains_file, MAIN_COLUMNS, config):
        if not catalog.restore_main(group_id, part_number):
            logger.warning("Dropping main %s of unknown group %s", part_number, group_id)

    for source, target in _read_table(directory / config.links_file, LINK_COLUMNS, config):
        if not catalog.restore_link(source, target):
            logger.warning("Dropping link %s -> %s (self-loop, duplicate or unknown group)", source, target)

    retired_path = directory / config.retired_file
    if retired_path.is_file():
        for (group_id,) in _read_table(retired_path, RETIRED_COLUMNS, config):
            if not catalog.restore_retired(group_id):
                logger.warning("Ignoring retired id %s; it is still live", group_id)

    if isinstance(id_generator, CounterIds):
        id_generator.advance_past([*group_ids, *catalog.retired_ids()])

    stats = catalog.stats()
    logger.info(
        "Loaded store %s: %d parts, %d groups, %d links",
        directory,
        stats.parts,
        stats.groups,
        stats.links,
    )
    return catalog


def save_catalog(catalog: Catalog, directory: Path, config: CatalogConfig | None = None) -> None:
    """Write a catalog's tables into ``directory``.

    The directory is created if needed. Each table is written to a
    temporary file first and then moved into place.

    Raises:
        StoreWriteError: If the directory or a table cannot be written.
    """
    config = config or CatalogConfig()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreWriteError(f"Cannot create output directory {directory}: {exc}") from exc

    _write_table(
        directory / config.groups_file,
        GROUP_COLUMNS,
        sorted((pn, group_id) for pn, group_id in catalog.parts()),
        config,
    )
    _write_table(
        directory / config.mains_file,
        MAIN_COLUMNS,
        sorted((pn, group_id) for group_id, pn in catalog.mains()),
        config,
    )
    _write_table(
        directory / config.links_file,
        LINK_COLUMNS,
        sorted((link.source, link.target) for link in catalog.links()),
        config,
    )
    _write_table(
        directory / config.retired_file,
        RETIRED_COLUMNS,
        sorted((group_id,) for group_id in catalog.retired_ids()),
        config,
    )

    stats = catalog.stats()
    logger.info(
        "Saved store %s: %d parts, %d groups, %d links",
        directory,
        stats.parts,
        stats.groups,
        stats.links,
    )


def _table_names(config: CatalogConfig) -> tuple[str, str, str]:
    return (config.groups_file, config.mains_file, config.links_file)


def _read_table(
    path: Path, columns: Sequence[str], config: CatalogConfig
) -> Iterator[tuple[str, ...]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f, delimiter=config.delimiter)
        header = next(reader, None)
        if header is None:
            return
        if tuple(column.strip() for column in header) != tuple(columns):
            raise StoreFormatError(
                f"{path.name}: expected columns {', '.join(columns)}, got {', '.join(header)}"
            )
        for row in reader:
            if not row:
                continue
            if len(row) != len(columns):
                raise StoreFormatError(
                    f"{path.name} line {reader.line_num}: expected {len(columns)} fields, got {len(row)}"
                )
            yield tuple(row)


def _write_table(
    path: Path,
    columns: Sequence[str],
    rows: Iterable[tuple[str, ...]],
    config: CatalogConfig,
) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, delimiter=config.delimiter)
            writer.writerow(columns)
            writer.writerows(rows)
        tmp.replace(path)
    except OSError as exc:
        raise StoreWriteError(f"Cannot write {path}: {exc}") from exc
