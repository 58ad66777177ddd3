"""Reader for relation files (main part, related part, relationship code)."""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path

from interchange.config import CatalogConfig
from interchange.core.relation import Relation, RelationKind
from interchange.storage.errors import RelationParseError

# Codes the engine applies; rows with any other code are skipped there
_KNOWN_CODES = frozenset(RelationKind)
# Codes whose rows need both part numbers
_PAIRED_CODES = frozenset({RelationKind.DIRECTED, RelationKind.BIDIRECTIONAL})


def read_relations(path: Path, config: CatalogConfig | None = None) -> Iterator[Relation]:
    """Yield one Relation per data row of a delimited relation file.

    The file must have a header naming the main, related and code columns.
    Codes are only checked to be non-negative integers here; whether a
    code is known is decided when the relation is applied.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        RelationParseError: On a missing column, an unparseable code, an
            empty part number a known code needs, or bytes that are not UTF-8.
    """
    config = config or CatalogConfig()
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f, delimiter=config.delimiter)
        try:
            yield from _parse_rows(reader, config)
        except UnicodeDecodeError as exc:
            raise RelationParseError(
                f"not valid UTF-8 ({exc.reason})", line=reader.line_num + 1
            ) from exc


def _parse_rows(reader: csv.DictReader, config: CatalogConfig) -> Iterator[Relation]:
    header = reader.fieldnames or []
    required = (config.main_column, config.related_column, config.code_column)
    missing = [column for column in required if column not in header]
    if missing:
        raise RelationParseError(f"missing column(s): {', '.join(missing)}", line=1)

    for row in reader:
        line = reader.line_num
        main_part = row.get(config.main_column) or ""
        related_part = row.get(config.related_column) or ""
        code = _parse_code((row.get(config.code_column) or "").strip(), line)
        # Unknown codes are passed through untouched and skipped when applied
        if code in _KNOWN_CODES:
            _require_part(main_part, config.main_column, line)
        if code in _PAIRED_CODES:
            _require_part(related_part, config.related_column, line)
        yield Relation(main_part=main_part, related_part=related_part, code=code, line=line)


def _parse_code(raw: str, line: int) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise RelationParseError(f"invalid relationship code '{raw}'", line=line)
    return int(raw)


def _require_part(value: str, column: str, line: int) -> None:
    if not value:
        raise RelationParseError(f"empty {column} value", line=line)
