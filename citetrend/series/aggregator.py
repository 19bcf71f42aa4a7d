"""Cumulative citation sums and publication age per dense row."""

from collections.abc import Mapping
from typing import Iterable, Union

from citetrend.core.errors import MissingField, SeriesError
from citetrend.series.models import DenseCitationRow

RowLike = Union[DenseCitationRow, Mapping]

_REQUIRED = ("publication_id", "publication_year", "year", "cites")


def aggregate_series(rows: Iterable[RowLike]) -> list[DenseCitationRow]:
    """Add age and running citation totals to one publication's rows.

    Rows are sorted by year first; the running total starts at zero.
    """
    coerced = [_coerce_row(r) for r in rows]
    if not coerced:
        return []

    ids = {r.publication_id for r in coerced}
    if len(ids) > 1:
        raise SeriesError(f"aggregate_series got rows for several publications: {sorted(ids)}")

    out: list[DenseCitationRow] = []
    running = 0
    for row in sorted(coerced, key=lambda r: r.year):
        running += row.cites
        out.append(
            row.model_copy(
                update={"age": row.year - row.publication_year, "cumulative_cites": running}
            )
        )
    return out


def aggregate_table(rows: Iterable[RowLike]) -> list[DenseCitationRow]:
    """Partition rows by publication, aggregate each partition, concatenate."""
    partitions: dict[str, list[DenseCitationRow]] = {}
    for row in rows:
        row = _coerce_row(row)
        partitions.setdefault(row.publication_id, []).append(row)

    out: list[DenseCitationRow] = []
    for part in partitions.values():
        out.extend(aggregate_series(part))
    return out


def _coerce_row(row: RowLike) -> DenseCitationRow:
    if isinstance(row, DenseCitationRow):
        return row
    for field in _REQUIRED:
        if row.get(field) is None:
            raise MissingField(field, f"publication {row.get('publication_id')!r}")
    return DenseCitationRow.model_validate(dict(row))
