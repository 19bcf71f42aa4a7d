"""Run completion and aggregation over every publication of a researcher."""

import logging
from datetime import date
from typing import Iterable, Mapping, Optional

import pandas as pd

from citetrend.fetch.models import CitationObservation, Publication
from citetrend.series.aggregator import aggregate_series
from citetrend.series.completer import complete_series
from citetrend.series.models import DenseCitationRow

logger = logging.getLogger(__name__)

# Columns the chart renderer reads, in display order
RENDER_COLUMNS = [
    "publication_id",
    "title",
    "year",
    "age",
    "cites",
    "cumulative_cites",
    "total_citations",
]
TABLE_COLUMNS = RENDER_COLUMNS + [
    f for f in DenseCitationRow.model_fields if f not in RENDER_COLUMNS
]


def build_citation_table(
    publications: Iterable[Publication],
    histories: Mapping[str, Iterable[CitationObservation]],
    current_year: Optional[int] = None,
) -> list[DenseCitationRow]:
    """Complete and aggregate each publication's series independently.

    Publications missing from ``histories`` get a fully zero-filled series.
    """
    if current_year is None:
        current_year = date.today().year

    table: list[DenseCitationRow] = []
    n_pubs = 0
    n_filled = 0
    for pub in publications:
        completed = complete_series(pub, histories.get(pub.id, []), current_year)
        n_filled += sum(1 for r in completed if r.zero_filled)
        table.extend(aggregate_series(completed))
        n_pubs += 1

    logger.info(
        "Citation table: %d publications -> %d rows (%d zero-filled) through %d",
        n_pubs,
        len(table),
        n_filled,
        current_year,
    )
    return table


def citation_frame(rows: Iterable[DenseCitationRow]) -> pd.DataFrame:
    """Flatten rows into a DataFrame with the renderer's columns first."""
    records = [r.model_dump() for r in rows]
    if not records:
        return pd.DataFrame(columns=TABLE_COLUMNS)
    return pd.DataFrame.from_records(records, columns=TABLE_COLUMNS)
