"""Per-publication summary of the citation table."""

import csv
import logging
from typing import Iterable

from citetrend.series.models import DenseCitationRow

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = [
    "publication_id",
    "title",
    "publication_year",
    "total_citations",
    "observed_citations",
    "years_tracked",
    "peak_year",
    "peak_cites",
    "zero_filled_years",
    "out_of_range_years",
]


def summarize_publications(rows: Iterable[DenseCitationRow]) -> list[dict]:
    """One summary dict per publication, in first-seen order."""
    groups: dict[str, list[DenseCitationRow]] = {}
    for row in rows:
        groups.setdefault(row.publication_id, []).append(row)

    summaries = []
    for pub_id, pub_rows in groups.items():
        pub_rows = sorted(pub_rows, key=lambda r: r.year)
        first = pub_rows[0]
        # Earliest year wins ties
        peak = max(pub_rows, key=lambda r: (r.cites, -r.year))
        summaries.append({
            "publication_id": pub_id,
            "title": first.title,
            "publication_year": first.publication_year,
            "total_citations": first.total_citations,
            "observed_citations": sum(r.cites for r in pub_rows),
            "years_tracked": len(pub_rows),
            "peak_year": peak.year if peak.cites else None,
            "peak_cites": peak.cites,
            "zero_filled_years": sum(1 for r in pub_rows if r.zero_filled),
            "out_of_range_years": sum(1 for r in pub_rows if r.out_of_range),
        })
    return summaries


def export_summary_csv(rows: Iterable[DenseCitationRow], output_path: str) -> None:
    """Write the per-publication summary as CSV."""
    summaries = summarize_publications(rows)

    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        writer.writerows(summaries)

    logger.info("Summary CSV exported to %s (%d publications)", output_path, len(summaries))
