"""Expand a sparse per-year citation series into a dense, zero-filled one."""

import logging
from typing import Iterable

from citetrend.core.errors import DuplicateObservation, InvalidRange, SeriesError
from citetrend.fetch.models import CitationObservation, Publication
from citetrend.series.models import DenseCitationRow

logger = logging.getLogger(__name__)


# ── Public API ───────────────────────────────────────────────────────


def complete_series(
    publication: Publication,
    observations: Iterable[CitationObservation],
    current_year: int,
) -> list[DenseCitationRow]:
    """Return one row per year from the publication year through current_year.

    Years without an observation get ``cites = 0`` and ``zero_filled = True``.
    Observed years outside that range are kept and flagged ``out_of_range``.
    A publication dated after current_year gets no filled years.
    Rows come back sorted ascending by year.
    """
    target_years = year_range(publication.publication_year, current_year)
    observed = _index_by_year(publication, observations)
    if not target_years:
        logger.warning(
            "Publication %s is dated %d, after %d; no years to fill",
            publication.id,
            publication.publication_year,
            current_year,
        )

    rows: list[DenseCitationRow] = []
    for year in target_years:
        if year in observed:
            rows.append(DenseCitationRow.for_publication(publication, year, observed[year]))
        else:
            rows.append(
                DenseCitationRow.for_publication(publication, year, 0, zero_filled=True)
            )

    anomalies = sorted(set(observed) - set(target_years))
    if anomalies:
        logger.warning(
            "Publication %s has citations outside %d-%d in years %s; keeping them",
            publication.id,
            publication.publication_year,
            current_year,
            anomalies,
        )
    for year in anomalies:
        rows.append(
            DenseCitationRow.for_publication(publication, year, observed[year], out_of_range=True)
        )

    rows.sort(key=lambda r: r.year)
    return rows


def year_range(publication_year: int, current_year: int) -> range:
    """Inclusive range of years a publication's series must cover.

    Empty when the publication is dated after current_year.
    """
    if isinstance(current_year, bool) or not isinstance(current_year, int):
        raise InvalidRange(f"Current year must be an integer, got {current_year!r}")
    return range(publication_year, current_year + 1)


# ── Helpers ──────────────────────────────────────────────────────────


def _index_by_year(
    publication: Publication, observations: Iterable[CitationObservation]
) -> dict[int, int]:
    """Map year -> cites, rejecting foreign or repeated observations."""
    by_year: dict[int, int] = {}
    for obs in observations:
        if obs.publication_id != publication.id:
            raise SeriesError(
                f"Observation for {obs.publication_id} passed to series of {publication.id}"
            )
        if obs.year in by_year:
            raise DuplicateObservation(
                f"Publication {publication.id} has more than one observation for {obs.year}"
            )
        by_year[obs.year] = obs.cites
    return by_year
