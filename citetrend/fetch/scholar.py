"""Google Scholar citation source using the scholarly library."""

import logging
import time
from functools import lru_cache

from scholarly import scholarly

from citetrend.fetch.models import CitationObservation, Publication

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3


# ── Public API ───────────────────────────────────────────────────────


def list_publications(researcher_id: str) -> list[Publication]:
    """List a Scholar profile's publications with authors and total citations.

    Each publication is filled once; the filled entry is reused by
    get_citation_history.
    """
    entries = _author_publications(researcher_id)
    publications: list[Publication] = []
    for pub_id in entries:
        pub = _parse_publication(_filled_publication(researcher_id, pub_id))
        if pub:
            publications.append(pub)

    logger.info(
        "Scholar profile %s: %d publications (%d skipped)",
        researcher_id,
        len(publications),
        len(entries) - len(publications),
    )
    return publications


def get_citation_history(researcher_id: str, publication_id: str) -> list[CitationObservation]:
    """Per-year citation counts for one publication on a Scholar profile."""
    filled = _filled_publication(researcher_id, publication_id)
    return parse_cites_per_year(publication_id, filled.get("cites_per_year"))


# ── Scholar Calls with Retry ─────────────────────────────────────────


@lru_cache(maxsize=8)
def _author_publications(researcher_id: str) -> dict[str, dict]:
    """Fetch a profile's publication entries keyed by publication id."""
    author = _scholar_call(scholarly.search_author_id, researcher_id)
    author = _scholar_call(scholarly.fill, author, sections=["publications"])

    entries: dict[str, dict] = {}
    for entry in author.get("publications") or []:
        pub_id = publication_id_of(entry)
        if pub_id:
            entries[pub_id] = entry
    return entries


@lru_cache(maxsize=None)
def _filled_publication(researcher_id: str, publication_id: str) -> dict:
    """Fill one publication entry (authors, venue, citations per year)."""
    entry = _author_publications(researcher_id).get(publication_id)
    if entry is None:
        raise KeyError(f"Publication {publication_id} not found on profile {researcher_id}")
    return _scholar_call(scholarly.fill, entry)


def _scholar_call(func, *args, **kwargs):
    """Call a scholarly function with retries."""
    for attempt in range(1, _MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            if attempt == _MAX_RETRIES:
                raise
            wait = 2**attempt
            logger.warning(
                "Scholar request failed (attempt %d/%d): %s, retrying in %ds",
                attempt,
                _MAX_RETRIES,
                exc,
                wait,
            )
            time.sleep(wait)


# ── Entry → Records ──────────────────────────────────────────────────


def publication_id_of(entry: dict) -> str | None:
    """Publication part of an ``author_pub_id`` such as ``AUTHOR:PUB``."""
    author_pub_id = entry.get("author_pub_id") or ""
    if not author_pub_id:
        return None
    return author_pub_id.split(":", 1)[-1]


def _parse_publication(entry: dict) -> Publication | None:
    """Convert a scholarly publication entry into a Publication."""
    bib = entry.get("bib") or {}
    title = (bib.get("title") or "").strip()
    pub_id = publication_id_of(entry)
    year = _to_int(bib.get("pub_year"))
    if not title or not pub_id or year is None:
        logger.warning("Skipping Scholar entry without title/id/year: %r", title or pub_id)
        return None

    venue = (
        bib.get("citation")
        or bib.get("journal")
        or bib.get("conference")
        or bib.get("venue")
        or ""
    )

    return Publication(
        id=pub_id,
        title=title,
        authors=_join_authors(bib.get("author")),
        venue=venue,
        publication_year=year,
        total_citations=_to_int(entry.get("num_citations")) or 0,
    )


def parse_cites_per_year(publication_id: str, cites_per_year: dict | None) -> list[CitationObservation]:
    """Turn Scholar's ``{year: count}`` mapping into sorted observations."""
    observations = [
        CitationObservation(publication_id=publication_id, year=int(year), cites=int(count))
        for year, count in (cites_per_year or {}).items()
    ]
    observations.sort(key=lambda o: o.year)
    return observations


def _join_authors(author_field: str | None) -> str:
    """Scholar lists authors as ``A and B``; join them with commas."""
    if not author_field:
        return ""
    return ", ".join(a.strip() for a in author_field.split(" and ") if a.strip())


def _to_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
