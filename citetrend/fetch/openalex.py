"""OpenAlex citation source using the pyalex library."""

import logging
import time
from functools import lru_cache

from pyalex import Works

from citetrend.fetch.models import CitationObservation, Publication

logger = logging.getLogger(__name__)

_PER_PAGE = 200
_MAX_RETRIES = 3
_ID_PREFIX = "https://openalex.org/"


# ── Public API ───────────────────────────────────────────────────────


def list_publications(researcher_id: str) -> list[Publication]:
    """List an OpenAlex author's works as Publications."""
    works = _author_works(researcher_id)
    publications: list[Publication] = []
    for work in works.values():
        pub = _parse_work(work)
        if pub:
            publications.append(pub)

    logger.info(
        "OpenAlex author %s: %d publications (%d without title/year skipped)",
        researcher_id,
        len(publications),
        len(works) - len(publications),
    )
    return publications


def get_citation_history(researcher_id: str, publication_id: str) -> list[CitationObservation]:
    """Per-year citation counts for one work, from ``counts_by_year``."""
    work = _author_works(researcher_id).get(publication_id)
    if work is None:
        work = _with_retry(lambda: Works()[publication_id], "work")
    return parse_counts_by_year(publication_id, work.get("counts_by_year"))


# ── OpenAlex Calls with Retry ────────────────────────────────────────


@lru_cache(maxsize=8)
def _author_works(researcher_id: str) -> dict[str, dict]:
    """Fetch every work of an author keyed by short work id.

    Cursor pages are read until the paginator runs dry; each page fetch is
    retried on its own.
    """
    pages = (
        Works()
        .filter(authorships={"author": {"id": researcher_id}})
        .paginate(per_page=_PER_PAGE)
    )

    works: dict[str, dict] = {}
    while True:
        page = _with_retry(lambda: next(pages, None), "works page")
        if page is None:
            break
        for work in page:
            works[short_id(work.get("id") or "")] = work
        logger.info("Fetched %d works for %s so far...", len(works), researcher_id)
    return works


def _with_retry(call, what: str):
    """Run one OpenAlex request, backing off exponentially between attempts."""
    for attempt in range(1, _MAX_RETRIES + 1):
        try:
            return call()
        except Exception as exc:
            if attempt == _MAX_RETRIES:
                raise
            wait = 2**attempt
            logger.warning(
                "OpenAlex %s request failed (attempt %d/%d): %s, retrying in %ds",
                what,
                attempt,
                _MAX_RETRIES,
                exc,
                wait,
            )
            time.sleep(wait)


# ── Work → Records ───────────────────────────────────────────────────


def short_id(openalex_id: str) -> str:
    """Strip the URL prefix from an OpenAlex id."""
    if openalex_id.startswith(_ID_PREFIX):
        return openalex_id[len(_ID_PREFIX):]
    return openalex_id


def _parse_work(work: dict) -> Publication | None:
    """Convert an OpenAlex Work dict into a Publication."""
    title = work.get("title")
    year = work.get("publication_year")
    if not title or year is None:
        return None

    authors = []
    for authorship in work.get("authorships") or []:
        author = authorship.get("author") or {}
        name = author.get("display_name")
        if name:
            authors.append(name)

    primary = work.get("primary_location") or {}
    source = primary.get("source") or {}

    return Publication(
        id=short_id(work.get("id") or ""),
        title=title,
        authors=", ".join(authors),
        venue=source.get("display_name") or "",
        publication_year=int(year),
        total_citations=work.get("cited_by_count") or 0,
    )


def parse_counts_by_year(publication_id: str, counts_by_year: list[dict] | None) -> list[CitationObservation]:
    """Turn OpenAlex ``[{year, cited_by_count}]`` into sorted observations."""
    observations = [
        CitationObservation(
            publication_id=publication_id,
            year=int(entry["year"]),
            cites=int(entry.get("cited_by_count") or 0),
        )
        for entry in counts_by_year or []
    ]
    observations.sort(key=lambda o: o.year)
    return observations
