"""Source registry and the fetch step of the report."""

import logging
from types import ModuleType
from typing import Optional

import pyalex

from citetrend.fetch import openalex, scholar
from citetrend.fetch.models import CitationObservation, Publication

logger = logging.getLogger(__name__)

SOURCES: dict[str, ModuleType] = {
    "scholar": scholar,
    "openalex": openalex,
}


def fetch_citation_data(
    researcher_id: str,
    source: str,
    limit: Optional[int] = None,
    contact_email: Optional[str] = None,
) -> tuple[list[Publication], dict[str, list[CitationObservation]]]:
    """Fetch publications and each one's citation history from a source.

    Returns (publications, histories keyed by publication id).
    """
    if source not in SOURCES:
        raise ValueError(f"Unknown source '{source}' (valid: {', '.join(SOURCES)})")
    client = SOURCES[source]

    if source == "openalex" and contact_email:
        pyalex.config.email = contact_email

    publications = client.list_publications(researcher_id)
    if limit:
        publications = publications[:limit]
        logger.info("Limiting to first %d publications", limit)

    histories: dict[str, list[CitationObservation]] = {}
    for i, pub in enumerate(publications, start=1):
        histories[pub.id] = client.get_citation_history(researcher_id, pub.id)
        logger.info(
            "[%d/%d] %s: %d citation years",
            i,
            len(publications),
            pub.id,
            len(histories[pub.id]),
        )

    return publications, histories
