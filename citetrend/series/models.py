"""Dense per-year citation rows produced by the series core."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from citetrend.fetch.models import Publication


class DenseCitationRow(BaseModel):
    """One (publication, year) row with publication metadata joined in.

    ``age`` and ``cumulative_cites`` stay None until the aggregator runs.
    """

    model_config = ConfigDict(frozen=True)

    publication_id: str
    title: str = ""
    authors: str = ""
    venue: str = ""
    publication_year: int
    total_citations: int = 0
    year: int
    cites: int = Field(ge=0)
    age: Optional[int] = None
    cumulative_cites: Optional[int] = None
    zero_filled: bool = False
    out_of_range: bool = False

    @classmethod
    def for_publication(cls, publication: Publication, year: int, cites: int, **flags) -> "DenseCitationRow":
        """Build a row carrying the publication's fixed metadata."""
        return cls(
            publication_id=publication.id,
            title=publication.title,
            authors=publication.authors,
            venue=publication.venue,
            publication_year=publication.publication_year,
            total_citations=publication.total_citations,
            year=year,
            cites=cites,
            **flags,
        )
