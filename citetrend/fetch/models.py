"""Records returned by citation-data sources."""

from pydantic import BaseModel, ConfigDict, Field


class Publication(BaseModel):
    """A single research output as listed by a source."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    authors: str = ""
    venue: str = ""
    publication_year: int
    total_citations: int = Field(default=0, ge=0)


class CitationObservation(BaseModel):
    """Citations a publication received in one calendar year."""

    model_config = ConfigDict(frozen=True)

    publication_id: str
    year: int
    cites: int = Field(ge=0)
