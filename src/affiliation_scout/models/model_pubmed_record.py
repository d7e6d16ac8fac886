"""
Pydantic models for PubMed records.

These are the data contracts between the extractor, the store and the API.
The API never sees raw efetch XML.
"""

from pydantic import BaseModel, model_validator

from affiliation_scout.constants import NO_TITLE, PUBMED_ARTICLE_URL, UNKNOWN_DATE


class AuthorEntry(BaseModel):
    """One author from an AuthorList with the affiliations listed for them."""

    name: str
    affiliations: list[str] = []


class PubmedRecord(BaseModel):
    """A single PubMed article reduced to the fields we report on."""

    pmid: str  # PubMed identifier (e.g. "38472913")
    title: str = NO_TITLE
    publication_date: str = UNKNOWN_DATE  # YYYY, YYYY-MM, YYYY-MM-DD or MedlineDate text
    non_academic_authors: list[str] = []
    company_affiliations: list[str] = []
    corresponding_author_email: str = ""
    url: str = ""

    @model_validator(mode="before")
    @classmethod
    def coerce_nones(cls, values: dict) -> dict:
        for field_name, field_info in cls.model_fields.items():
            if values.get(field_name) is None and field_info.default is not None:
                values[field_name] = field_info.default
        return values

    @model_validator(mode="after")
    def fill_url(self) -> "PubmedRecord":
        if not self.url:
            self.url = PUBMED_ARTICLE_URL.format(pmid=self.pmid)
        return self
