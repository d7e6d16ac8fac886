"""
Field extraction from PubMed efetch XML.

The efetch document is scanned with tag-delimiter substring search rather
than parsed, so truncated or oddly nested markup still yields whatever
fields can be found. Every scan takes the first occurrence of a tag pair
and trims the enclosed text.
"""

import logging
import re
from collections.abc import Iterator

from affiliation_scout.constants import NO_TITLE, UNKNOWN_DATE
from affiliation_scout.models.model_pubmed_record import AuthorEntry, PubmedRecord
from affiliation_scout.services.classifier import AffiliationClassifier

logger = logging.getLogger(__name__)

_AUTHOR_START = re.compile(r"<Author[\s>]")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9_-]+")
_EMAIL_LOCATION_TAG = '<ELocationID EIdType="email"'


class ExtractionError(ValueError):
    """Raised when a detail document cannot yield a record at all."""


# ---------------------------------------------------------------------------
# Tag scanning helpers
# ---------------------------------------------------------------------------


def _between(xml: str, start_tag: str, end_tag: str) -> str:
    """Return the trimmed text between the first start_tag and the next end_tag."""
    start = xml.find(start_tag)
    if start == -1:
        return ""
    content_start = start + len(start_tag)
    end = xml.find(end_tag, content_start)
    if end == -1:
        return ""
    return xml[content_start:end].strip()


def _sections(xml: str, start_tag: str, end_tag: str) -> Iterator[str]:
    """Yield each span from a start_tag up to (not including) its next end_tag."""
    pos = 0
    while True:
        start = xml.find(start_tag, pos)
        if start == -1:
            return
        end = xml.find(end_tag, start)
        if end == -1:
            return
        yield xml[start:end]
        pos = end


def _append_unique(items: list[str], value: str) -> None:
    if value and value not in items:
        items.append(value)


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def extract_title(xml: str) -> str:
    return _between(xml, "<ArticleTitle>", "</ArticleTitle>") or NO_TITLE


def extract_publication_date(xml: str) -> str:
    """Compose the first PubDate block as YYYY-MM-DD, YYYY-MM or YYYY.

    Falls back to the free-form MedlineDate when no Year is present, and
    to "Unknown date" when there is no PubDate block or it is empty.
    """
    pub_date_xml = next(_sections(xml, "<PubDate>", "</PubDate>"), None)
    if pub_date_xml is None:
        return UNKNOWN_DATE

    year = _between(pub_date_xml, "<Year>", "</Year>")
    month = _between(pub_date_xml, "<Month>", "</Month>")
    day = _between(pub_date_xml, "<Day>", "</Day>")

    if year and month and day:
        return f"{year}-{month}-{day}"
    if year and month:
        return f"{year}-{month}"
    if year:
        return year

    return _between(pub_date_xml, "<MedlineDate>", "</MedlineDate>") or UNKNOWN_DATE


def extract_all_affiliations(xml: str) -> list[str]:
    """Collect every distinct affiliation in the document, first-seen order.

    Bare <Affiliation> elements are scanned first, then the first
    <Affiliation> of each <AffiliationInfo> block.
    """
    affiliations: list[str] = []

    pos = 0
    while True:
        start = xml.find("<Affiliation>", pos)
        if start == -1:
            break
        content_start = start + len("<Affiliation>")
        end = xml.find("</Affiliation>", content_start)
        if end == -1:
            break
        _append_unique(affiliations, xml[content_start:end].strip())
        pos = end

    for block in _sections(xml, "<AffiliationInfo>", "</AffiliationInfo>"):
        _append_unique(affiliations, _between(block, "<Affiliation>", "</Affiliation>"))

    return affiliations


def _author_name(author_xml: str) -> str:
    last_name = _between(author_xml, "<LastName>", "</LastName>")
    fore_name = _between(author_xml, "<ForeName>", "</ForeName>")
    if last_name and fore_name:
        return f"{fore_name} {last_name}"
    if last_name:
        return last_name
    return _between(author_xml, "<CollectiveName>", "</CollectiveName>")


def _author_affiliations(author_xml: str) -> list[str]:
    affiliations = []
    for block in _sections(author_xml, "<AffiliationInfo>", "</AffiliationInfo>"):
        affiliation = _between(block, "<Affiliation>", "</Affiliation>")
        if affiliation:
            affiliations.append(affiliation)

    if not affiliations:
        affiliation = _between(author_xml, "<Affiliation>", "</Affiliation>")
        if affiliation:
            affiliations.append(affiliation)

    return affiliations


def extract_authors(xml: str) -> list[AuthorEntry]:
    """Return named authors from the first AuthorList with their own affiliations.

    Entries whose name cannot be determined are skipped.
    """
    list_start = xml.find("<AuthorList")
    if list_start == -1:
        return []
    list_end = xml.find("</AuthorList>", list_start)
    if list_end == -1:
        return []
    author_list_xml = xml[list_start:list_end]

    authors = []
    pos = 0
    while True:
        match = _AUTHOR_START.search(author_list_xml, pos)
        if match is None:
            break
        end = author_list_xml.find("</Author>", match.start())
        if end == -1:
            break
        author_xml = author_list_xml[match.start() : end]
        pos = end

        name = _author_name(author_xml)
        if not name:
            continue
        authors.append(
            AuthorEntry(name=name, affiliations=_author_affiliations(author_xml))
        )

    return authors


def extract_email(xml: str) -> str:
    """Corresponding-author email: typed ELocationID first, then any address."""
    for tag in _sections(xml, _EMAIL_LOCATION_TAG, "</ELocationID>"):
        content = tag[tag.find(">") + 1 :]
        if "@" in content:
            return content.strip()

    match = _EMAIL_PATTERN.search(xml)
    return match.group(0) if match else ""


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------


def extract_record(
    pmid: str,
    xml: str,
    classifier: AffiliationClassifier | None = None,
) -> PubmedRecord:
    """Map one efetch document to a PubmedRecord.

    Each distinct affiliation is classified once and both the company
    affiliation list and the non-academic author list read from that
    verdict table, so an author is listed iff one of their affiliations
    is listed as a company.

    Raises:
        ExtractionError: the document is empty.
    """
    if not xml or not xml.strip():
        raise ExtractionError(f"Empty document for PMID {pmid}")

    classifier = classifier or AffiliationClassifier()
    verdicts: dict[str, bool] = {}

    def non_academic(affiliation: str) -> bool:
        if affiliation not in verdicts:
            verdicts[affiliation] = classifier.is_non_academic(affiliation)
        return verdicts[affiliation]

    company_affiliations = [a for a in extract_all_affiliations(xml) if non_academic(a)]

    non_academic_authors: list[str] = []
    for author in extract_authors(xml):
        flagged = [a for a in author.affiliations if non_academic(a)]
        if not flagged:
            continue
        _append_unique(non_academic_authors, author.name)
        for affiliation in flagged:
            _append_unique(company_affiliations, affiliation)

    record = PubmedRecord(
        pmid=pmid,
        title=extract_title(xml),
        publication_date=extract_publication_date(xml),
        non_academic_authors=non_academic_authors,
        company_affiliations=company_affiliations,
        corresponding_author_email=extract_email(xml),
    )
    logger.debug(
        "Extracted PMID %s: %d non-academic authors, %d company affiliations",
        pmid,
        len(record.non_academic_authors),
        len(record.company_affiliations),
    )
    return record
