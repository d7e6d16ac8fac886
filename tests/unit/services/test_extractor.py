"""Unit tests for services/extractor: pure string scanning, no network."""

import pytest

from affiliation_scout.constants import NO_TITLE, UNKNOWN_DATE
from affiliation_scout.services.classifier import AffiliationClassifier
from affiliation_scout.services.extractor import (
    ExtractionError,
    extract_all_affiliations,
    extract_authors,
    extract_email,
    extract_publication_date,
    extract_record,
    extract_title,
)


def _article(body: str) -> str:
    return f"<PubmedArticleSet><PubmedArticle>{body}</PubmedArticle></PubmedArticleSet>"


def _author_list(*authors: str) -> str:
    return '<AuthorList CompleteYN="Y">' + "".join(authors) + "</AuthorList>"


def _author(last: str, fore: str, *affiliations: str) -> str:
    infos = "".join(
        f"<AffiliationInfo><Affiliation>{a}</Affiliation></AffiliationInfo>"
        for a in affiliations
    )
    return (
        f'<Author ValidYN="Y"><LastName>{last}</LastName>'
        f"<ForeName>{fore}</ForeName>{infos}</Author>"
    )


# --- Title ---


def test_title_extracted_and_trimmed():
    xml = _article("<ArticleTitle>  Metformin and ageing.  </ArticleTitle>")
    assert extract_title(xml) == "Metformin and ageing."


def test_title_missing_uses_placeholder():
    assert extract_title(_article("")) == NO_TITLE


def test_title_first_occurrence_wins():
    xml = _article(
        "<ArticleTitle>First</ArticleTitle><ArticleTitle>Second</ArticleTitle>"
    )
    assert extract_title(xml) == "First"


# --- Publication date ---


@pytest.mark.parametrize(
    "pub_date, expected",
    [
        ("<Year>2021</Year><Month>03</Month><Day>25</Day>", "2021-03-25"),
        ("<Year>2020</Year><Month>03</Month>", "2020-03"),
        ("<Year>2019</Year>", "2019"),
        ("<MedlineDate>1998 Dec-1999 Jan</MedlineDate>", "1998 Dec-1999 Jan"),
        ("", UNKNOWN_DATE),
    ],
)
def test_publication_date_granularity(pub_date, expected):
    xml = _article(f"<PubDate>{pub_date}</PubDate>")
    assert extract_publication_date(xml) == expected


def test_publication_date_without_block_is_unknown():
    xml = _article("<ArticleDate><Year>2020</Year></ArticleDate>")
    assert extract_publication_date(xml) == UNKNOWN_DATE


def test_publication_date_uses_first_block_only():
    xml = _article(
        "<PubDate><Year>2001</Year></PubDate>"
        "<PubDate><Year>2002</Year><Month>05</Month></PubDate>"
    )
    assert extract_publication_date(xml) == "2001"


def test_publication_date_month_without_year_falls_back_to_medline():
    xml = _article(
        "<PubDate><Month>Jan</Month><MedlineDate>2005 Winter</MedlineDate></PubDate>"
    )
    assert extract_publication_date(xml) == "2005 Winter"


# --- Affiliations ---


def test_all_affiliations_deduplicated_in_first_seen_order():
    xml = _article(
        _author_list(
            _author("Smith", "Jane", "Acme Corp", "Example University"),
            _author("Doe", "John", "Acme Corp"),
        )
    )
    assert extract_all_affiliations(xml) == ["Acme Corp", "Example University"]


def test_all_affiliations_includes_bare_affiliation_fields():
    xml = _article(
        "<AuthorList><Author><LastName>Roe</LastName>"
        "<Affiliation> Beta Pharma Ltd </Affiliation></Author></AuthorList>"
    )
    assert extract_all_affiliations(xml) == ["Beta Pharma Ltd"]


def test_all_affiliations_empty_when_none_present():
    assert extract_all_affiliations(_article("<ArticleTitle>x</ArticleTitle>")) == []


# --- Authors ---


def test_author_name_prefers_fore_and_last():
    xml = _article(_author_list(_author("Curie", "Marie")))
    assert [a.name for a in extract_authors(xml)] == ["Marie Curie"]


def test_author_name_falls_back_to_last_name():
    xml = _article(_author_list("<Author><LastName>Curie</LastName></Author>"))
    assert [a.name for a in extract_authors(xml)] == ["Curie"]


def test_author_name_falls_back_to_collective_name():
    xml = _article(
        _author_list("<Author><CollectiveName>GTEx Consortium</CollectiveName></Author>")
    )
    assert [a.name for a in extract_authors(xml)] == ["GTEx Consortium"]


def test_unnamed_author_is_skipped():
    xml = _article(
        _author_list(
            "<Author><ForeName>Only</ForeName>"
            "<AffiliationInfo><Affiliation>Acme Corp</Affiliation></AffiliationInfo>"
            "</Author>",
            _author("Smith", "Jane", "Example University"),
        )
    )
    assert [a.name for a in extract_authors(xml)] == ["Jane Smith"]


def test_author_affiliation_info_preferred_over_bare_field():
    xml = _article(
        _author_list(
            "<Author><LastName>Smith</LastName>"
            "<AffiliationInfo><Affiliation>Acme Corp</Affiliation></AffiliationInfo>"
            "<Affiliation>Example University</Affiliation></Author>"
        )
    )
    [author] = extract_authors(xml)
    assert author.affiliations == ["Acme Corp"]


def test_author_bare_affiliation_used_when_no_affiliation_info():
    xml = _article(
        _author_list(
            "<Author><LastName>Smith</LastName>"
            "<Affiliation>Acme Corp</Affiliation></Author>"
        )
    )
    [author] = extract_authors(xml)
    assert author.affiliations == ["Acme Corp"]


def test_authors_outside_author_list_are_ignored():
    xml = _article(
        "<InvestigatorList><Investigator><LastName>Outside</LastName></Investigator>"
        "</InvestigatorList>" + _author_list(_author("Inside", "Ann"))
    )
    assert [a.name for a in extract_authors(xml)] == ["Ann Inside"]


def test_no_author_list_returns_empty():
    assert extract_authors(_article("<ArticleTitle>x</ArticleTitle>")) == []


# --- Email ---


def test_email_from_typed_elocation():
    xml = _article(
        '<ELocationID EIdType="doi">10.1/x</ELocationID>'
        '<ELocationID EIdType="email"> lead@acme.com </ELocationID>'
        "<Affiliation>Other contact: other@example.org</Affiliation>"
    )
    assert extract_email(xml) == "lead@acme.com"


def test_email_falls_back_to_first_address_in_document():
    xml = _article(
        "<Affiliation>Acme Corp, Boston. Electronic address: j.smith@acme-bio.com.</Affiliation>"
    )
    assert extract_email(xml) == "j.smith@acme-bio.com"


def test_email_elocation_without_at_sign_is_ignored():
    xml = _article(
        '<ELocationID EIdType="email">not-an-address</ELocationID>'
        "<Affiliation>x y@z.io</Affiliation>"
    )
    assert extract_email(xml) == "y@z.io"


def test_email_absent_is_empty_string():
    assert extract_email(_article("<ArticleTitle>x</ArticleTitle>")) == ""


# --- Full record ---


def test_extract_record_from_full_document(article_xml):
    record = extract_record("38000001", article_xml)

    assert record.pmid == "38000001"
    assert record.title == "Off-target editing of base editors in primary T cells."
    assert record.publication_date == "2023-Nov-14"
    assert record.non_academic_authors == ["Wei Chen", "Erik Lindqvist"]
    assert record.company_affiliations == [
        "Acme Biotech Inc., South San Francisco, CA, USA.",
        "Genentech, South San Francisco, CA, USA. erik.lindqvist@gene.example.com.",
    ]
    assert record.corresponding_author_email == "erik.lindqvist@gene.example.com"
    assert record.url == "https://pubmed.ncbi.nlm.nih.gov/38000001/"


def test_company_author_is_listed():
    xml = _article(_author_list(_author("Chen", "Wei", "Acme Biotech Inc.")))
    record = extract_record("1", xml)
    assert record.non_academic_authors == ["Wei Chen"]
    assert record.company_affiliations == ["Acme Biotech Inc."]


def test_academic_author_is_not_listed():
    xml = _article(
        _author_list(
            _author("Okafor", "Ada", "Department of Biology, Example University")
        )
    )
    record = extract_record("1", xml)
    assert record.non_academic_authors == []
    assert record.company_affiliations == []


def test_duplicate_author_names_are_suppressed():
    xml = _article(
        _author_list(
            _author("Chen", "Wei", "Acme Biotech Inc."),
            _author("Chen", "Wei", "Beta Pharma Ltd"),
        )
    )
    record = extract_record("1", xml)
    assert record.non_academic_authors == ["Wei Chen"]
    assert record.company_affiliations == ["Acme Biotech Inc.", "Beta Pharma Ltd"]


def test_record_without_authors_has_empty_lists():
    record = extract_record("1", _article("<ArticleTitle>Lonely</ArticleTitle>"))
    assert record.non_academic_authors == []
    assert record.company_affiliations == []
    assert record.corresponding_author_email == ""
    assert record.publication_date == UNKNOWN_DATE


def test_non_academic_authors_consistent_with_company_affiliations(article_xml):
    """Every listed author has at least one affiliation in the company list."""
    classifier = AffiliationClassifier()
    record = extract_record("38000001", article_xml, classifier)
    companies = set(record.company_affiliations)

    for author in extract_authors(article_xml):
        has_company = any(a in companies for a in author.affiliations)
        assert (author.name in record.non_academic_authors) == has_company


def test_custom_classifier_keywords_are_used():
    xml = _article(_author_list(_author("Chen", "Wei", "Acme Biotech Inc.")))
    record = extract_record("1", xml, AffiliationClassifier(keywords=["biotech"]))
    assert record.non_academic_authors == []
    assert record.company_affiliations == []


@pytest.mark.parametrize("xml", ["", "   \n  "])
def test_blank_document_raises(xml):
    with pytest.raises(ExtractionError, match="PMID 42"):
        extract_record("42", xml)
