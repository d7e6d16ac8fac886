"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy.orm import sessionmaker

from affiliation_scout.db.session import init_db, make_engine

ARTICLE_XML = """\
<?xml version="1.0" ?>
<!DOCTYPE PubmedArticleSet PUBLIC "-//NLM//DTD PubMedArticle, 1st January 2024//EN" "https://dtd.nlm.nih.gov/ncbi/pubmed/out/pubmed_240101.dtd">
<PubmedArticleSet>
    <PubmedArticle>
        <MedlineCitation Status="MEDLINE" Owner="NLM">
            <PMID Version="1">38000001</PMID>
            <Article PubModel="Print-Electronic">
                <Journal>
                    <JournalIssue CitedMedium="Internet">
                        <PubDate>
                            <Year>2023</Year>
                            <Month>Nov</Month>
                            <Day>14</Day>
                        </PubDate>
                    </JournalIssue>
                    <Title>Nature biotechnology</Title>
                </Journal>
                <ArticleTitle>Off-target editing of base editors in primary T cells.</ArticleTitle>
                <ELocationID EIdType="doi" ValidYN="Y">10.1038/s41587-023-00001-1</ELocationID>
                <AuthorList CompleteYN="Y">
                    <Author ValidYN="Y">
                        <LastName>Chen</LastName>
                        <ForeName>Wei</ForeName>
                        <Initials>W</Initials>
                        <AffiliationInfo>
                            <Affiliation>Acme Biotech Inc., South San Francisco, CA, USA.</Affiliation>
                        </AffiliationInfo>
                    </Author>
                    <Author ValidYN="Y">
                        <LastName>Okafor</LastName>
                        <ForeName>Ada</ForeName>
                        <Initials>A</Initials>
                        <AffiliationInfo>
                            <Affiliation>Department of Biology, Example University, Boston, MA, USA.</Affiliation>
                        </AffiliationInfo>
                    </Author>
                    <Author ValidYN="Y">
                        <LastName>Lindqvist</LastName>
                        <ForeName>Erik</ForeName>
                        <Initials>E</Initials>
                        <AffiliationInfo>
                            <Affiliation>Karolinska Institutet, Stockholm, Sweden.</Affiliation>
                        </AffiliationInfo>
                        <AffiliationInfo>
                            <Affiliation>Genentech, South San Francisco, CA, USA. erik.lindqvist@gene.example.com.</Affiliation>
                        </AffiliationInfo>
                    </Author>
                    <Author ValidYN="Y">
                        <CollectiveName>CRISPR Safety Consortium</CollectiveName>
                    </Author>
                </AuthorList>
            </Article>
        </MedlineCitation>
    </PubmedArticle>
</PubmedArticleSet>
"""


@pytest.fixture
def article_xml() -> str:
    """Efetch document with company, university and mixed-affiliation authors."""
    return ARTICLE_XML


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite database with both tables created."""
    engine = make_engine("sqlite://")
    init_db(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()
