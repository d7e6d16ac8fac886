"""Project-wide constants."""

# -- Base client defaults ---------------------------------------------------
DEFAULT_TIMEOUT: float = 30.0
DEFAULT_MAX_RESULTS: int = 10

# -- PubMed / NCBI ----------------------------------------------------------
NCBI_BASE_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
PUBMED_SEARCH_URL: str = f"{NCBI_BASE_URL}/esearch.fcgi"
PUBMED_FETCH_URL: str = f"{NCBI_BASE_URL}/efetch.fcgi"
PUBMED_ARTICLE_URL: str = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"

# -- Extraction placeholders ------------------------------------------------
NO_TITLE: str = "No title available"
UNKNOWN_DATE: str = "Unknown date"

# -- Affiliation classification ---------------------------------------------
# An affiliation mentioning any of these (case-insensitive substring) is
# academic; everything else is treated as a company.
ACADEMIC_KEYWORDS: tuple[str, ...] = (
    "university",
    "college",
    "institute",
    "hospital",
    "school",
    "medical center",
    "clinic",
    "academy",
    "faculty",
    "laboratory",
    "department of",
    "division of",
    "center for",
    "national",
    "federal",
)

# -- Persistence ------------------------------------------------------------
DEFAULT_DATABASE_URL: str = "sqlite:///./pubmed.db"
HISTORY_LIMIT: int = 10
