"""AffiliationScout: find industry-affiliated authors in PubMed search results."""

__version__ = "0.1.0"
