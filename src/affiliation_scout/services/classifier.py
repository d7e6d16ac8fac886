"""Academic vs. non-academic classification of affiliation strings."""

from collections.abc import Iterable

from affiliation_scout.constants import ACADEMIC_KEYWORDS


class AffiliationClassifier:
    """
    Keyword denylist classifier.

    An affiliation is academic if it contains any keyword as a
    case-insensitive substring; anything else counts as non-academic
    (a company). Academic bodies named without one of the keywords are
    therefore reported as companies.
    """

    def __init__(self, keywords: Iterable[str] = ACADEMIC_KEYWORDS):
        self.keywords: tuple[str, ...] = tuple(k.lower() for k in keywords)

    def is_non_academic(self, affiliation: str) -> bool:
        lowered = affiliation.lower()
        return not any(keyword in lowered for keyword in self.keywords)


_default_classifier = AffiliationClassifier()


def is_non_academic(affiliation: str) -> bool:
    """Classify with the default academic keyword list."""
    return _default_classifier.is_non_academic(affiliation)
