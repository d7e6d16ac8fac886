from sqlalchemy import JSON, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from affiliation_scout.db.base import Base


class Results(Base):
    __tablename__ = "results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    search_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("searches.id"), nullable=False, index=True
    )
    pubmed_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    publication_date: Mapped[str | None] = mapped_column(Text, nullable=True)
    non_academic_authors: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    company_affiliations: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    corresponding_author_email: Mapped[str | None] = mapped_column(Text, nullable=True)
