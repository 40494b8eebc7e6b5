"""ORM models for the review service."""

from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from review_service.db_core import Base
from review_service.schemas import Review


class ReviewRecord(Base):
    """Durable row mirroring one in-memory review.

    ``id`` is the only ordering key; replay sorts on it to rebuild the
    in-memory list in submission order.
    """

    __tablename__ = "reviews"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text)
    review = Column(Text)

    def __repr__(self) -> str:
        return f"<ReviewRecord id={self.id!r} name={self.name!r}>"

    def to_review(self) -> Review:
        """Convert the row to a :class:`Review`.

        Raises:
            pydantic.ValidationError: If a column is NULL or not text.
        """
        return Review(name=self.name, review=self.review)
