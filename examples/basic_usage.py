"""Basic usage example for restform transformers."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, String, create_engine, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship, selectinload

from restform import (
    Base,
    CaseType,
    RestfulModel,
    RestfulTransformer,
    TimestampMixin,
    TransformerRegistry,
)
from restform.log import configure_logging

logger = logging.getLogger(__name__)


class Author(Base, TimestampMixin, RestfulModel):
    __tablename__ = "authors"

    allowed_fields = ("author_id", "pen_name", "created_at")

    author_id: Mapped[int] = mapped_column(primary_key=True)
    pen_name: Mapped[str] = mapped_column(String(255))
    api_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    books: Mapped[list["Book"]] = relationship(back_populates="author")


class Book(Base, RestfulModel):
    __tablename__ = "books"

    allowed_fields = ("id", "book_title", "published_at")

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.author_id"))
    book_title: Mapped[str] = mapped_column(String(500))
    published_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    author: Mapped[Author] = relationship(back_populates="books")


def build_registry(case_type: CaseType) -> TransformerRegistry:
    """Register one transformer per model, once at startup."""
    registry = TransformerRegistry()
    transformer = RestfulTransformer(registry=registry, case_type=case_type)
    registry.register(Author, transformer)
    registry.register(Book, transformer)
    return registry


def main():
    """Store an author with books and print the API representation."""
    configure_logging()

    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        author = Author(author_id=7, pen_name="Ada L.", api_token="never-shown")
        author.books = [
            Book(id=1, book_title="Notes", published_at=datetime(1843, 9, 1, tzinfo=timezone.utc)),
            Book(id=2, book_title="Letters"),
        ]
        session.add(author)
        session.commit()

    for case_type in CaseType:
        registry = build_registry(case_type)
        with Session(engine) as session:
            author = session.scalars(
                select(Author).options(selectinload(Author.books))
            ).one()
            transformed = registry.get(Author).transform(author)
        logger.info(f"Transformed author using {case_type.value}")
        print(json.dumps(transformed, indent=2))


if __name__ == "__main__":
    main()
