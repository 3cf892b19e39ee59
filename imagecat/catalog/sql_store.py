"""
SQLAlchemy-backed ``ImageStore``.

Records live in a single ``images`` table. Each store call opens its
own session, so one store instance can be shared across request
threads. Database errors are re-raised as ``PersistenceError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, timezone
from typing import Iterator, List, Optional

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import PersistenceError
from .schemas import Image, ImageFields
from .store import ImageStore

logger = logging.getLogger(__name__)

Base = declarative_base()


class ImageRow(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    keywords = Column(JSON, nullable=False, default=list)
    author = Column(String, nullable=False, index=True)
    creator = Column(String, nullable=False)
    capture_date = Column(Date, nullable=False, index=True)
    storage_date = Column(DateTime(timezone=True), nullable=False)
    payload = Column(Text, nullable=False)


def _to_image(row: ImageRow) -> Image:
    storage_date = row.storage_date
    # SQLite hands datetimes back without tzinfo
    if storage_date.tzinfo is None:
        storage_date = storage_date.replace(tzinfo=timezone.utc)
    return Image(
        id=row.id,
        title=row.title,
        description=row.description,
        keywords=list(row.keywords or []),
        author=row.author,
        creator=row.creator,
        capture_date=row.capture_date,
        storage_date=storage_date,
        payload=row.payload,
    )


class SqlImageStore(ImageStore):
    def __init__(self, url: str):
        engine_kwargs = {}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty db
                engine_kwargs["poolclass"] = StaticPool
        self._engine = create_engine(url, **engine_kwargs)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Database error: %s", exc)
            raise PersistenceError(f"Database error: {exc}") from exc
        except PersistenceError:
            session.rollback()
            raise
        finally:
            session.close()

    def insert_image(self, fields: ImageFields) -> int:
        with self._session() as session:
            values = fields.model_dump()
            # stored as naive UTC; _to_image re-attaches the zone
            values["storage_date"] = fields.storage_date.astimezone(timezone.utc)
            row = ImageRow(**values)
            session.add(row)
            session.flush()
            return row.id

    def get_image_by_id(self, image_id: int) -> Optional[Image]:
        with self._session() as session:
            row = session.get(ImageRow, image_id)
            return _to_image(row) if row is not None else None

    def update_image(self, image_id: int, image: Image) -> None:
        with self._session() as session:
            row = session.get(ImageRow, image_id)
            if row is None:
                raise PersistenceError(f"No image stored with id {image_id}")
            row.title = image.title
            row.description = image.description
            row.keywords = list(image.keywords)
            row.author = image.author
            row.creator = image.creator
            row.capture_date = image.capture_date
            row.payload = image.payload

    def delete_image_by_id(self, image_id: int) -> None:
        with self._session() as session:
            row = session.get(ImageRow, image_id)
            if row is None:
                raise PersistenceError(f"No image stored with id {image_id}")
            session.delete(row)

    def _query(self, *criteria) -> List[Image]:
        with self._session() as session:
            rows = session.query(ImageRow).filter(*criteria).order_by(ImageRow.id).all()
            return [_to_image(row) for row in rows]

    def get_all_images(self) -> List[Image]:
        return self._query()

    def search_image_by_title(self, title: str) -> List[Image]:
        return self._query(ImageRow.title == title)

    def get_image_by_creation_date(self, capture_date: date) -> List[Image]:
        return self._query(ImageRow.capture_date == capture_date)

    def get_image_by_author(self, author: str) -> List[Image]:
        return self._query(ImageRow.author == author)

    def get_image_by_keywords(self, keywords: List[str]) -> List[Image]:
        # JSON containment is dialect specific; filter after loading
        wanted = set(keywords)
        return [image for image in self._query() if wanted.issubset(image.keywords)]
