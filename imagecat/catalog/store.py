"""
Persistence contract for the image catalog.

``ImageStore`` is the collaborator the handler depends on for all
durable state; handlers depend on this interface, not on an
implementation. ``InMemoryImageStore`` keeps records in a dict and is
the default backend (and the one used in tests). A SQLAlchemy backend
lives in ``sql_store``.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from .errors import PersistenceError
from .schemas import Image, ImageFields


class ImageStore(ABC):
    """Operations the catalog needs from a durable store.

    Every method may raise ``PersistenceError``. Implementations must be
    safe to share between concurrent requests.
    """

    @abstractmethod
    def insert_image(self, fields: ImageFields) -> int:
        """Create a record and return its new identifier."""

    @abstractmethod
    def get_image_by_id(self, image_id: int) -> Optional[Image]:
        """Return the record, or ``None`` when no record has this id."""

    @abstractmethod
    def update_image(self, image_id: int, image: Image) -> None:
        """Overwrite the mutable attributes of an existing record.

        Raises:
            PersistenceError: If no record has this id.
        """

    @abstractmethod
    def delete_image_by_id(self, image_id: int) -> None:
        """Remove a record.

        Raises:
            PersistenceError: If no record has this id.
        """

    @abstractmethod
    def get_all_images(self) -> List[Image]:
        """Return every record, ordered by identifier."""

    @abstractmethod
    def search_image_by_title(self, title: str) -> List[Image]:
        """Records whose title matches exactly."""

    @abstractmethod
    def get_image_by_creation_date(self, capture_date: date) -> List[Image]:
        """Records captured on the given day."""

    @abstractmethod
    def get_image_by_author(self, author: str) -> List[Image]:
        """Records whose author matches exactly."""

    @abstractmethod
    def get_image_by_keywords(self, keywords: List[str]) -> List[Image]:
        """Records whose keyword list contains every given keyword."""


class InMemoryImageStore(ImageStore):
    """Dict-backed store. All access is serialised with a lock."""

    def __init__(self) -> None:
        self._images: Dict[int, Image] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def insert_image(self, fields: ImageFields) -> int:
        with self._lock:
            image_id = self._next_id
            self._images[image_id] = Image(id=image_id, **fields.model_dump())
            self._next_id += 1
            return image_id

    def get_image_by_id(self, image_id: int) -> Optional[Image]:
        with self._lock:
            image = self._images.get(image_id)
            return image.model_copy(deep=True) if image is not None else None

    def update_image(self, image_id: int, image: Image) -> None:
        with self._lock:
            current = self._images.get(image_id)
            if current is None:
                raise PersistenceError(f"No image stored with id {image_id}")
            # id and storage date stay as stored
            self._images[image_id] = image.model_copy(
                update={"id": current.id, "storage_date": current.storage_date},
                deep=True,
            )

    def delete_image_by_id(self, image_id: int) -> None:
        with self._lock:
            if self._images.pop(image_id, None) is None:
                raise PersistenceError(f"No image stored with id {image_id}")

    def _select(self, predicate) -> List[Image]:
        with self._lock:
            return [
                self._images[k].model_copy(deep=True)
                for k in sorted(self._images)
                if predicate(self._images[k])
            ]

    def get_all_images(self) -> List[Image]:
        return self._select(lambda image: True)

    def search_image_by_title(self, title: str) -> List[Image]:
        return self._select(lambda image: image.title == title)

    def get_image_by_creation_date(self, capture_date: date) -> List[Image]:
        return self._select(lambda image: image.capture_date == capture_date)

    def get_image_by_author(self, author: str) -> List[Image]:
        return self._select(lambda image: image.author == author)

    def get_image_by_keywords(self, keywords: List[str]) -> List[Image]:
        wanted = set(keywords)
        return self._select(lambda image: wanted.issubset(image.keywords))
