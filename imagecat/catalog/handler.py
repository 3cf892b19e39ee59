"""
Request handling for the image catalog.

``CatalogHandler`` sits between the transport and the store. Each
public method corresponds to one endpoint: it runs the authorization
gate, coerces the raw string parameters, applies the operation against
the injected ``ImageStore`` and returns an ``Outcome``.

Business errors are raised as ``CatalogError`` subclasses inside the
operation and converted to ``Failure`` by ``_run``; store failures
(``PersistenceError``) become ``Failure(PERSISTENCE)``. Nothing here is
retried.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Callable, Iterable, Mapping, Optional

from .auth import Authorizer
from .errors import (
    CatalogError,
    FailureKind,
    ForbiddenError,
    ImageNotFoundError,
    PersistenceError,
    ValidationError,
)
from .parsing import parse_date, parse_image_id, split_keywords
from .results import Failure, Outcome, Redirect, Success
from .schemas import Image, ImageFields
from .store import ImageStore

logger = logging.getLogger(__name__)

OWNER_CHECKABLE = frozenset({"update", "delete"})

Headers = Mapping[str, str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogHandler:
    """Catalog operations over an injected store.

    Parameters
    ----------
    store : ImageStore
        Shared persistence agent. The handler keeps no other state.
    authorizer : Authorizer
        Consulted first on every operation.
    login_url : str
        Redirect target for unauthorized requests.
    owner_checked : Iterable[str]
        Operations that require the supplied creator to match the
        stored one. Members must be ``"update"`` and/or ``"delete"``.
    clock : Callable[[], datetime], optional
        Source of the storage date for new records.
    """

    def __init__(
        self,
        store: ImageStore,
        authorizer: Authorizer,
        login_url: str = "/login",
        owner_checked: Iterable[str] = ("delete",),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        owner_checked = frozenset(owner_checked)
        unknown = owner_checked - OWNER_CHECKABLE
        if unknown:
            raise ValueError(f"Cannot ownership-check operations: {sorted(unknown)}")
        self.store = store
        self.authorizer = authorizer
        self.login_url = login_url
        self.owner_checked = owner_checked
        self._clock = clock or _utcnow

    def _run(self, operation: str, headers: Headers, action: Callable[[], Success]) -> Outcome:
        logger.info("Calling %s.", operation)
        if not self.authorizer.is_authorized(headers):
            logger.info("User is unauthorized - returning redirect")
            return Redirect(self.login_url)
        try:
            return action()
        except CatalogError as exc:
            logger.warning("%s rejected (%s): %s", operation, exc.kind.value, exc)
            return Failure(exc.kind, str(exc))
        except PersistenceError as exc:
            logger.error("Persistence error thrown in %s", operation, exc_info=exc)
            return Failure(FailureKind.PERSISTENCE, str(exc))

    def _check_owner(self, image: Image, creator: Optional[str]) -> None:
        if creator != image.creator:
            logger.info("Denying change to image %s - user is not its creator.", image.id)
            raise ForbiddenError("User is not creator of picture.")

    # -- mutations ---------------------------------------------------------

    def register(
        self,
        headers: Headers,
        title: Optional[str],
        description: Optional[str],
        keywords: Optional[str],
        author: Optional[str],
        creator: Optional[str],
        capture: Optional[str],
        payload: Optional[str],
    ) -> Outcome:
        def action() -> Success:
            supplied = {
                "title": title,
                "description": description,
                "keywords": keywords,
                "author": author,
                "creator": creator,
                "capture": capture,
                "file": payload,
            }
            missing = [name for name, value in supplied.items() if value is None]
            if missing:
                raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
            fields = ImageFields(
                title=title,
                description=description,
                keywords=split_keywords(keywords),
                author=author,
                creator=creator,
                capture_date=parse_date(capture),
                storage_date=self._clock(),
                payload=payload,
            )
            image_id = self.store.insert_image(fields)
            logger.info("Image registration successful (id=%s)", image_id)
            return Success(HTTPStatus.CREATED, "Successfully registered image.", {"id": image_id})

        return self._run("register", headers, action)

    def update(
        self,
        headers: Headers,
        image_id: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
        keywords: Optional[str] = None,
        author: Optional[str] = None,
        creator: Optional[str] = None,
        capture: Optional[str] = None,
        payload: Optional[str] = None,
    ) -> Outcome:
        """Partial update: only fields that are not ``None`` are replaced."""

        def action() -> Success:
            key = parse_image_id(image_id)
            image = self.store.get_image_by_id(key)
            if image is None:
                raise ValidationError("No image found with given ID")
            if "update" in self.owner_checked:
                self._check_owner(image, creator)

            changes = {}
            if title is not None:
                changes["title"] = title
            if description is not None:
                changes["description"] = description
            if keywords is not None:
                changes["keywords"] = split_keywords(keywords)
            if author is not None:
                changes["author"] = author
            if creator is not None:
                changes["creator"] = creator
            if capture is not None:
                changes["capture_date"] = parse_date(capture)
            if payload is not None:
                changes["payload"] = payload

            self.store.update_image(key, image.model_copy(update=changes))
            logger.info("Image update successful (id=%s, fields=%s)", key, sorted(changes))
            return Success(HTTPStatus.OK, "Successfully updated image.")

        return self._run("update", headers, action)

    def delete(self, headers: Headers, image_id: Optional[str], creator: Optional[str]) -> Outcome:
        def action() -> Success:
            key = parse_image_id(image_id)
            image = self.store.get_image_by_id(key)
            if image is None:
                raise ImageNotFoundError(f"No image found with ID {key}")
            if "delete" in self.owner_checked:
                self._check_owner(image, creator)
            self.store.delete_image_by_id(key)
            logger.info("Image deletion successful (id=%s)", key)
            return Success(HTTPStatus.OK, "Successfully deleted image.")

        return self._run("delete", headers, action)

    # -- reads -------------------------------------------------------------

    def list(self, headers: Headers) -> Outcome:
        return self._run("list", headers, lambda: Success(data=self.store.get_all_images()))

    def search_by_id(self, headers: Headers, image_id: Optional[str]) -> Outcome:
        def action() -> Success:
            key = parse_image_id(image_id)
            image = self.store.get_image_by_id(key)
            if image is None:
                raise ImageNotFoundError(f"No image found with ID {key}")
            return Success(data=image)

        return self._run("search by ID", headers, action)

    def search_by_title(self, headers: Headers, title: str) -> Outcome:
        return self._run(
            "search by title", headers,
            lambda: Success(data=self.store.search_image_by_title(title)),
        )

    def search_by_creation_date(self, headers: Headers, date_string: Optional[str]) -> Outcome:
        def action() -> Success:
            day = parse_date(date_string, field="date")
            return Success(data=self.store.get_image_by_creation_date(day))

        return self._run("search by creation date", headers, action)

    def search_by_author(self, headers: Headers, author: str) -> Outcome:
        return self._run(
            "search by author", headers,
            lambda: Success(data=self.store.get_image_by_author(author)),
        )

    def search_by_keywords(self, headers: Headers, keywords: Optional[str]) -> Outcome:
        def action() -> Success:
            wanted = split_keywords(keywords or "")
            if not wanted:
                raise ValidationError("At least one keyword is required")
            return Success(data=self.store.get_image_by_keywords(wanted))

        return self._run("search by keywords", headers, action)
