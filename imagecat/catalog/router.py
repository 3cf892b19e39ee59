"""
Route definitions for the image catalog API.

Endpoints under /image:
- POST /register                   : register a new image (form-encoded)
- POST /update                     : partially update an image (form-encoded)
- POST /delete                     : delete an image owned by ``creator``
- GET  /list                       : list every image
- GET  /searchID/{id}              : one image by identifier
- GET  /searchTitle/{title}        : images with this exact title
- GET  /searchCreationDate/{date}  : images captured on ``yyyy-mm-dd``
- GET  /searchAuthor/{author}      : images by this author
- GET  /searchKeywords/{keywords}  : images tagged with every keyword

Every route hands the request headers and raw parameters to the
``CatalogHandler`` stored on ``app.state`` and renders its outcome.
Form fields are all optional here; the handler decides what is missing,
after the authorization gate has run.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from .errors import FailureKind
from .handler import CatalogHandler
from .results import Failure, Outcome, Redirect
from .schemas import ErrorEnvelope, SuccessEnvelope

FAILURE_STATUS = {
    FailureKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    FailureKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    FailureKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    FailureKind.PERSISTENCE: HTTPStatus.INTERNAL_SERVER_ERROR,
}

router = APIRouter(prefix="/image", tags=["image"])


def get_handler(request: Request) -> CatalogHandler:
    return request.app.state.handler


def render(outcome: Outcome) -> Response:
    """Translate a handler outcome into an HTTP response."""
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.location, status_code=HTTPStatus.SEE_OTHER)
    if isinstance(outcome, Failure):
        status = FAILURE_STATUS[outcome.kind]
        body = ErrorEnvelope(status=int(status), error=outcome.message)
        return JSONResponse(status_code=status, content=jsonable_encoder(body))
    body = SuccessEnvelope(
        status=int(outcome.status),
        message=outcome.message,
        data=jsonable_encoder(outcome.data),
    )
    return JSONResponse(status_code=outcome.status, content=jsonable_encoder(body))


@router.post("/register")
def register_image(
    request: Request,
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    keywords: Optional[str] = Form(default=None, description="Comma-separated tags"),
    author: Optional[str] = Form(default=None),
    creator: Optional[str] = Form(default=None),
    capture: Optional[str] = Form(default=None, description="Capture date, yyyy-mm-dd"),
    file: Optional[str] = Form(default=None, description="Base64-encoded image"),
    handler: CatalogHandler = Depends(get_handler),
) -> Response:
    return render(
        handler.register(
            request.headers,
            title=title,
            description=description,
            keywords=keywords,
            author=author,
            creator=creator,
            capture=capture,
            payload=file,
        )
    )


@router.post("/update")
def update_image(
    request: Request,
    image_id: Optional[str] = Form(default=None, alias="id"),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    keywords: Optional[str] = Form(default=None),
    author: Optional[str] = Form(default=None),
    creator: Optional[str] = Form(default=None),
    capture: Optional[str] = Form(default=None),
    file: Optional[str] = Form(default=None),
    handler: CatalogHandler = Depends(get_handler),
) -> Response:
    return render(
        handler.update(
            request.headers,
            image_id,
            title=title,
            description=description,
            keywords=keywords,
            author=author,
            creator=creator,
            capture=capture,
            payload=file,
        )
    )


@router.post("/delete")
def delete_image(
    request: Request,
    image_id: Optional[str] = Form(default=None, alias="id"),
    creator: Optional[str] = Form(default=None),
    handler: CatalogHandler = Depends(get_handler),
) -> Response:
    return render(handler.delete(request.headers, image_id, creator))


@router.get("/list")
def list_images(request: Request, handler: CatalogHandler = Depends(get_handler)) -> Response:
    return render(handler.list(request.headers))


@router.get("/searchID/{image_id}")
def search_by_id(
    image_id: str, request: Request, handler: CatalogHandler = Depends(get_handler)
) -> Response:
    return render(handler.search_by_id(request.headers, image_id))


@router.get("/searchTitle/{title}")
def search_by_title(
    title: str, request: Request, handler: CatalogHandler = Depends(get_handler)
) -> Response:
    return render(handler.search_by_title(request.headers, title))


@router.get("/searchCreationDate/{date}")
def search_by_creation_date(
    date: str, request: Request, handler: CatalogHandler = Depends(get_handler)
) -> Response:
    return render(handler.search_by_creation_date(request.headers, date))


@router.get("/searchAuthor/{author}")
def search_by_author(
    author: str, request: Request, handler: CatalogHandler = Depends(get_handler)
) -> Response:
    return render(handler.search_by_author(request.headers, author))


@router.get("/searchKeywords/{keywords}")
def search_by_keywords(
    keywords: str, request: Request, handler: CatalogHandler = Depends(get_handler)
) -> Response:
    return render(handler.search_by_keywords(request.headers, keywords))
