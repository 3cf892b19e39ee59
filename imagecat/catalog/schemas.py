"""
Pydantic schema definitions for the image catalog.

The ``Image`` model is the single record type managed by the service:
descriptive metadata plus the encoded image payload. ``ImageFields``
carries everything the store needs to create a new record (the store
assigns the identifier). The envelope models describe the uniform JSON
body returned by every non-redirect response.
"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ImageFields(BaseModel):
    """Attributes of an image record, without its identifier."""

    title: str
    description: str
    keywords: List[str] = Field(default_factory=list)
    author: str
    # The creator doubles as the ownership principal for deletes.
    creator: str
    capture_date: date
    # Set once by the server when the record is registered.
    storage_date: datetime
    # Encoded (base64) image; never inspected by the catalog.
    payload: str


class Image(ImageFields):
    """A stored image record. ``id`` is assigned by the store."""

    id: int


class SuccessEnvelope(BaseModel):
    """Body of a successful response.

    Mutations fill ``message``; read operations fill ``data`` with a
    single ``Image`` or a list of them.
    """

    status: int
    message: Optional[str] = None
    data: Any = None


class ErrorEnvelope(BaseModel):
    status: int
    error: str
