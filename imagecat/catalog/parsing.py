"""
Coercion helpers for raw request values.

Form and path parameters arrive as strings. These helpers turn them
into the typed values stored on an ``Image`` and raise
``ValidationError`` when a value cannot be used.
"""

import re
from datetime import date, datetime
from typing import List, Optional

from .errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_ID_RE = re.compile(r"[0-9]+")


def parse_date(value: Optional[str], field: str = "capture") -> date:
    """Parse a ``yyyy-mm-dd`` string into a ``date``."""
    if value is None:
        raise ValidationError(f"Missing required field: {field}")
    text = value.strip()
    try:
        if not _DATE_RE.fullmatch(text):
            raise ValueError(text)
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(
            f"Unparseable date for {field}: {value!r} (expected yyyy-mm-dd)"
        ) from None


def split_keywords(value: str) -> List[str]:
    """Split a comma-separated keyword string.

    Whitespace around each keyword is trimmed and empty entries are
    dropped, so ``"a, b ,c"`` gives ``["a", "b", "c"]`` and ``""`` gives
    ``[]``. Order and duplicates are preserved.
    """
    parts = (part.strip() for part in value.split(","))
    return [part for part in parts if part]


def parse_image_id(value: Optional[str]) -> int:
    """Coerce an identifier parameter to a positive integer."""
    if value is None or not value.strip():
        raise ValidationError("Missing image ID")
    text = value.strip()
    if not _ID_RE.fullmatch(text) or int(text) <= 0:
        raise ValidationError(f"Invalid image ID: {value!r}")
    return int(text)
