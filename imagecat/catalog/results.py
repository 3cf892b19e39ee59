"""
Outcome types returned by every ``CatalogHandler`` operation.

The handler never builds HTTP responses; the router turns these into
a redirect, a success envelope or an error envelope.
"""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Optional, Union

from .errors import FailureKind


@dataclass(frozen=True)
class Success:
    status: HTTPStatus = HTTPStatus.OK
    message: Optional[str] = None
    data: Any = None


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class Redirect:
    """The caller is not authorized and should be sent to ``location``."""

    location: str


Outcome = Union[Success, Failure, Redirect]
