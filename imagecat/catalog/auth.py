"""
Authorization check invoked first by every catalog operation.

Only the invocation contract matters to the handler: given the request
headers, answer authorized or not. ``TokenAuthorizer`` is the shipped
implementation and compares the ``Authorization`` header against a set
of shared tokens.
"""

from __future__ import annotations

import hmac
from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional


class Authorizer(ABC):
    @abstractmethod
    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        """Return ``True`` when the request may proceed."""


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


class TokenAuthorizer(Authorizer):
    """Accept ``Authorization: Bearer <token>`` or a bare ``<token>``.

    An empty token set denies every request.
    """

    def __init__(self, tokens: Iterable[str]):
        self._tokens = frozenset(t for t in tokens if t)

    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        raw = _header(headers, "Authorization")
        if not raw:
            return False
        scheme, _, rest = raw.strip().partition(" ")
        token = rest.strip() if scheme.lower() == "bearer" else raw.strip()
        if not token:
            return False
        candidate = token.encode("utf-8")
        return any(hmac.compare_digest(candidate, t.encode("utf-8")) for t in self._tokens)
