"""
Service configuration, read from environment variables.

Environment variables:
    CATALOG_API_TOKENS: comma-separated tokens accepted in the
        ``Authorization`` header (default: none, every request denied).
    CATALOG_LOGIN_URL: redirect target for unauthorized requests
        (default '/login').
    CATALOG_STORE: 'memory' (default) or 'sql'.
    CATALOG_DATABASE_URL: SQLAlchemy URL used by the 'sql' store
        (default 'sqlite:///./catalog.db').
    CATALOG_OWNER_CHECKED: comma-separated operations that require the
        caller-supplied creator to match the stored one (default 'delete').
    LOG_LEVEL: root log level (default 'INFO').
"""

from __future__ import annotations

import os
from typing import FrozenSet, Mapping, Optional

from pydantic import BaseModel
from typing_extensions import Literal

StoreName = Literal["memory", "sql"]
OwnerCheckedOp = Literal["update", "delete"]


def _split_csv(value: str) -> FrozenSet[str]:
    return frozenset(part.strip() for part in value.split(",") if part.strip())


class Settings(BaseModel):
    api_tokens: FrozenSet[str] = frozenset()
    login_url: str = "/login"
    store: StoreName = "memory"
    database_url: str = "sqlite:///./catalog.db"
    owner_checked: FrozenSet[OwnerCheckedOp] = frozenset({"delete"})
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` by default).

        Raises ``ValueError`` (pydantic's ``ValidationError``) for an
        unknown store name or ownership-checked operation.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_tokens=_split_csv(env.get("CATALOG_API_TOKENS", "")),
            login_url=env.get("CATALOG_LOGIN_URL", "/login"),
            store=env.get("CATALOG_STORE", "memory").strip().lower(),
            database_url=env.get("CATALOG_DATABASE_URL", "sqlite:///./catalog.db"),
            owner_checked=_split_csv(env.get("CATALOG_OWNER_CHECKED", "delete").lower()),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
