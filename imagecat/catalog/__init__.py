"""
Catalog package for the image catalog API.

This package holds the request handler that validates and applies
catalog operations, the persistence contract it depends on (with
in-memory and SQLAlchemy implementations), the authorization check,
and the FastAPI routes that expose everything under ``/image``.
"""

from .router import router as catalog_router  # noqa: F401
