# imagecat/main.py
import logging
import os
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .catalog import catalog_router
from .catalog.auth import TokenAuthorizer
from .catalog.handler import CatalogHandler
from .catalog.store import ImageStore, InMemoryImageStore
from .config import Settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ImageStore:
    if settings.store == "sql":
        # imported lazily so the memory store does not need a database driver
        from .catalog.sql_store import SqlImageStore

        return SqlImageStore(settings.database_url)
    return InMemoryImageStore()


def create_app(settings: Optional[Settings] = None, store: Optional[ImageStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Image Catalog",
        description=(
            "Catalog of image records (metadata + base64 payload). "
            "Register, update, delete, list and search images."
        ),
        version="1.0.0",
    )
    app.state.handler = CatalogHandler(
        store if store is not None else build_store(settings),
        TokenAuthorizer(settings.api_tokens),
        login_url=settings.login_url,
        owner_checked=settings.owner_checked,
    )
    logger.info(
        "Image catalog ready (store=%s, owner-checked=%s)",
        settings.store if store is None else type(store).__name__,
        sorted(settings.owner_checked),
    )

    # Health check
    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Image catalog live"}

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"status": 500, "error": str(exc)})

    app.include_router(catalog_router)
    return app


def serve() -> None:
    """Run the service with uvicorn (``imagecat`` console script).

    ``CATALOG_HOST`` / ``CATALOG_PORT`` pick the bind address. The
    factory form means the app is built from the environment at start-up.
    """
    uvicorn.run(
        "imagecat.main:create_app",
        factory=True,
        host=os.getenv("CATALOG_HOST", "127.0.0.1"),
        port=int(os.getenv("CATALOG_PORT", "8000")),
    )


app = create_app()


if __name__ == "__main__":
    serve()
