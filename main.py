"""
Main API module for tinylink.

Responsibilities:
    - Create links under the access-key protected management path
    - Redirect by key (/l/<key>) or alias (/a/<alias>)
    - Delete single links, or reset the whole repository

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - The link store is selected by TLNK_STORAGE_BACKEND (flat file by default)
      and initialized when the app is built.
    - LinkManager owns validation, alias normalization and key allocation.

Run with:
    uvicorn main:create_app --factory
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from auth.config import resolve_access_key
from auth.dependencies import require_access_key
from tinylink.config import settings
from tinylink.errors import AddressSpaceExhausted, StorageIOError
from tinylink.manager.key_generator import KeyGenerator
from tinylink.manager.link_manager import LinkManager
from tinylink.storage.base import BaseLinkStore
from tinylink.storage.storage_factory import get_storage


class CreationRequest(BaseModel):
    """Body of a creation request: the domain the caller used and the target URL."""

    model_config = ConfigDict(populate_by_name=True)

    service_domain: str = Field(alias="serviceDomain")
    url: str


def create_app(
    storage: Optional[BaseLinkStore] = None,
    key_generator: Optional[KeyGenerator] = None,
    access_key: Optional[str] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseLinkStore]): Store to use; built from config when omitted.
            It is initialized here either way.
        key_generator (Optional[KeyGenerator]): Injected for deterministic tests.
        access_key (Optional[str]): Overrides TLNK_ACCESS_KEY / the generated key.

    Returns:
        FastAPI: A configured application; the access key is on `app.state.access_key`.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level())
    log = logging.getLogger("tinylink")

    app = FastAPI(
        title="tinylink",
        description="Another URL shortener, backed by a flat JSON file.",
        docs_url="/docs",
    )

    if storage is None:
        storage = get_storage()
    storage.initialize()
    manager = LinkManager(storage=storage, key_generator=key_generator)

    app.state.access_key = resolve_access_key(access_key)
    app.state.storage = storage
    app.state.manager = manager

    # ----------------------------------------------------------------
    # Utilities
    # ----------------------------------------------------------------
    def _redirect(url: Optional[str]) -> Response:
        if url is None:
            raise HTTPException(status_code=404, detail="Link not found")
        return RedirectResponse(url=url, status_code=302)

    def _deleted(ok: bool) -> Response:
        if not ok:
            raise HTTPException(status_code=404, detail="Link not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/", response_class=PlainTextResponse)
    def home() -> str:
        return "Another URL shortener."

    @app.get("/health")
    def health():
        return {"status": "ok", "links": len(storage)}

    @app.post("/k{access_key}/lnk", dependencies=[Depends(require_access_key)])
    def create(
        req: CreationRequest,
        alias: Optional[str] = Query(None, description="Optional vanity alias."),
        check_reachable: bool = Query(False, description="Verify the URL responds before creating."),
    ) -> Response:
        """
        Create a link and return it as plain text (201).

        Errors:
            400 invalid URL/alias, 409 alias or key taken, 500 storage failure
            or exhausted key space.
        """
        try:
            record = manager.create_link(req.url, alias or None, check_reachable=check_reachable)
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))
        except (StorageIOError, AddressSpaceExhausted) as exc:
            log.error("Internal Error: %s", exc)
            return PlainTextResponse("System failure", status_code=500)

        if record is None:
            what = "Alias" if alias else "Link"
            raise HTTPException(status_code=409, detail=f"{what} already exists")

        return PlainTextResponse(
            manager.format_link(record, req.service_domain), status_code=status.HTTP_201_CREATED
        )

    @app.delete("/k{access_key}/lnk", dependencies=[Depends(require_access_key)])
    def reset_repository() -> Response:
        """Delete every link."""
        try:
            storage.delete_all()
        except StorageIOError as exc:
            log.error("Reset failed: %s", exc)
            return PlainTextResponse("System failure", status_code=500)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/l/{key}")
    def redirect_by_key(key: str) -> Response:
        return _redirect(manager.resolve_key(key))

    @app.get("/a/{alias}")
    def redirect_by_alias(alias: str) -> Response:
        return _redirect(manager.resolve_alias(alias))

    @app.delete("/l/{key}")
    def delete_by_key(key: str) -> Response:
        try:
            return _deleted(storage.delete_by_key(key))
        except StorageIOError as exc:
            log.error("Delete of key %s failed: %s", key, exc)
            return PlainTextResponse("System failure", status_code=500)

    @app.delete("/a/{alias}")
    def delete_by_alias(alias: str) -> Response:
        try:
            return _deleted(storage.delete_by_alias(alias))
        except StorageIOError as exc:
            log.error("Delete of alias %s failed: %s", alias, exc)
            return PlainTextResponse("System failure", status_code=500)

    return app
