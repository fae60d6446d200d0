"""FastAPI application exposing the admin import endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..catalog import CatalogStore, CatalogStoreError, StorefrontAPIClient
from ..extraction import FetchError, PageFetcher
from ..importer import FLOW_BRANDS, FLOW_FROM_URL, FLOW_PRODUCTS, CatalogImporter
from ..models import ImportRequest, ImportResult, InvalidImportRequest

logger = logging.getLogger(__name__)


@lru_cache()
def get_store() -> CatalogStore:
    try:
        return StorefrontAPIClient.from_env()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Catalog store is not configured",
        ) from exc


def get_fetcher() -> PageFetcher:
    return PageFetcher()


def get_importer(
    store: CatalogStore = Depends(get_store),
    fetcher: PageFetcher = Depends(get_fetcher),
) -> CatalogImporter:
    return CatalogImporter(store, fetcher=fetcher)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    if get_store.cache_info().currsize:
        get_store().close()


app = FastAPI(title="Partner Import API", lifespan=lifespan)


class ImportBrandsRequest(BaseModel):
    url: Optional[str] = None
    deleteExisting: bool = False


class ImportProductsRequest(BaseModel):
    url: Optional[str] = None
    maxProducts: Optional[int] = None


@app.exception_handler(RequestValidationError)
async def invalid_body(_: Request, __: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


def _run_import(
    importer: CatalogImporter,
    payload: Dict[str, Any],
    flow: str,
    run: Callable[[ImportRequest], ImportResult],
):
    try:
        request = importer.build_request(payload, flow)
    except InvalidImportRequest as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})

    try:
        result = run(request)
    except FetchError as e:
        logger.error("Import failed (%s): %s", flow, e)
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(e)})
    except CatalogStoreError as e:
        logger.error("Catalog unavailable during %s: %s", flow, e)
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(e)})

    return result.to_dict()


@app.get("/health")
def healthcheck():
    return {"status": "ok"}


@app.post("/api/admin/import-brands")
def import_brands(payload: ImportBrandsRequest, importer: CatalogImporter = Depends(get_importer)):
    return _run_import(importer, payload.model_dump(exclude_none=True), FLOW_BRANDS, importer.import_brands)


@app.post("/api/admin/import-from-url")
def import_from_url(payload: ImportProductsRequest, importer: CatalogImporter = Depends(get_importer)):
    return _run_import(importer, payload.model_dump(exclude_none=True), FLOW_FROM_URL, importer.import_from_url)


@app.post("/api/admin/import-products")
def import_products(payload: ImportProductsRequest, importer: CatalogImporter = Depends(get_importer)):
    return _run_import(importer, payload.model_dump(exclude_none=True), FLOW_PRODUCTS, importer.import_products)
