"""Storage Settings Routes — view, test and change the configured artifact path.

Invariants:
    - PUT stores nothing unless the path is valid and writable (400 with the validation)
    - POST /test never stores anything
    - Header X-User-ID is recorded as updated_by when present
"""

import logging

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse

from orderdocs.api.dependencies import get_storage_settings, get_tenant_id, get_validator
from orderdocs.core.errors import ErrorContext, PathValidationError
from orderdocs.schemas.storage import (
    PathValidationResponse,
    StoragePathResponse,
    StoragePathStatusResponse,
    StoragePathTest,
    StoragePathUpdate,
)
from orderdocs.services.path_validator import PathValidator
from orderdocs.services.storage_settings import StorageSettings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/settings/storage-path", tags=["settings"])


@router.get("", response_model=StoragePathResponse)
async def get_storage_path(
    tenant_id: int | None = Depends(get_tenant_id),
    storage: StorageSettings = Depends(get_storage_settings),
):
    return {"path": await storage.get_configured_path(tenant_id)}


@router.put("", response_model=StoragePathResponse)
async def set_storage_path(
    body: StoragePathUpdate,
    tenant_id: int | None = Depends(get_tenant_id),
    x_user_id: str | None = Header(None),
    storage: StorageSettings = Depends(get_storage_settings),
):
    rejected = await storage.set_configured_path(body.path, tenant_id, x_user_id)
    if rejected:
        error = PathValidationError(
            rejected.error, rejected.error_code,
            ErrorContext(tenant_id=tenant_id, path=rejected.path),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={**error.to_response(), "validation": rejected.to_dict()},
        )
    return {"path": await storage.get_configured_path(tenant_id)}


@router.post("/test", response_model=PathValidationResponse)
async def test_storage_path(
    body: StoragePathTest,
    validator: PathValidator = Depends(get_validator),
):
    """Validate a candidate path without saving it."""
    return (await validator.validate(body.path)).to_dict()


@router.get("/status", response_model=StoragePathStatusResponse)
async def storage_path_status(
    tenant_id: int | None = Depends(get_tenant_id),
    storage: StorageSettings = Depends(get_storage_settings),
):
    return await storage.path_status(tenant_id)
