"""Work Order Routes — create work orders, allocate identifiers, ensure folder trees.

Invariants:
    - Allocation exhaustion surfaces as 503 with retryable=true (client may resend)
    - Folder trouble on create is reported in the body, the work order still exists (201)
    - POST /{identifier}/directory maps a failed ensure to the error's status
      (500, or 400 for an identifier that resolves outside the storage root)
"""

import logging

from fastapi import APIRouter, Depends, status

from orderdocs.api.dependencies import (
    get_directory_manager,
    get_identifier_service,
    get_tenant_id,
    get_work_orders,
)
from orderdocs.schemas.work_order import (
    DirectoryRequest,
    DirectoryResponse,
    IdentifierRequest,
    IdentifierResponse,
    WorkOrderCreate,
    WorkOrderResponse,
)
from orderdocs.services.directory_manager import DirectoryManager
from orderdocs.services.identifier_service import IdentifierService
from orderdocs.services.work_orders import WorkOrders

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/work-orders", tags=["work-orders"])


@router.post(
    "", response_model=WorkOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_work_order(
    body: WorkOrderCreate,
    tenant_id: int | None = Depends(get_tenant_id),
    work_orders: WorkOrders = Depends(get_work_orders),
):
    """Allocate an identifier, store the work order, create its folders."""
    created = await work_orders.create(body.name, tenant_id)
    return created.to_dict()


@router.post(
    "/identifiers", response_model=IdentifierResponse,
    status_code=status.HTTP_201_CREATED,
)
async def allocate_identifier(
    body: IdentifierRequest | None = None,
    tenant_id: int | None = Depends(get_tenant_id),
    identifiers: IdentifierService = Depends(get_identifier_service),
):
    """Allocate the next free identifier without creating a work order."""
    year = body.year if body else None
    allocation = await identifiers.allocate_identifier(tenant_id, year)
    if not allocation.ok:
        raise allocation.error
    return IdentifierResponse(
        identifier=allocation.identifier,
        sequence=allocation.sequence,
        prefix=allocation.prefix,
        year=allocation.year,
        attempts=allocation.attempts,
    )


@router.post("/{identifier}/directory", response_model=DirectoryResponse)
async def ensure_directory(
    identifier: str,
    body: DirectoryRequest | None = None,
    tenant_id: int | None = Depends(get_tenant_id),
    directories: DirectoryManager = Depends(get_directory_manager),
):
    """Create (or confirm) the folder tree for an identifier."""
    categories = body.categories if body else None
    result = await directories.ensure(identifier, tenant_id, categories)
    if not result.success:
        raise result.error
    return result.to_dict()
