"""Reference Document Routes — upload, list, delete drawings for a work order.

Invariants:
    - Upload body is the raw PDF; the original name comes from the filename query param
    - DELETE of a missing document answers 404
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status

from orderdocs.api.dependencies import get_reference_documents, get_tenant_id
from orderdocs.services.reference_documents import ReferenceDocuments

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/work-orders", tags=["reference-documents"])


@router.get("/{identifier}/reference-documents")
async def list_reference_documents(
    identifier: str,
    tenant_id: int | None = Depends(get_tenant_id),
    documents: ReferenceDocuments = Depends(get_reference_documents),
):
    return {"documents": await documents.list_documents(identifier, tenant_id)}


@router.post("/{identifier}/reference-documents", status_code=status.HTTP_201_CREATED)
async def upload_reference_document(
    identifier: str,
    request: Request,
    filename: str = Query(..., min_length=1, max_length=255),
    tenant_id: int | None = Depends(get_tenant_id),
    documents: ReferenceDocuments = Depends(get_reference_documents),
):
    stored = await documents.save(identifier, filename, await request.body(), tenant_id)
    return {"filename": stored}


@router.delete(
    "/{identifier}/reference-documents/{filename}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_reference_document(
    identifier: str,
    filename: str,
    tenant_id: int | None = Depends(get_tenant_id),
    documents: ReferenceDocuments = Depends(get_reference_documents),
):
    await documents.delete(identifier, filename, tenant_id)
