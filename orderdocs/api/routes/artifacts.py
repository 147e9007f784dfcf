"""Artifact Routes — next artifact name and filing of generated report PDFs.

Invariants:
    - POST .../reports/{category} always answers 200 with the submitted PDF bytes;
      filing status travels in X-Report-* headers
    - Unknown report categories are rejected by path validation (400)
"""

import logging
from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from orderdocs.api.dependencies import get_namer, get_report_filing, get_tenant_id
from orderdocs.core.domain_types import ReportCategory
from orderdocs.schemas.work_order import ArtifactNameResponse
from orderdocs.services.artifact_namer import ArtifactNamer
from orderdocs.services.report_filing import ReportFiling

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/work-orders", tags=["artifacts"])


@router.get("/{identifier}/artifacts/next-name", response_model=ArtifactNameResponse)
async def next_artifact_name(
    identifier: str,
    category: ReportCategory,
    field_date: date | None = None,
    regenerate: bool = False,
    tenant_id: int | None = Depends(get_tenant_id),
    namer: ArtifactNamer = Depends(get_namer),
):
    """Preview the filename the next report of this category would get."""
    name = await namer.next_name(identifier, category, field_date, tenant_id, regenerate)
    return name.to_dict()


@router.post("/{identifier}/reports/{category}")
async def file_report(
    identifier: str,
    category: ReportCategory,
    request: Request,
    field_date: date | None = Query(None),
    regenerate: bool = Query(False),
    tenant_id: int | None = Depends(get_tenant_id),
    filing: ReportFiling = Depends(get_report_filing),
):
    """Save a generated PDF next to its siblings and hand it back."""
    content = await request.body()
    filed = await filing.file_report(
        identifier, category, content, field_date, tenant_id, regenerate,
    )
    info = filed.to_dict()
    headers = {"X-Report-Saved": "true" if filed.saved else "false"}
    if info["filename"]:
        headers["X-Report-Filename"] = info["filename"]
        headers["Content-Disposition"] = f"inline; filename=\"{info['filename']}\""
    if info["revision_number"]:
        headers["X-Report-Revision"] = str(info["revision_number"])
    if filed.warning:
        headers["X-Report-Warning"] = quote(filed.warning)
    return Response(content=filed.content, media_type="application/pdf", headers=headers)
