"""Work Order Schemas — request bodies and responses for identifier and folder endpoints.

Invariants:
    - WorkOrderCreate.name: 1-200 chars, stripped, non-empty
    - IdentifierRequest.year: four-digit year when given; omitted means current UTC year
"""

from pydantic import BaseModel, Field, field_validator

from orderdocs.core.domain_types import ReportCategory


class WorkOrderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class IdentifierRequest(BaseModel):
    year: int | None = Field(None, ge=2000, le=9999)


class IdentifierResponse(BaseModel):
    identifier: str
    sequence: int
    prefix: str
    year: int
    attempts: int


class DirectoryRequest(BaseModel):
    """Which category folders to create; None creates all of them."""
    categories: list[ReportCategory] | None = None


class DirectoryWarningResponse(BaseModel):
    code: str
    message: str
    path: str


class DirectoryResponse(BaseModel):
    success: bool
    path: str | None
    warnings: list[DirectoryWarningResponse] = []


class WorkOrderResponse(BaseModel):
    id: int
    identifier: str
    name: str
    tenant_id: int | None
    directory: DirectoryResponse


class ArtifactNameResponse(BaseModel):
    filename: str
    path: str
    sequence: int
    is_revision: bool
    revision_number: int
