"""Storage Schemas — configured artifact path requests and responses."""

from pydantic import BaseModel, Field


class StoragePathUpdate(BaseModel):
    """New base path; null or blank clears the setting."""
    path: str | None = Field(None, max_length=1024)


class StoragePathTest(BaseModel):
    path: str = Field(max_length=1024)


class PathValidationResponse(BaseModel):
    valid: bool
    writable: bool
    path: str | None = None
    error: str | None = None
    error_code: str | None = None


class StoragePathResponse(BaseModel):
    path: str | None


class EffectivePathResponse(BaseModel):
    path: str
    is_user_configured: bool
    source: str


class StoragePathStatusResponse(BaseModel):
    configured: bool
    valid: bool
    writable: bool
    path: str | None
    error: str | None
    error_code: str | None
    effective: EffectivePathResponse
