"""Structured Results — what the core hands back instead of raising.

Invariants:
    - Validation and allocation failures are data, not exceptions, once they leave services/
    - error fields hold an OrderDocsError so callers keep code/category/retryable
    - DirectoryWarning codes separate "call failed" from "call succeeded, not yet visible"

Design Decisions:
    - Frozen dataclasses over dicts: typed fields for routes and tests,
      to_dict() for JSON responses
"""

import os
from dataclasses import dataclass, field

from orderdocs.core.domain_types import StorageSource
from orderdocs.core.errors import OrderDocsError


@dataclass(frozen=True)
class PathValidation:
    """Outcome of validating one candidate storage path."""
    valid: bool
    writable: bool
    path: str | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def usable(self) -> bool:
        return self.valid and self.writable

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "writable": self.writable,
            "path": self.path,
            "error": self.error,
            "error_code": self.error_code,
        }


@dataclass(frozen=True)
class ResolvedBasePath:
    """Effective artifact root and where it came from."""
    path: str
    is_user_configured: bool
    source: StorageSource

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "is_user_configured": self.is_user_configured,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class IdentifierAllocation:
    """Allocated identifier, or the reason none could be issued."""
    identifier: str | None
    sequence: int | None
    prefix: str
    year: int
    attempts: int
    error: OrderDocsError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.identifier is not None


# Directory warning codes
FOLDER_NOT_VISIBLE = "FOLDER_NOT_VISIBLE"
SUBFOLDER_CREATE_FAILED = "SUBFOLDER_CREATE_FAILED"
SUBFOLDER_NOT_VISIBLE = "SUBFOLDER_NOT_VISIBLE"
WRITE_TEST_FAILED = "WRITE_TEST_FAILED"
PROBE_CLEANUP_FAILED = "PROBE_CLEANUP_FAILED"


@dataclass(frozen=True)
class DirectoryWarning:
    code: str
    message: str
    path: str

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "path": self.path}


@dataclass(frozen=True)
class DirectoryResult:
    """Outcome of ensuring an identifier's folder tree."""
    success: bool
    path: str | None
    warnings: list[DirectoryWarning] = field(default_factory=list)
    error: OrderDocsError | None = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "path": self.path,
            "warnings": [w.to_dict() for w in self.warnings],
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class ArtifactName:
    """Where the next artifact of a category goes."""
    filename: str
    directory: str
    sequence: int
    is_revision: bool
    revision_number: int

    @property
    def path(self) -> str:
        return os.path.join(self.directory, self.filename)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "path": self.path,
            "sequence": self.sequence,
            "is_revision": self.is_revision,
            "revision_number": self.revision_number,
        }


@dataclass(frozen=True)
class WriteOutcome:
    saved: bool
    path: str
    error: OrderDocsError | None = None


@dataclass(frozen=True)
class FiledReport:
    """Generated report plus its filing status. content is always present."""
    content: bytes
    saved: bool
    name: ArtifactName | None = None
    warning: str | None = None

    def to_dict(self) -> dict:
        return {
            "saved": self.saved,
            "filename": self.name.filename if self.name else None,
            "path": self.name.path if self.saved and self.name else None,
            "sequence": self.name.sequence if self.name else None,
            "is_revision": self.name.is_revision if self.name else False,
            "revision_number": self.name.revision_number if self.name else None,
            "warning": self.warning,
        }


@dataclass(frozen=True)
class CreatedWorkOrder:
    """Persisted work order plus the state of its folder tree."""
    id: int
    identifier: str
    name: str
    tenant_id: int | None
    directory: DirectoryResult

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "identifier": self.identifier,
            "name": self.name,
            "tenant_id": self.tenant_id,
            "directory": self.directory.to_dict(),
        }
