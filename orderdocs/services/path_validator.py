"""Path Validator — checks a candidate storage path for existence, type and writability.

Invariants:
    - Never raises: every outcome is a PathValidation result
    - Checks run in order: required → foreign platform → illegal chars → traversal →
      existence → directory → writable; the first failure wins
    - Syntactic checks (core/path_rules.py) run before any filesystem call
    - Missing folder with an existing parent gets CREATE_FOLDER_FIRST, not PATH_NOT_FOUND
    - Writability is probed with os.access, nothing is written

Design Decisions:
    - os_name injectable: Windows rules are tested on POSIX runners
    - Filesystem part runs in one worker thread so slow network mounts do not block the loop
"""

import asyncio
import logging
import os

from orderdocs.core import path_rules
from orderdocs.core.results import PathValidation

logger = logging.getLogger(__name__)

PATH_REQUIRED = "PATH_REQUIRED"
FOREIGN_PLATFORM_PATH = "FOREIGN_PLATFORM_PATH"
ILLEGAL_CHARACTERS = "ILLEGAL_CHARACTERS"
PATH_TRAVERSAL = "PATH_TRAVERSAL"
CREATE_FOLDER_FIRST = "CREATE_FOLDER_FIRST"
PATH_NOT_FOUND = "PATH_NOT_FOUND"
NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
NOT_WRITABLE = "NOT_WRITABLE"
PATH_CHECK_FAILED = "PATH_CHECK_FAILED"
INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
OUTSIDE_STORAGE_ROOT = "OUTSIDE_STORAGE_ROOT"


def _invalid(path: str | None, code: str, message: str) -> PathValidation:
    return PathValidation(
        valid=False, writable=False, path=path, error=message, error_code=code,
    )


class PathValidator:
    """Validates user-configured storage locations."""

    def __init__(self, os_name: str = os.name):
        self.os_name = os_name

    async def validate(self, candidate: object) -> PathValidation:
        """Validate candidate; see module invariants for the check order."""
        if not isinstance(candidate, str) or not candidate.strip():
            return _invalid(None, PATH_REQUIRED, "Path is required")
        path = candidate.strip()

        reason = path_rules.foreign_platform_reason(path, self.os_name)
        if reason:
            return _invalid(path, FOREIGN_PLATFORM_PATH, reason)

        bad = path_rules.illegal_characters(path, self.os_name)
        if bad:
            return _invalid(
                path, ILLEGAL_CHARACTERS,
                f"Path contains characters not allowed in folder names: {' '.join(bad)}",
            )
        if path_rules.has_traversal(path):
            return _invalid(
                path, PATH_TRAVERSAL, "Path must not contain '..' segments",
            )

        try:
            return await asyncio.to_thread(self._check_filesystem, path)
        except OSError as e:
            logger.warning(f"Path check failed for {path}: {e}", extra={"path": path})
            return _invalid(path, PATH_CHECK_FAILED, f"Could not check path: {e.strerror or e}")

    def _check_filesystem(self, path: str) -> PathValidation:
        if not os.path.exists(path):
            parent = os.path.dirname(os.path.normpath(path))
            if parent and parent != path and os.path.isdir(parent):
                name = os.path.basename(os.path.normpath(path))
                return _invalid(
                    path, CREATE_FOLDER_FIRST,
                    f"The folder '{name}' does not exist yet. Create it inside "
                    f"'{parent}' first, then save this path again.",
                )
            return _invalid(path, PATH_NOT_FOUND, "Path does not exist")

        if not os.path.isdir(path):
            return _invalid(path, NOT_A_DIRECTORY, "Path is not a directory")

        if not os.access(path, os.W_OK):
            return PathValidation(
                valid=True, writable=False, path=path,
                error="Path is not writable", error_code=NOT_WRITABLE,
            )
        return PathValidation(valid=True, writable=True, path=path)
