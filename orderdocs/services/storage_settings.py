"""Storage Settings — read, validate-then-save, and report on the configured artifact path.

Invariants:
    - A non-blank path is stored only when it validates as valid AND writable
    - Blank or None clears the setting (value NULL), which lets resolution fall through
    - One row per (key, tenant_id); a concurrent first save turns into an update
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from orderdocs.core.domain_types import BASE_PATH_SETTING, SETTINGS_TABLE
from orderdocs.core.errors import UniqueViolationError
from orderdocs.core.path_rules import normalize_configured_path
from orderdocs.core.repository_protocols import RecordStore
from orderdocs.core.results import PathValidation
from orderdocs.services.path_validator import PathValidator
from orderdocs.services.storage_locator import BaseStorageLocator

logger = logging.getLogger(__name__)


class StorageSettings:
    def __init__(
        self,
        store: RecordStore,
        validator: PathValidator,
        locator: BaseStorageLocator,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.validator = validator
        self.locator = locator
        self.now = now

    async def get_configured_path(self, tenant_id: int | None = None) -> str | None:
        row = await self.store.get(
            SETTINGS_TABLE, {"key": BASE_PATH_SETTING, "tenant_id": tenant_id},
        )
        return row.get("value") if row else None

    async def set_configured_path(
        self,
        path: str | None,
        tenant_id: int | None = None,
        user_id: str | None = None,
    ) -> PathValidation | None:
        """Save path (or clear it when blank). Returns the failed validation, or None on success."""
        value = normalize_configured_path(path)
        if value is not None:
            validation = await self.validator.validate(value)
            if not validation.usable:
                logger.info(
                    f"Rejected storage path: {validation.error}",
                    extra={
                        "tenant_id": tenant_id, "path": value,
                        "error_code": validation.error_code,
                    },
                )
                return validation

        await self._upsert(value, tenant_id, user_id)
        logger.info(
            "Storage path cleared" if value is None else "Storage path saved",
            extra={"tenant_id": tenant_id, "path": value},
        )
        return None

    async def _upsert(self, value: str | None, tenant_id: int | None, user_id: str | None) -> None:
        key = {"key": BASE_PATH_SETTING, "tenant_id": tenant_id}
        patch = {"value": value, "updated_by": user_id, "updated_at": self.now()}
        if await self.store.update(SETTINGS_TABLE, patch, key):
            return
        try:
            await self.store.insert(SETTINGS_TABLE, {**key, **patch})
        except UniqueViolationError:
            await self.store.update(SETTINGS_TABLE, patch, key)

    async def path_status(self, tenant_id: int | None = None) -> dict:
        """Configured path health plus the path that is actually in effect."""
        configured = normalize_configured_path(await self.get_configured_path(tenant_id))
        effective = await self.locator.resolve(tenant_id)
        status = {
            "configured": configured is not None,
            "valid": False,
            "writable": False,
            "path": configured,
            "error": None,
            "error_code": None,
            "effective": effective.to_dict(),
        }
        if configured is None:
            return status
        validation = await self.validator.validate(configured)
        status.update(
            valid=validation.valid,
            writable=validation.writable,
            error=validation.error,
            error_code=validation.error_code,
        )
        return status
