"""Base Storage Locator — resolves the effective artifact root for a tenant.

Invariants:
    - Priority: tenant setting → global setting → legacy external-service setting →
      PDF_BASE_PATH environment setting → hard-coded default
    - Configured tiers are used only when valid AND writable; otherwise logged and skipped
    - Blank/whitespace settings count as unset (fall through, never block fallback)
    - resolve() always returns a path: the hard-coded default cannot fail
    - identifier_folder() never returns a path outside the base (symlinks resolved)

Design Decisions:
    - Stateless: settings are re-read on every call, a changed path takes effect at once
    - Store errors on a tier are logged and treated as "unset" so a settings-table
      outage degrades to the environment path instead of blocking report filing
"""

import logging
import os

from orderdocs.core.domain_types import (
    BASE_PATH_SETTING,
    LEGACY_BASE_PATH_SETTING,
    SETTINGS_TABLE,
    StorageSource,
)
from orderdocs.core.errors import ErrorContext, OrderDocsError, PathValidationError
from orderdocs.core.identifiers import is_unsafe_folder_name, sanitize_folder_name
from orderdocs.core.path_rules import normalize_configured_path
from orderdocs.core.repository_protocols import RecordStore
from orderdocs.core.results import ResolvedBasePath
from orderdocs.infrastructure import filesystem
from orderdocs.services.path_validator import (
    INVALID_IDENTIFIER,
    OUTSIDE_STORAGE_ROOT,
    PathValidator,
)

logger = logging.getLogger(__name__)


async def read_path_setting(
    store: RecordStore, key: str, tenant_id: int | None,
) -> str | None:
    """Stored path for key/tenant (None = global), normalized; None when unset."""
    row = await store.get(SETTINGS_TABLE, {"key": key, "tenant_id": tenant_id})
    return normalize_configured_path(row.get("value")) if row else None


async def identifier_folder(
    base: str, identifier: str, *parts: str, tenant_id: int | None = None,
) -> str:
    """{base}/{identifier}/{parts...}; PathValidationError if it would leave base."""
    ctx = ErrorContext(tenant_id=tenant_id, identifier=identifier, path=base)
    name = sanitize_folder_name(identifier)
    if is_unsafe_folder_name(name):
        raise PathValidationError(
            f"Invalid work order identifier: {identifier!r}", INVALID_IDENTIFIER, ctx,
        )

    folder = os.path.join(base, name, *parts)
    root = await filesystem.real_path(base)
    resolved = await filesystem.real_path(folder)
    try:
        inside = resolved != root and os.path.commonpath([root, resolved]) == root
    except ValueError:
        # different drives
        inside = False
    if not inside:
        logger.warning(
            f"Folder for {identifier} resolves outside the storage root",
            extra={"identifier": identifier, "path": resolved, "tenant_id": tenant_id},
        )
        raise PathValidationError(
            f"Folder for {identifier!r} resolves outside the storage root",
            OUTSIDE_STORAGE_ROOT, ctx,
        )
    return folder


class BaseStorageLocator:
    """Walks the configured tiers down to the hard-coded default."""

    def __init__(
        self,
        store: RecordStore,
        validator: PathValidator,
        env_base_path: str | None,
        default_base_path: str,
    ):
        self.store = store
        self.validator = validator
        self.env_base_path = env_base_path
        self.default_base_path = default_base_path

    def _configured_tiers(self, tenant_id: int | None) -> list[tuple[StorageSource, str, int | None]]:
        tiers = []
        if tenant_id is not None:
            tiers.append((StorageSource.TENANT, BASE_PATH_SETTING, tenant_id))
        tiers.append((StorageSource.GLOBAL, BASE_PATH_SETTING, None))
        tiers.append((StorageSource.LEGACY, LEGACY_BASE_PATH_SETTING, None))
        return tiers

    async def resolve(self, tenant_id: int | None = None) -> ResolvedBasePath:
        """Effective base path for tenant_id (None = global scope)."""
        for source, key, scope in self._configured_tiers(tenant_id):
            try:
                configured = await read_path_setting(self.store, key, scope)
            except OrderDocsError as e:
                logger.warning(
                    f"Could not read {source.value} storage setting: {e.message}",
                    extra={"tenant_id": tenant_id, "source": source.value},
                )
                continue
            if configured is None:
                continue
            validation = await self.validator.validate(configured)
            if validation.usable:
                return ResolvedBasePath(configured, True, source)
            logger.warning(
                f"Configured {source.value} path is unusable, falling back: "
                f"{validation.error}",
                extra={
                    "tenant_id": tenant_id, "path": configured,
                    "error_code": validation.error_code, "source": source.value,
                },
            )

        env_path = normalize_configured_path(self.env_base_path)
        if env_path:
            return ResolvedBasePath(env_path, False, StorageSource.ENVIRONMENT)
        return ResolvedBasePath(
            os.path.abspath(self.default_base_path), False, StorageSource.DEFAULT,
        )
