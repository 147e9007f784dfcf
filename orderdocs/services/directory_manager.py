"""Artifact Directory Manager — ensures {base}/{identifier}/{category} folder trees exist.

Invariants:
    - Stateless: every ensure() re-derives truth from the filesystem
    - Idempotent: calling ensure() twice for one identifier changes nothing the second time
    - Sibling identifier folders are never touched
    - Fatal (success=False): no usable base path, identifier escaping the base,
      probe folder refused, identifier folder refused
    - Non-fatal (warnings): probe not removed, not yet visible, subfolder refused,
      write test failed
    - The reference-documents folder is always created, category subset or not
    - Never raises for filesystem outcomes; errors travel inside DirectoryResult

Design Decisions:
    - Cloud-synced roots (OneDrive, Dropbox, ...) get the longer exponential
      visibility budget; local disks the short linear one
    - A real probe folder is created and removed before the identifier folder, so a
      read-only or unmounted share fails before anything is left behind
    - Environment/default base paths are created on demand; user-configured paths are not
      (the settings screen asks the user to create them)
"""

import asyncio
import logging
import os

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.core.domain_types import (
    REFERENCE_DOCUMENTS_FOLDER,
    ReportCategory,
    all_subfolders,
    category_folder,
)
from orderdocs.core.errors import (
    ConfigurationError,
    DirectoryCreationError,
    ErrorContext,
    PathValidationError,
)
from orderdocs.core.path_rules import is_cloud_synced
from orderdocs.core.results import (
    FOLDER_NOT_VISIBLE,
    PROBE_CLEANUP_FAILED,
    SUBFOLDER_CREATE_FAILED,
    SUBFOLDER_NOT_VISIBLE,
    WRITE_TEST_FAILED,
    DirectoryResult,
    DirectoryWarning,
)
from orderdocs.infrastructure import filesystem
from orderdocs.infrastructure.retry import Sleep, wait_until_visible
from orderdocs.services.path_validator import PathValidator
from orderdocs.services.storage_locator import BaseStorageLocator, identifier_folder

logger = logging.getLogger(__name__)


class DirectoryManager:
    """Creates and verifies the per-identifier folder tree."""

    def __init__(
        self,
        locator: BaseStorageLocator,
        validator: PathValidator,
        local_policy: BackoffPolicy,
        cloud_policy: BackoffPolicy,
        cloud_markers: list[str],
        sleep: Sleep = asyncio.sleep,
    ):
        self.locator = locator
        self.validator = validator
        self.local_policy = local_policy
        self.cloud_policy = cloud_policy
        self.cloud_markers = cloud_markers
        self.sleep = sleep

    def _policy_for(self, path: str) -> BackoffPolicy:
        if is_cloud_synced(path, self.cloud_markers):
            return self.cloud_policy
        return self.local_policy

    async def _visible(self, path: str, policy: BackoffPolicy) -> bool:
        return await wait_until_visible(
            lambda: filesystem.is_dir(path), policy=policy, sleep=self.sleep,
        )

    async def usable_base(self, tenant_id: int | None) -> str:
        """Effective base path, created when it is the env/default one. Raises ConfigurationError."""
        resolved = await self.locator.resolve(tenant_id)
        base = resolved.path
        ctx = ErrorContext(tenant_id=tenant_id, path=base)

        if not resolved.is_user_configured and not await filesystem.exists(base):
            try:
                await filesystem.make_dir(base)
                logger.info(
                    "Created base storage folder",
                    extra={"path": base, "source": resolved.source.value},
                )
            except OSError as e:
                raise ConfigurationError(
                    f"Could not create base storage folder {base}: {e.strerror or e}", ctx,
                )

        validation = await self.validator.validate(base)
        if not validation.usable:
            raise ConfigurationError(
                f"Storage path {base} is not usable: {validation.error}", ctx,
            )
        return base

    async def ensure(
        self,
        identifier: str,
        tenant_id: int | None = None,
        categories: list[ReportCategory] | None = None,
    ) -> DirectoryResult:
        """Create (or confirm) the folder tree for identifier."""
        try:
            base = await self.usable_base(tenant_id)
        except ConfigurationError as e:
            e.context.identifier = identifier
            logger.error(e.message, extra={"identifier": identifier, "tenant_id": tenant_id})
            return DirectoryResult(success=False, path=None, error=e)

        try:
            folder = await identifier_folder(base, identifier, tenant_id=tenant_id)
        except PathValidationError as e:
            return DirectoryResult(success=False, path=None, error=e)

        ctx = ErrorContext(tenant_id=tenant_id, identifier=identifier)
        warnings: list[DirectoryWarning] = []

        probe = os.path.join(base, filesystem.probe_name("probe"))
        try:
            await filesystem.make_dir(probe)
        except OSError as e:
            error = DirectoryCreationError(
                f"Cannot create folders in {base}: {e.strerror or e}", probe, ctx,
            )
            logger.error(error.message, extra={"identifier": identifier, "path": base})
            return DirectoryResult(success=False, path=None, error=error)
        try:
            await filesystem.remove_dir(probe)
        except OSError as e:
            warnings.append(DirectoryWarning(
                PROBE_CLEANUP_FAILED,
                f"Could not remove probe folder: {e.strerror or e}",
                probe,
            ))

        try:
            await filesystem.make_dir(folder)
        except OSError as e:
            error = DirectoryCreationError(
                f"Could not create folder for {identifier}: {e.strerror or e}", folder, ctx,
            )
            logger.error(error.message, extra={"identifier": identifier, "path": folder})
            return DirectoryResult(success=False, path=None, error=error)

        policy = self._policy_for(folder)

        if not await self._visible(folder, policy):
            warnings.append(DirectoryWarning(
                FOLDER_NOT_VISIBLE,
                "Folder was created but is not visible yet; it may still be syncing",
                folder,
            ))

        if categories is None:
            subfolders = all_subfolders()
        else:
            subfolders = list(dict.fromkeys(
                [*(category_folder(c) for c in categories), REFERENCE_DOCUMENTS_FOLDER],
            ))

        for name in subfolders:
            warning = await self._ensure_subfolder(os.path.join(folder, name))
            if warning:
                warnings.append(warning)

        write_probe = os.path.join(folder, filesystem.probe_name("write"))
        try:
            await filesystem.write_new_file(write_probe, b"orderdocs")
            await filesystem.remove_file(write_probe)
        except OSError as e:
            warnings.append(DirectoryWarning(
                WRITE_TEST_FAILED, f"Write test failed: {e.strerror or e}", folder,
            ))

        for w in warnings:
            logger.warning(
                w.message,
                extra={"identifier": identifier, "path": w.path, "error_code": w.code},
            )
        return DirectoryResult(success=True, path=folder, warnings=warnings)

    async def _ensure_subfolder(self, path: str) -> DirectoryWarning | None:
        try:
            await filesystem.make_dir(path)
        except OSError as e:
            return DirectoryWarning(
                SUBFOLDER_CREATE_FAILED,
                f"Could not create subfolder: {e.strerror or e}",
                path,
            )
        # Half the attempts of the identifier folder, linear growth
        policy = self._policy_for(path)
        lighter = BackoffPolicy(
            max_attempts=max(1, policy.max_attempts // 2),
            base_delay_ms=policy.base_delay_ms,
        )
        if not await self._visible(path, lighter):
            return DirectoryWarning(
                SUBFOLDER_NOT_VISIBLE,
                "Subfolder was created but is not visible yet",
                path,
            )
        return None
