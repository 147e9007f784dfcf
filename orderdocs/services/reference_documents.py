"""Reference Documents — uploaded drawings kept in {base}/{identifier}/Drawings.

Invariants:
    - Stored names match [A-Za-z0-9._-]+ and end in .pdf
    - An upload never replaces an existing document: name, name_1, name_2 ...
    - delete() only accepts a bare filename; directory parts are stripped
    - delete() of ".", ".." or a folder is "not found", never a removal attempt
"""

import logging
import os

from orderdocs.core.artifact_naming import (
    PDF_SUFFIX,
    safe_reference_filename,
    unique_filename,
)
from orderdocs.core.domain_types import REFERENCE_DOCUMENTS_FOLDER
from orderdocs.core.errors import ArtifactWriteError, ErrorContext, ResourceNotFoundError
from orderdocs.core.identifiers import is_unsafe_folder_name
from orderdocs.infrastructure import filesystem
from orderdocs.services.storage_locator import BaseStorageLocator, identifier_folder

logger = logging.getLogger(__name__)

# Concurrent uploads of the same name can each pick the same free slot
_MAX_NAME_ATTEMPTS = 5


class ReferenceDocuments:
    def __init__(self, locator: BaseStorageLocator):
        self.locator = locator

    async def folder(self, identifier: str, tenant_id: int | None = None) -> str:
        resolved = await self.locator.resolve(tenant_id)
        return await identifier_folder(
            resolved.path, identifier, REFERENCE_DOCUMENTS_FOLDER, tenant_id=tenant_id,
        )

    async def list_documents(self, identifier: str, tenant_id: int | None = None) -> list[str]:
        folder = await self.folder(identifier, tenant_id)
        try:
            names = await filesystem.list_dir(folder)
        except FileNotFoundError:
            return []
        return sorted(n for n in names if n.lower().endswith(PDF_SUFFIX))

    async def save(
        self,
        identifier: str,
        original_name: str | None,
        content: bytes,
        tenant_id: int | None = None,
    ) -> str:
        """Store content under a safe, unused name; returns the stored filename."""
        folder = await self.folder(identifier, tenant_id)
        ctx = ErrorContext(tenant_id=tenant_id, identifier=identifier)
        wanted = safe_reference_filename(original_name)
        try:
            await filesystem.make_dir(folder)
            for _ in range(_MAX_NAME_ATTEMPTS):
                existing = set(await filesystem.list_dir(folder))
                filename = unique_filename(existing, wanted)
                try:
                    await filesystem.write_new_file(os.path.join(folder, filename), content)
                except FileExistsError:
                    continue
                logger.info(
                    f"Saved reference document {filename}",
                    extra={"identifier": identifier, "path": folder},
                )
                return filename
        except OSError as e:
            raise ArtifactWriteError(
                f"Could not save reference document: {e.strerror or e}", folder, ctx,
            ) from e
        raise ArtifactWriteError(
            f"No free name for {wanted} after {_MAX_NAME_ATTEMPTS} attempts", folder, ctx,
        )

    async def delete(self, identifier: str, filename: str, tenant_id: int | None = None) -> None:
        folder = await self.folder(identifier, tenant_id)
        name = os.path.basename(filename.replace("\\", "/"))
        path = os.path.join(folder, name)
        if (
            is_unsafe_folder_name(name)
            or not await filesystem.exists(path)
            or await filesystem.is_dir(path)
        ):
            raise ResourceNotFoundError("Reference document", name or filename)
        try:
            await filesystem.remove_file(path)
        except OSError as e:
            raise ArtifactWriteError(
                f"Could not delete {name}: {e.strerror or e}", path,
                ErrorContext(tenant_id=tenant_id, identifier=identifier),
            ) from e
        logger.info(f"Deleted reference document {name}", extra={"identifier": identifier})
