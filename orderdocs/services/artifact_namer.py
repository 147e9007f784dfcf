"""Artifact Namer — decides the filename and folder for the next filed report.

Invariants:
    - Same folder listing + same inputs → same name (deterministic)
    - Original reports and revisions share a sequence; revisions never advance it
    - Missing or unreadable category folder → sequence 1, never an error
    - A fresh name that already exists on disk is turned into its next revision

Design Decisions:
    - The listing is read once per call and handed to the pure rules in
      core/artifact_naming.py; no name is reserved, ArtifactWriter's exclusive create
      is what prevents two concurrent writers from clobbering each other
"""

import logging
import os
from collections.abc import Callable
from datetime import date, datetime

from orderdocs.core import artifact_naming
from orderdocs.core.domain_types import ReportCategory, category_folder
from orderdocs.core.results import ArtifactName
from orderdocs.infrastructure import filesystem
from orderdocs.services.storage_locator import BaseStorageLocator, identifier_folder

logger = logging.getLogger(__name__)


class ArtifactNamer:
    """Names report PDFs inside {base}/{identifier}/{category}."""

    def __init__(
        self,
        locator: BaseStorageLocator,
        today: Callable[[], date] = date.today,
    ):
        self.locator = locator
        self.today = today

    async def category_directory(
        self, identifier: str, category: ReportCategory | str, tenant_id: int | None = None,
    ) -> str:
        resolved = await self.locator.resolve(tenant_id)
        return await identifier_folder(
            resolved.path, identifier, category_folder(category), tenant_id=tenant_id,
        )

    async def _listing(self, directory: str) -> list[str]:
        try:
            return await filesystem.list_dir(directory)
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning(
                f"Could not list {directory}, starting at sequence 1: {e}",
                extra={"path": directory},
            )
            return []

    async def next_name(
        self,
        identifier: str,
        category: ReportCategory | str,
        field_date: date | datetime | str | None = None,
        tenant_id: int | None = None,
        regenerate: bool = False,
    ) -> ArtifactName:
        """Filename and directory for the next report of this category."""
        directory = await self.category_directory(identifier, category, tenant_id)
        label = category_folder(category)
        date_str = artifact_naming.format_field_date(field_date, self.today())
        filenames = await self._listing(directory)

        if regenerate:
            original = artifact_naming.latest_sequence_for_date(
                filenames, identifier, label, date_str,
            )
            if original is not None:
                base = artifact_naming.build_filename(identifier, label, original, date_str)
                revision = artifact_naming.next_revision(filenames, base)
                return ArtifactName(
                    filename=artifact_naming.build_filename(
                        identifier, label, original, date_str, revision,
                    ),
                    directory=directory,
                    sequence=original,
                    is_revision=True,
                    revision_number=revision,
                )
            logger.info(
                "No original to revise, issuing a fresh sequence",
                extra={"identifier": identifier, "path": directory},
            )

        sequence = artifact_naming.next_sequence(filenames)
        filename = artifact_naming.build_filename(identifier, label, sequence, date_str)
        if filename in filenames:
            revision = artifact_naming.next_revision(filenames, filename)
            return ArtifactName(
                filename=artifact_naming.build_filename(
                    identifier, label, sequence, date_str, revision,
                ),
                directory=directory,
                sequence=sequence,
                is_revision=True,
                revision_number=revision,
            )
        return ArtifactName(
            filename=filename,
            directory=directory,
            sequence=sequence,
            is_revision=False,
            revision_number=0,
        )
