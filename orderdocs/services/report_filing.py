"""Report Filing — name, write, and hand back a generated report in one step.

Invariants:
    - The generated content is always returned, saved or not
    - Naming and write failures degrade to saved=False plus a warning; nothing raises
      for filesystem or storage-configuration problems
    - An identifier that cannot name a folder under the base raises PathValidationError
"""

import logging
from datetime import date, datetime

from orderdocs.core.domain_types import ReportCategory
from orderdocs.core.errors import OrderDocsError, PathValidationError
from orderdocs.core.results import FiledReport
from orderdocs.services.artifact_namer import ArtifactNamer
from orderdocs.services.artifact_writer import ArtifactWriter

logger = logging.getLogger(__name__)


class ReportFiling:
    def __init__(self, namer: ArtifactNamer, writer: ArtifactWriter):
        self.namer = namer
        self.writer = writer

    async def file_report(
        self,
        identifier: str,
        category: ReportCategory | str,
        content: bytes,
        field_date: date | datetime | str | None = None,
        tenant_id: int | None = None,
        regenerate: bool = False,
    ) -> FiledReport:
        try:
            name = await self.namer.next_name(
                identifier, category, field_date, tenant_id, regenerate,
            )
        except PathValidationError:
            raise
        except (OrderDocsError, OSError) as e:
            message = getattr(e, "message", None) or str(e)
            logger.warning(
                f"Could not name report, returning it unsaved: {message}",
                extra={"identifier": identifier, "tenant_id": tenant_id},
            )
            return FiledReport(content=content, saved=False, warning=message)

        outcome = await self.writer.write(content, name.path)
        if not outcome.saved:
            return FiledReport(
                content=content, saved=False, name=name, warning=outcome.error.message,
            )
        return FiledReport(content=content, saved=True, name=name)
