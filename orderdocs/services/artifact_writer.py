"""Artifact Writer — persists generated report bytes at a named path.

Invariants:
    - Never overwrites: an existing file at path yields saved=False
    - Parent folders are created first (idempotent)
    - OS errors come back as ArtifactWriteError inside WriteOutcome, never raised
"""

import logging
import os

from orderdocs.core.errors import ArtifactWriteError
from orderdocs.core.results import WriteOutcome
from orderdocs.infrastructure import filesystem

logger = logging.getLogger(__name__)


def _failed(message: str, path: str) -> WriteOutcome:
    error = ArtifactWriteError(message, path)
    logger.warning(message, extra={"path": path, "error_code": error.code})
    return WriteOutcome(saved=False, path=path, error=error)


class ArtifactWriter:
    async def write(self, content: bytes, path: str) -> WriteOutcome:
        folder = os.path.dirname(path)
        try:
            await filesystem.make_dir(folder)
        except OSError as e:
            return _failed(f"Could not create folder {folder}: {e.strerror or e}", path)

        try:
            await filesystem.write_new_file(path, content)
        except FileExistsError:
            return _failed(f"{os.path.basename(path)} already exists", path)
        except OSError as e:
            return _failed(f"Could not save file: {e.strerror or e}", path)

        logger.info("Saved artifact", extra={"path": path})
        return WriteOutcome(saved=True, path=path)
