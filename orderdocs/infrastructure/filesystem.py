"""Filesystem Access — async wrappers over blocking os calls.

Invariants:
    - Every call runs in a worker thread (asyncio.to_thread); the event loop never blocks on disk
    - OSError propagates unchanged; translation to typed errors happens in services/
    - make_dir is idempotent (exist_ok) so duplicate/retried requests race harmlessly
    - write_new_file never overwrites: exclusive create raises FileExistsError
    - A failed write_new_file leaves no partial file behind

Design Decisions:
    - Thin functions, no class: services call them directly and tests use real tmp_path
      folders instead of a fake filesystem
"""

import asyncio
import contextlib
import os
import uuid


async def exists(path: str) -> bool:
    return await asyncio.to_thread(os.path.exists, path)


async def is_dir(path: str) -> bool:
    return await asyncio.to_thread(os.path.isdir, path)


async def make_dir(path: str) -> None:
    await asyncio.to_thread(os.makedirs, path, exist_ok=True)


async def remove_dir(path: str) -> None:
    await asyncio.to_thread(os.rmdir, path)


async def list_dir(path: str) -> list[str]:
    return await asyncio.to_thread(os.listdir, path)


async def remove_file(path: str) -> None:
    await asyncio.to_thread(os.remove, path)


async def real_path(path: str) -> str:
    """Absolute path with symlinks and .. segments resolved."""
    return await asyncio.to_thread(os.path.realpath, path)


def _write_exclusive(path: str, content: bytes) -> None:
    with open(path, "xb") as fh:
        try:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        except OSError:
            fh.close()
            with contextlib.suppress(OSError):
                os.remove(path)
            raise


async def write_new_file(path: str, content: bytes) -> None:
    """Create path with content; FileExistsError if it is already there."""
    await asyncio.to_thread(_write_exclusive, path, content)


def probe_name(kind: str) -> str:
    """Unique hidden name for throwaway probe folders/files."""
    return f".orderdocs_{kind}_{uuid.uuid4().hex}"
