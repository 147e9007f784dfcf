"""Artifact Directory Manager — verifies folder trees, idempotence and degraded outcomes.

Tests:
    - ensure() creates identifier folder plus every category subfolder
    - Repeated ensure() changes nothing; sibling identifiers untouched
    - Slow-to-appear folders produce warnings (fake sleep records the waits)
    - Fatal failures come back as success=False with a typed error
    - Non-fatal failures (probe cleanup, subfolder, write test) come back as warnings
    - Identifiers that would resolve outside the base are refused before any mkdir
"""

import os

import pytest

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.core.domain_types import ReportCategory, all_subfolders
from orderdocs.core.errors import (
    ConfigurationError,
    DirectoryCreationError,
    PathValidationError,
)
from orderdocs.core.results import (
    FOLDER_NOT_VISIBLE,
    PROBE_CLEANUP_FAILED,
    SUBFOLDER_CREATE_FAILED,
    SUBFOLDER_NOT_VISIBLE,
    WRITE_TEST_FAILED,
)
from orderdocs.infrastructure import filesystem
from orderdocs.services.directory_manager import DirectoryManager
from orderdocs.services.storage_locator import BaseStorageLocator


def _manager(store, validator, sleep, env_path):
    locator = BaseStorageLocator(store, validator, env_path, "unused")
    return DirectoryManager(
        locator,
        validator,
        local_policy=BackoffPolicy(max_attempts=3, base_delay_ms=100),
        cloud_policy=BackoffPolicy(max_attempts=6, base_delay_ms=500, exponential=True),
        cloud_markers=["OneDrive"],
        sleep=sleep,
    )


# ─── Happy path ─────────────────────────────────────────────────

async def test_creates_identifier_and_category_folders(directory_manager, base_dir, sleep):
    result = await directory_manager.ensure("02-2025-0001")

    assert result.success
    assert result.warnings == []
    assert result.path == str(base_dir / "02-2025-0001")
    assert sorted(os.listdir(result.path)) == sorted(all_subfolders())
    assert sleep.delays == []


async def test_no_probe_leftovers(directory_manager, base_dir):
    result = await directory_manager.ensure("02-2025-0001")
    assert os.listdir(base_dir) == ["02-2025-0001"]
    assert all(not n.startswith(".orderdocs_") for n in os.listdir(result.path))


async def test_ensure_is_idempotent(directory_manager, base_dir):
    first = await directory_manager.ensure("02-2025-0001")
    report = base_dir / "02-2025-0001" / "Proctor" / "existing.pdf"
    report.write_bytes(b"%PDF")

    second = await directory_manager.ensure("02-2025-0001")

    assert second.success
    assert second.path == first.path
    assert sorted(os.listdir(second.path)) == sorted(all_subfolders())
    assert report.read_bytes() == b"%PDF"


async def test_sibling_identifiers_are_untouched(directory_manager, base_dir):
    sibling = base_dir / "02-2025-0009"
    sibling.mkdir()
    (sibling / "keep.txt").write_text("x")

    await directory_manager.ensure("02-2025-0010")

    assert os.listdir(sibling) == ["keep.txt"]


async def test_identifier_is_sanitized(directory_manager, base_dir):
    result = await directory_manager.ensure('02/2025:0001')
    assert result.path == str(base_dir / "02_2025_0001")


async def test_category_subset_keeps_reference_folder(directory_manager):
    result = await directory_manager.ensure(
        "02-2025-0001", categories=[ReportCategory.WP1, ReportCategory.COMPRESSIVE_STRENGTH],
    )
    assert sorted(os.listdir(result.path)) == ["CompressiveStrength", "Drawings"]


async def test_empty_category_list_still_creates_reference_folder(directory_manager):
    result = await directory_manager.ensure("02-2025-0001", categories=[])
    assert os.listdir(result.path) == ["Drawings"]


async def test_missing_environment_base_is_created(store, validator, sleep, tmp_path):
    manager = _manager(store, validator, sleep, str(tmp_path / "new" / "root"))
    result = await manager.ensure("02-2025-0001")
    assert result.success
    assert os.path.isdir(tmp_path / "new" / "root" / "02-2025-0001")


# ─── Visibility ─────────────────────────────────────────────────

async def _never_visible(path: str) -> bool:
    return False


async def test_folder_not_visible_is_a_warning(directory_manager, sleep, monkeypatch):
    monkeypatch.setattr(filesystem, "is_dir", _never_visible)

    result = await directory_manager.ensure("02-2025-0001")

    assert result.success
    codes = [w.code for w in result.warnings]
    assert codes[0] == FOLDER_NOT_VISIBLE
    assert codes.count(SUBFOLDER_NOT_VISIBLE) == len(all_subfolders())
    # local policy: 3 checks, 2 waits; subfolders get a single check
    assert sleep.delays == [0.1, 0.2]


async def test_cloud_synced_base_waits_longer(store, validator, sleep, tmp_path, monkeypatch):
    cloud = tmp_path / "OneDrive - Lab"
    cloud.mkdir()
    manager = _manager(store, validator, sleep, str(cloud))
    monkeypatch.setattr(filesystem, "is_dir", _never_visible)

    result = await manager.ensure("02-2025-0001")

    assert result.success
    assert sleep.delays[:5] == [0.5, 1.0, 2.0, 4.0, 8.0]


# ─── Failures ───────────────────────────────────────────────────

async def test_unusable_base_is_a_configuration_error(store, validator, sleep, tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    manager = _manager(store, validator, sleep, str(not_a_dir))

    result = await manager.ensure("02-2025-0001")

    assert not result.success
    assert isinstance(result.error, ConfigurationError)
    assert result.error.context.identifier == "02-2025-0001"


def _refuse_when(predicate):
    original = filesystem.make_dir

    async def make_dir(path: str) -> None:
        if predicate(path):
            raise PermissionError(13, "Permission denied")
        await original(path)

    return make_dir


async def test_probe_failure_is_fatal(directory_manager, base_dir, monkeypatch):
    monkeypatch.setattr(
        filesystem, "make_dir", _refuse_when(lambda p: ".orderdocs_probe_" in p),
    )
    result = await directory_manager.ensure("02-2025-0001")

    assert not result.success
    assert isinstance(result.error, DirectoryCreationError)
    assert os.listdir(base_dir) == []


async def test_identifier_folder_failure_is_fatal(directory_manager, monkeypatch):
    monkeypatch.setattr(
        filesystem, "make_dir", _refuse_when(lambda p: p.endswith("02-2025-0001")),
    )
    result = await directory_manager.ensure("02-2025-0001")

    assert not result.success
    assert isinstance(result.error, DirectoryCreationError)
    assert "Permission denied" in result.error.message


async def test_subfolder_failure_is_a_warning(directory_manager, monkeypatch):
    monkeypatch.setattr(filesystem, "make_dir", _refuse_when(lambda p: p.endswith("Rebar")))

    result = await directory_manager.ensure("02-2025-0001")

    assert result.success
    assert [w.code for w in result.warnings] == [SUBFOLDER_CREATE_FAILED]
    assert result.warnings[0].path.endswith("Rebar")


async def test_write_test_failure_is_a_warning(directory_manager, monkeypatch):
    async def refuse(path: str, content: bytes) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(filesystem, "write_new_file", refuse)

    result = await directory_manager.ensure("02-2025-0001")

    assert result.success
    assert [w.code for w in result.warnings] == [WRITE_TEST_FAILED]


async def test_unremovable_test_folder_is_a_warning(directory_manager, monkeypatch):
    async def refuse(path: str) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(filesystem, "remove_dir", refuse)

    result = await directory_manager.ensure("02-2025-0001")

    assert result.success
    assert [w.code for w in result.warnings] == [PROBE_CLEANUP_FAILED]
    assert ".orderdocs_probe_" in result.warnings[0].path
    assert os.path.isdir(result.path)


# ─── Containment ────────────────────────────────────────────────

@pytest.mark.parametrize("identifier", ["..", ".", ""])
async def test_identifier_outside_base_is_refused(
    directory_manager, base_dir, tmp_path, identifier,
):
    before = sorted(os.listdir(tmp_path))

    result = await directory_manager.ensure(identifier)

    assert not result.success
    assert isinstance(result.error, PathValidationError)
    assert sorted(os.listdir(tmp_path)) == before
    assert os.listdir(base_dir) == []
