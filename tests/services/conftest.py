"""Service test fixtures — in-memory record store, recording sleep, tmp_path storage.

Invariants:
    - Every test gets a fresh InMemoryRecordStore and storage root under tmp_path
    - No test ever really sleeps: visibility and retry delays go to RecordingSleep

Design Decisions:
    - In-memory store over SQLite here: concurrent allocation needs interleaving at
      every store call, which a single shared SQLite connection cannot give
"""

from datetime import date

import pytest

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.services.artifact_namer import ArtifactNamer
from orderdocs.services.directory_manager import DirectoryManager
from orderdocs.services.identifier_service import IdentifierService
from orderdocs.services.path_validator import PathValidator
from orderdocs.services.sequence_allocator import SequenceAllocator
from orderdocs.services.storage_locator import BaseStorageLocator
from tests.fakes import InMemoryRecordStore, RecordingSleep

ALLOCATION_POLICY = BackoffPolicy(max_attempts=30, base_delay_ms=5, max_delay_ms=50)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def validator():
    return PathValidator()


@pytest.fixture
def base_dir(tmp_path):
    root = tmp_path / "reports"
    root.mkdir()
    return root


@pytest.fixture
def locator(store, validator, base_dir, tmp_path):
    return BaseStorageLocator(
        store, validator,
        env_base_path=str(base_dir),
        default_base_path=str(tmp_path / "default"),
    )


@pytest.fixture
def allocator(store, sleep):
    return SequenceAllocator(store, ALLOCATION_POLICY, sleep=sleep)


@pytest.fixture
def identifier_service(store, allocator):
    return IdentifierService(store, allocator, default_prefix="02")


@pytest.fixture
def directory_manager(locator, validator, sleep):
    return DirectoryManager(
        locator,
        validator,
        local_policy=BackoffPolicy(max_attempts=3, base_delay_ms=100),
        cloud_policy=BackoffPolicy(max_attempts=6, base_delay_ms=500, exponential=True),
        cloud_markers=["OneDrive", "Dropbox"],
        sleep=sleep,
    )


@pytest.fixture
def namer(locator):
    return ArtifactNamer(locator, today=lambda: date(2025, 3, 9))
