"""API Dependencies — builds services per request from settings and the record store.

Invariants:
    - Services are cheap, stateless objects; building them per request shares nothing
      but the database pool
    - Tenant comes from the X-Tenant-ID header; absent means the global scope

Design Decisions:
    - Every service hangs off get_store/get_settings so tests override just those two
      (app.dependency_overrides) and exercise the real wiring
"""

from fastapi import Depends, Header

from orderdocs.config import Settings, get_settings
from orderdocs.core.repository_protocols import RecordStore
from orderdocs.infrastructure.database import DatabaseSessionManager, get_db_manager
from orderdocs.infrastructure.record_store import SqlRecordStore
from orderdocs.services.artifact_namer import ArtifactNamer
from orderdocs.services.artifact_writer import ArtifactWriter
from orderdocs.services.directory_manager import DirectoryManager
from orderdocs.services.identifier_service import IdentifierService
from orderdocs.services.path_validator import PathValidator
from orderdocs.services.reference_documents import ReferenceDocuments
from orderdocs.services.report_filing import ReportFiling
from orderdocs.services.sequence_allocator import SequenceAllocator
from orderdocs.services.storage_locator import BaseStorageLocator
from orderdocs.services.storage_settings import StorageSettings
from orderdocs.services.work_orders import WorkOrders


def get_tenant_id(x_tenant_id: int | None = Header(None)) -> int | None:
    return x_tenant_id


def get_store(db: DatabaseSessionManager = Depends(get_db_manager)) -> RecordStore:
    return SqlRecordStore(db.session)


def get_validator() -> PathValidator:
    return PathValidator()


def get_locator(
    store: RecordStore = Depends(get_store),
    validator: PathValidator = Depends(get_validator),
    settings: Settings = Depends(get_settings),
) -> BaseStorageLocator:
    return BaseStorageLocator(
        store, validator, settings.pdf_base_path, settings.default_base_path,
    )


def get_identifier_service(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> IdentifierService:
    allocator = SequenceAllocator(
        store, settings.allocation_policy(), settings.identifier_initial_value,
    )
    return IdentifierService(store, allocator, settings.identifier_prefix)


def get_directory_manager(
    locator: BaseStorageLocator = Depends(get_locator),
    validator: PathValidator = Depends(get_validator),
    settings: Settings = Depends(get_settings),
) -> DirectoryManager:
    return DirectoryManager(
        locator,
        validator,
        settings.local_verify_policy(),
        settings.cloud_verify_policy(),
        settings.cloud_sync_markers,
    )


def get_work_orders(
    identifiers: IdentifierService = Depends(get_identifier_service),
    directories: DirectoryManager = Depends(get_directory_manager),
) -> WorkOrders:
    return WorkOrders(identifiers, directories)


def get_namer(locator: BaseStorageLocator = Depends(get_locator)) -> ArtifactNamer:
    return ArtifactNamer(locator)


def get_report_filing(namer: ArtifactNamer = Depends(get_namer)) -> ReportFiling:
    return ReportFiling(namer, ArtifactWriter())


def get_reference_documents(
    locator: BaseStorageLocator = Depends(get_locator),
) -> ReferenceDocuments:
    return ReferenceDocuments(locator)


def get_storage_settings(
    store: RecordStore = Depends(get_store),
    validator: PathValidator = Depends(get_validator),
    locator: BaseStorageLocator = Depends(get_locator),
) -> StorageSettings:
    return StorageSettings(store, validator, locator)
