"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ScopeKey is either str(tenant_id) or GLOBAL_SCOPE, never a bare int
    - Every ReportCategory maps to exactly one category folder
    - Several categories may share a folder (WP1 reports live with compressive strength)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and bind from path parameters without custom code
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ScopeKey = NewType("ScopeKey", str)

GLOBAL_SCOPE = ScopeKey("global")


def scope_key_for(tenant_id: int | None) -> ScopeKey:
    """Counter scope for a tenant, or the shared global scope."""
    if tenant_id is None:
        return GLOBAL_SCOPE
    return ScopeKey(str(tenant_id))


# ─── Table / setting names ───────────────────────────────────────

COUNTERS_TABLE = "sequence_counters"
WORK_ORDERS_TABLE = "work_orders"
TENANTS_TABLE = "tenants"
SETTINGS_TABLE = "app_settings"

BASE_PATH_SETTING = "artifact_base_path"
LEGACY_BASE_PATH_SETTING = "onedrive_base_path"


# ─── Enums ───────────────────────────────────────────────────────

class ReportCategory(str, Enum):
    """Report types that produce filed artifacts."""
    PROCTOR = "PROCTOR"
    DENSITY_MEASUREMENT = "DENSITY_MEASUREMENT"
    COMPRESSIVE_STRENGTH = "COMPRESSIVE_STRENGTH"
    WP1 = "WP1"
    REBAR = "REBAR"
    CYLINDER_PICKUP = "CYLINDER_PICKUP"


class StorageSource(str, Enum):
    """Which tier of the base-path lookup produced the effective path."""
    TENANT = "tenant"
    GLOBAL = "global"
    LEGACY = "legacy"
    ENVIRONMENT = "environment"
    DEFAULT = "default"


CATEGORY_FOLDERS: dict[ReportCategory, str] = {
    ReportCategory.PROCTOR: "Proctor",
    ReportCategory.DENSITY_MEASUREMENT: "Density",
    ReportCategory.COMPRESSIVE_STRENGTH: "CompressiveStrength",
    ReportCategory.WP1: "CompressiveStrength",
    ReportCategory.REBAR: "Rebar",
    ReportCategory.CYLINDER_PICKUP: "CylinderPickup",
}

OTHER_FOLDER = "Other"
REFERENCE_DOCUMENTS_FOLDER = "Drawings"


def category_folder(category: ReportCategory | str) -> str:
    """Folder (and filename label) for a report category; unknown types go to Other."""
    try:
        return CATEGORY_FOLDERS[ReportCategory(category)]
    except ValueError:
        return OTHER_FOLDER


def all_subfolders() -> list[str]:
    """Every folder created under an identifier: report categories + reference documents."""
    folders = list(dict.fromkeys(CATEGORY_FOLDERS.values()))
    folders.append(REFERENCE_DOCUMENTS_FOLDER)
    return folders
