"""Identifier Formatting — pure rules for work-order identifiers and their filesystem forms.

Invariants:
    - Identifier format is {prefix}-{year}-{sequence:04d}; wider sequences are not truncated
    - Distinct (prefix, year, sequence) triples always format to distinct strings
    - sanitize_folder_name only replaces characters illegal in folder names
    - Blank and dot-only folder names are unsafe: they resolve to the base or its parent
    - clean_for_filename keeps [A-Za-z0-9_-] and replaces everything else

Design Decisions:
    - Formatting is pure; the uniqueness check against durable records lives in
      services/identifier_service.py (counter is a hint, records are the authority)
"""

import re

SEQUENCE_DIGITS = 4

_ILLEGAL_FOLDER_CHARS = re.compile(r'[\\/:*?"<>|]')
_NON_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def format_identifier(prefix: str, year: int, sequence: int) -> str:
    """Build the public identifier string."""
    if sequence < 1:
        raise ValueError(f"sequence must be positive, got {sequence}")
    return f"{prefix}-{year}-{sequence:0{SEQUENCE_DIGITS}d}"


def resolve_prefix(tenant_prefix: str | None, default_prefix: str) -> str:
    """Tenant's custom prefix when set, otherwise the deployment default."""
    if tenant_prefix and tenant_prefix.strip():
        return tenant_prefix.strip()
    return default_prefix


def sanitize_folder_name(identifier: str) -> str:
    r"""Replace \ / : * ? " < > | with underscores."""
    return _ILLEGAL_FOLDER_CHARS.sub("_", identifier)


def is_unsafe_folder_name(name: str) -> bool:
    """True for "", whitespace, ".", ".." and other dot-only names."""
    return not name.strip().strip(".")


def clean_for_filename(identifier: str) -> str:
    return _NON_FILENAME_CHARS.sub("_", identifier)
