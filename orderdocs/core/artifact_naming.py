"""Artifact Naming — pure filename rules for filed report PDFs and reference documents.

Invariants:
    - Report filename: {identifier}_{label}_{sequence:02d}_Field_{YYYYMMDD}[_REV{n}].pdf
    - Revision files never count toward the next sequence
    - Sequence and revision both start at 1 and are max(existing) + 1
    - Every function takes the folder listing as input; none touches the filesystem

Design Decisions:
    - Listing passed in rather than read here: the shell owns IO and the rules are
      testable with plain lists (ADR: functional core, imperative shell)
    - Unparseable field dates fall back to today instead of failing: a report with an
      odd date still gets filed
"""

import re
from datetime import date, datetime
from pathlib import PurePath

from orderdocs.core.identifiers import clean_for_filename

PDF_SUFFIX = ".pdf"
REVISION_MARKER = "_REV"

_SEQUENCE_FIELD = re.compile(r"_(\d+)_Field_")
_DATE_FORMATS = ("%Y-%m-%d", "%Y%m%d", "%m/%d/%Y")
_REFERENCE_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def format_field_date(value: date | datetime | str | None, today: date) -> str:
    """Field date → YYYYMMDD. Missing or unparseable values use today."""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y%m%d")
    if isinstance(value, str) and value.strip():
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).strftime("%Y%m%d")
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text).strftime("%Y%m%d")
        except ValueError:
            pass
    return today.strftime("%Y%m%d")


def build_filename(
    identifier: str,
    label: str,
    sequence: int,
    date_str: str,
    revision: int = 0,
) -> str:
    """Compose a report filename; revision 0 means the original."""
    name = f"{clean_for_filename(identifier)}_{label}_{sequence:02d}_Field_{date_str}"
    if revision > 0:
        name += f"{REVISION_MARKER}{revision}"
    return name + PDF_SUFFIX


def _is_original_pdf(filename: str) -> bool:
    return filename.lower().endswith(PDF_SUFFIX) and REVISION_MARKER not in filename


def next_sequence(filenames: list[str]) -> int:
    """max(embedded sequence of original PDFs) + 1, or 1 for an empty folder."""
    sequences = []
    for filename in filenames:
        if not _is_original_pdf(filename):
            continue
        match = _SEQUENCE_FIELD.search(filename)
        if match and int(match.group(1)) > 0:
            sequences.append(int(match.group(1)))
    return max(sequences) + 1 if sequences else 1


def latest_sequence_for_date(
    filenames: list[str], identifier: str, label: str, date_str: str,
) -> int | None:
    """Highest sequence of an original report with this field date, if any."""
    pattern = re.compile(
        rf"^{re.escape(clean_for_filename(identifier))}_{re.escape(label)}"
        rf"_(\d+)_Field_{re.escape(date_str)}\.pdf$",
    )
    sequences = [
        int(m.group(1)) for m in map(pattern.match, filenames) if m
    ]
    return max(sequences) if sequences else None


def next_revision(filenames: list[str], base_filename: str) -> int:
    """max(_REV{n}) among siblings of base_filename + 1, starting at 1."""
    stem = base_filename[: -len(PDF_SUFFIX)]
    pattern = re.compile(rf"^{re.escape(stem)}{REVISION_MARKER}(\d+)\.pdf$")
    revisions = [int(m.group(1)) for m in map(pattern.match, filenames) if m]
    return max(revisions) + 1 if revisions else 1


# ─── Reference documents ────────────────────────────────────────

def safe_reference_filename(original_name: str | None) -> str:
    """Uploaded name → basename with [A-Za-z0-9._-] only, always ending in .pdf."""
    base = _REFERENCE_UNSAFE.sub("_", PurePath(original_name or "").name or "drawing.pdf")
    path = PurePath(base)
    stem = path.stem.strip(".") or "drawing"
    return f"{stem}{PDF_SUFFIX}"


def unique_filename(existing: set[str], filename: str) -> str:
    """filename, or stem_1.ext, stem_2.ext ... whichever is not taken."""
    path = PurePath(filename)
    candidate = filename
    n = 0
    while candidate in existing:
        n += 1
        candidate = f"{path.stem}_{n}{path.suffix}"
    return candidate
