"""Artifact & Reference Document Routes — naming, filing and drawings over HTTP.

Tests:
    - next-name previews the filename without writing
    - Filing returns the submitted bytes with X-Report-* status headers
    - Regeneration produces a revision beside the original
    - Reference documents upload/list/delete round trip
    - Identifiers resolving outside the storage root are rejected with 400
"""

import os

PDF = b"%PDF-1.7 test"


async def test_next_name_preview(client, storage_root):
    res = await client.get(
        "/api/v1/work-orders/02-2025-0001/artifacts/next-name",
        params={"category": "PROCTOR", "field_date": "2025-01-15"},
    )
    assert res.status_code == 200
    assert res.json()["filename"] == "02-2025-0001_Proctor_01_Field_20250115.pdf"
    assert not (storage_root / "02-2025-0001").exists()


async def test_file_report_returns_bytes_and_saves(client, storage_root):
    res = await client.post(
        "/api/v1/work-orders/02-2025-0001/reports/DENSITY_MEASUREMENT",
        params={"field_date": "2025-01-15"},
        content=PDF,
    )

    assert res.status_code == 200
    assert res.content == PDF
    assert res.headers["x-report-saved"] == "true"
    filename = res.headers["x-report-filename"]
    assert filename == "02-2025-0001_Density_01_Field_20250115.pdf"
    assert (storage_root / "02-2025-0001" / "Density" / filename).read_bytes() == PDF


async def test_regenerated_report_is_a_revision(client, storage_root):
    url = "/api/v1/work-orders/ID/reports/PROCTOR"
    await client.post(url, params={"field_date": "2025-01-15"}, content=PDF)
    res = await client.post(
        url, params={"field_date": "2025-01-15", "regenerate": "true"}, content=PDF,
    )

    assert res.headers["x-report-filename"] == "ID_Proctor_01_Field_20250115_REV1.pdf"
    assert res.headers["x-report-revision"] == "1"
    assert len(os.listdir(storage_root / "ID" / "Proctor")) == 2


async def test_unsaved_report_still_returns_bytes(client, storage_root):
    (storage_root / "ID").write_text("not a folder")
    res = await client.post("/api/v1/work-orders/ID/reports/REBAR", content=PDF)

    assert res.status_code == 200
    assert res.content == PDF
    assert res.headers["x-report-saved"] == "false"
    assert "x-report-warning" in res.headers


async def test_unknown_category_is_rejected(client):
    res = await client.post("/api/v1/work-orders/ID/reports/NOPE", content=PDF)
    assert res.status_code == 400


async def test_reference_documents_round_trip(client, storage_root):
    base = "/api/v1/work-orders/02-2025-0001/reference-documents"

    created = await client.post(base, params={"filename": "Site plan.pdf"}, content=PDF)
    assert created.status_code == 201
    assert created.json()["filename"] == "Site_plan.pdf"

    listed = await client.get(base)
    assert listed.json()["documents"] == ["Site_plan.pdf"]

    deleted = await client.delete(f"{base}/Site_plan.pdf")
    assert deleted.status_code == 204

    missing = await client.delete(f"{base}/Site_plan.pdf")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_file_report_for_parent_identifier_is_400(client, storage_root, tmp_path):
    before = sorted(os.listdir(tmp_path))

    res = await client.post("/api/v1/work-orders/%2E%2E/reports/PROCTOR", content=PDF)

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "PATH_VALIDATION_ERROR"
    assert sorted(os.listdir(tmp_path)) == before
    assert os.listdir(storage_root) == []


async def test_reference_upload_for_parent_identifier_is_400(client, storage_root, tmp_path):
    res = await client.post(
        "/api/v1/work-orders/%2E%2E/reference-documents",
        params={"filename": "plan.pdf"},
        content=PDF,
    )

    assert res.status_code == 400
    assert not (tmp_path / "Drawings").exists()
