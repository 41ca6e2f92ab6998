"""
tests/test_api.py
~~~~~~~~~~~~~~~~~
Tests for haulbook.ui.api — the FastAPI backend, run against an in-memory store.
"""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from haulbook.exceptions import StorageUnavailableError
from haulbook.storage import EntryStore, MemoryBlobStore
from haulbook.ui.api import create_app


@pytest.fixture
def api_store() -> EntryStore:
    return EntryStore(MemoryBlobStore())


@pytest.fixture
def client(api_store) -> TestClient:
    return TestClient(create_app(api_store))


@pytest.fixture
def body(form_fields) -> dict:
    return {**form_fields, "srNo": None}


def _post(client, body, **changes):
    resp = client.post("/entries", json={**body, **changes})
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestMeta:
    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["backend"] == "MemoryBlobStore"
        assert data["entries"] == 0

    def test_config(self, client):
        data = client.get("/config").json()
        assert "tax_rate" in data
        assert "company_name" in data

    def test_months(self, client):
        data = client.get("/months", params={"count": 3}).json()
        assert len(data) == 3
        assert set(data[0]) == {"value", "label"}


class TestEntries:
    def test_create(self, client, body):
        data = _post(client, body)
        assert data["id"]
        assert data["srNo"] == 1
        assert data["vehicleNo"] == "MH01AB1234"
        assert data["quantity"] == 12.5
        assert data["amount"] == 4500

    def test_create_without_amount(self, client, body):
        data = _post(client, {k: v for k, v in body.items() if k != "amount"})
        assert data["amount"] is None

    @pytest.mark.parametrize("missing", ["date", "vehicleNo", "driverName", "from", "to", "quantity"])
    def test_required_fields(self, client, body, missing):
        payload = {k: v for k, v in body.items() if k != missing}
        assert client.post("/entries", json=payload).status_code == 422

    def test_blank_required_text_rejected(self, client, body):
        assert client.post("/entries", json={**body, "chalanNo": ""}).status_code == 422

    def test_list_and_filter(self, client, body):
        _post(client, body)
        _post(client, body, vehicleNo="gj05cd9876", date="2024-02-10")
        data = client.get("/entries", params={"vehicleNo": "mh01"}).json()
        assert data["total"] == 1
        assert data["active_filters"] == 1
        assert client.get("/entries", params={"month": "2024-02"}).json()["total"] == 1

    def test_unparseable_bound_ignored(self, client, body):
        _post(client, body)
        assert client.get("/entries", params={"minAmount": "abc"}).json()["total"] == 1

    def test_get_one(self, client, body):
        created = _post(client, body)
        assert client.get(f"/entries/{created['id']}").json() == created

    def test_get_unknown(self, client):
        assert client.get("/entries/nope").status_code == 404

    def test_patch(self, client, body):
        created = _post(client, body)
        resp = client.patch(f"/entries/{created['id']}", json={"driverName": "Suresh", "amount": "5000"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["driverName"] == "Suresh"
        assert data["amount"] == 5000
        assert data["createdAt"] == created["createdAt"]
        assert data["particular"] == created["particular"]

    def test_patch_unknown(self, client):
        assert client.patch("/entries/nope", json={"to": "Pune"}).status_code == 404

    def test_delete_idempotent(self, client, body):
        created = _post(client, body)
        assert client.delete(f"/entries/{created['id']}").status_code == 204
        assert client.delete(f"/entries/{created['id']}").status_code == 204
        assert client.get("/entries").json()["total"] == 0

    def test_export_csv(self, client, body):
        _post(client, body)
        resp = client.get("/entries/export.csv")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "logistics-entries-" in resp.headers["content-disposition"]
        assert resp.text.splitlines()[0].startswith("SR. NO.,Date")


class TestReports:
    def test_dashboard(self, client, body):
        _post(client, body)
        data = client.get("/dashboard", params={"month": "2024-03"}).json()
        assert data["total_entries"] == 1
        assert data["scope"] == "March 2024"

    def test_dashboard_bad_month(self, client):
        assert client.get("/dashboard", params={"month": "2024-3"}).status_code == 422

    def test_invoice(self, client, body):
        _post(client, body, amount="1000")
        data = client.get("/invoice", params={
            "month": "2024-03", "billTo": "Acme", "billNo": "BILL-000007", "taxRate": 0.18,
        }).json()
        assert data["bill_no"] == "BILL-000007"
        assert data["bill_to"] == "Acme"
        assert data["subtotal"] == "1000.00"
        assert data["tax"] == "180.00"
        assert data["total"] == "1180.00"

    def test_invoice_requires_month(self, client):
        assert client.get("/invoice").status_code == 422


class TestStorageFailure:
    def test_unavailable_storage_is_503(self, api_store, body, mocker):
        mocker.patch.object(api_store.blobs, "write",
                            side_effect=StorageUnavailableError("disk full"))
        client = TestClient(create_app(api_store), raise_server_exceptions=False)
        resp = client.post("/entries", json=body)
        assert resp.status_code == 503
        assert "not saved" in resp.json()["detail"]


class TestLaunch:
    def test_runs_uvicorn_without_browser(self, mocker, capsys):
        pytest.importorskip("uvicorn")
        run = mocker.patch("uvicorn.run")
        opener = mocker.patch("haulbook.ui.server._open_browser")
        from haulbook.ui.server import APP_PATH, launch

        launch(port=9001, open_browser=False)

        run.assert_called_once_with(APP_PATH, host="127.0.0.1", port=9001,
                                    reload=False, log_level="warning")
        opener.assert_not_called()
        assert "http://127.0.0.1:9001/docs" in capsys.readouterr().out
