from __future__ import annotations

from fastapi.testclient import TestClient


def test_app_smoke_routes(monkeypatch, sandbox_project):
    monkeypatch.setenv("STORAGE_BACKEND", "disk")
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "true")
    import app as app_module

    client = TestClient(app_module.create_app())

    r = client.get("/healthz")
    assert r.status_code == 200

    r = client.put("/api/documents/smoke", json={"resources": []})
    assert r.status_code == 200
    assert (sandbox_project / "data" / "documents" / "smoke.json").exists()

    r = client.post("/api/documents/smoke", json={"path": "resources", "value": {"id": "r1"}})
    assert r.status_code == 200
    assert r.json()["data"] == {"resources": [{"id": "r1"}]}
