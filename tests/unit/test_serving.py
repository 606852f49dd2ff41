"""Unit tests for the serving layer."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from grounded_rag.config import settings
from grounded_rag.ingestion import normalizer
from grounded_rag.retrieval.models import NO_CONTEXT_MESSAGE
from grounded_rag.serving.app import _staged_name, app
from grounded_rag.service import RAGService, get_service

PDF_BYTES = b"%PDF-1.4\nbody\n%%EOF\n"


@pytest.fixture()
def client(service: RAGService, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoint(client: TestClient) -> None:
    """GET /health should return 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "backend": None}


def test_health_reports_backend_after_first_use(client: TestClient) -> None:
    client.post("/chat/ask", json={"question": "anything?"})
    assert client.get("/health").json()["backend"] == "memory"


def test_ingest_then_ask(client: TestClient) -> None:
    ingest = client.post(
        "/chat/ingest",
        json={
            "docs": [
                {
                    "content": "Invoice 189012 for order ORD-1001: 2x Wireless Headphones via "
                    "FastExpress, tracking FX-123456789."
                }
            ]
        },
    )
    assert ingest.status_code == 200
    assert ingest.json() == {
        "success": True,
        "message": "Documents ingested",
        "chunksAdded": 1,
        "documentsProcessed": 1,
        "pdfsProcessed": 0,
    }

    body = client.post("/chat/ask", json={"question": "What was shipped for order ORD-1001?"}).json()
    assert body["success"] is True
    assert body["contextCount"] >= 1
    assert "Wireless Headphones" in body["answer"]
    assert body["sources"] == ["inline"]


def test_ingest_without_documents(client: TestClient) -> None:
    body = client.post("/chat/ingest", json={}).json()
    assert body == {"success": False, "message": "No documents provided", "chunksAdded": 0}


def test_ask_before_ingest(client: TestClient) -> None:
    body = client.post("/chat/ask", json={"question": "What was shipped?"}).json()
    assert body == {"success": False, "answer": NO_CONTEXT_MESSAGE, "sources": [], "contextCount": 0}


def test_ask_empty_question(client: TestClient) -> None:
    body = client.post("/chat/ask", json={"question": "   "}).json()
    assert body == {"success": False, "message": "Question cannot be empty", "answer": "", "sources": []}


def test_ask_missing_question(client: TestClient) -> None:
    assert client.post("/chat/ask", json={}).json()["success"] is False


def test_upload_pdf(client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(normalizer, "extract_pdf_text", lambda _p: "Warranty lasts two years.")
    response = client.post(
        "/chat/upload",
        files=[("files", ("warranty.pdf", PDF_BYTES, "application/pdf"))],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["pdfsProcessed"] == 1
    assert body["uploadedFiles"] == ["warranty.pdf"]
    staged = list((tmp_path / "uploads").iterdir())
    assert len(staged) == 1
    assert staged[0].name.startswith("files-")
    assert staged[0].suffix == ".pdf"


def test_upload_rejects_non_pdf(client: TestClient) -> None:
    response = client.post("/chat/upload", files=[("files", ("notes.txt", b"hi", "text/plain"))])
    assert response.status_code == 400
    assert response.json()["detail"] == "Only pdf files are allowed"


def test_upload_rejects_too_many_files(client: TestClient) -> None:
    files = [("files", (f"f{i}.pdf", PDF_BYTES, "application/pdf")) for i in range(11)]
    assert client.post("/chat/upload", files=files).status_code == 400


def test_upload_without_files(client: TestClient) -> None:
    body = client.post("/chat/upload").json()
    assert body["success"] is False
    assert body["message"] == "No files uploaded"


def test_staged_name_keeps_extension_only() -> None:
    name = _staged_name("../../etc/passwd.pdf")
    assert name.startswith("files-")
    assert name.endswith(".pdf")
    assert "/" not in name
