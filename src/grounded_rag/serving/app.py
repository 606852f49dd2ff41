"""FastAPI application exposing ingestion and grounded Q&A as a REST API."""

from __future__ import annotations

import logging
import secrets
import shutil
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from grounded_rag.config import settings
from grounded_rag.logging_utils import configure_logging
from grounded_rag.service import RAGService, get_service

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging(settings)
    yield


app = FastAPI(
    title="Grounded RAG API",
    version="0.1.0",
    description="Ingest documents and answer questions strictly from their content.",
    lifespan=lifespan,
)


# ── Request schemas ───────────────────────────────────────────────────
class IngestDoc(BaseModel):
    """One inline document."""

    content: str
    meta: dict[str, Any] | None = None


class IngestRequest(BaseModel):
    """Inline documents and/or server-local PDF paths."""

    docs: list[IngestDoc] | None = None
    pdfPaths: list[str] | None = None  # noqa: N815


class AskRequest(BaseModel):
    """Incoming question from the user."""

    question: str = Field(default="")


# ── Helpers ───────────────────────────────────────────────────────────
def _staged_name(original: str) -> str:
    """``files-<epoch-ms>-<random><ext>`` — never trust the client's name on disk."""
    suffix = Path(original or "").suffix
    return f"files-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


def _stage_uploads(files: list[UploadFile]) -> list[str]:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    paths: list[str] = []
    for upload in files:
        target = upload_dir / _staged_name(upload.filename or "")
        with target.open("wb") as fh:
            shutil.copyfileobj(upload.file, fh)
        paths.append(str(target))
    return paths


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
def health(service: RAGService = Depends(get_service)) -> dict[str, Any]:
    """Liveness probe; reports the active backend once initialised."""
    body: dict[str, Any] = {"status": "ok", "backend": service.backend}
    if service.fallback_reason:
        body["fallbackReason"] = service.fallback_reason
    return body


@app.post("/chat/ingest")
def ingest(request: IngestRequest, service: RAGService = Depends(get_service)) -> dict[str, Any]:
    """Ingest inline documents and server-local PDFs."""
    docs = [d.model_dump() for d in request.docs or []]
    return service.ingest(docs=docs, pdf_paths=request.pdfPaths or []).to_response()


@app.post("/chat/upload")
def upload(
    files: list[UploadFile] | None = File(default=None),
    service: RAGService = Depends(get_service),
) -> dict[str, Any]:
    """Stage uploaded PDFs on disk, then ingest them."""
    files = files or []
    if len(files) > settings.max_upload_files:
        raise HTTPException(status_code=400, detail=f"At most {settings.max_upload_files} files per upload")
    for f in files:
        if f.content_type != PDF_CONTENT_TYPE:
            raise HTTPException(status_code=400, detail="Only pdf files are allowed")

    paths = _stage_uploads(files)
    logger.info("Staged %d uploaded files", len(paths))
    result = service.upload(paths, [f.filename or "" for f in files])
    return result.to_response()


@app.post("/chat/ask")
def ask(request: AskRequest, service: RAGService = Depends(get_service)) -> dict[str, Any]:
    """Answer a question from the indexed documents."""
    return service.ask(request.question).to_response()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("grounded_rag.serving.app:app", host="0.0.0.0", port=8000)
