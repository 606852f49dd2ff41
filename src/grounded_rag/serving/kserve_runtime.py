"""KServe custom model runtime for grounded Q&A."""

from __future__ import annotations

from typing import Any

import kserve

from grounded_rag.config import settings
from grounded_rag.logging_utils import configure_logging
from grounded_rag.service import RAGService


class GroundedRAGModel(kserve.Model):
    """KServe-compatible model that wraps :class:`RAGService`.

    This class implements the ``predict`` interface expected by KServe
    so question answering can be deployed as an ``InferenceService``.
    """

    def __init__(self, name: str = "grounded-rag", service: RAGService | None = None) -> None:
        super().__init__(name)
        self.service = service
        self.ready = False

    def load(self) -> bool:
        """Select the vector store and build the pipeline (called once at startup)."""
        if self.service is None:
            self.service = RAGService(settings)
        self.service.initialize()
        self.ready = True
        return self.ready

    def predict(self, payload: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
        """Run inference — called on every request.

        Parameters
        ----------
        payload:
            ``{"instances": [{"question": "..."}]}`` following the v1 protocol.
        headers:
            Optional HTTP headers.

        Returns
        -------
        dict
            ``{"predictions": [{"success": ..., "answer": "...", "sources": [...], ...}]}``
        """
        instances = payload.get("instances", [])
        predictions = []

        for instance in instances:
            question = instance.get("question", "")
            predictions.append(self.service.ask(question).to_response())

        return {"predictions": predictions}


if __name__ == "__main__":
    configure_logging(settings)
    model = GroundedRAGModel()
    model.load()
    kserve.ModelServer().start([model])
