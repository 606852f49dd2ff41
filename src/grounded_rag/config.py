"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="API key for the OpenAI-compatible chat endpoint")
    llm_model_name: str = Field(default="deepseek/deepseek-r1", description="Chat-model identifier")
    llm_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of an OpenAI-compatible chat API. Leave empty to use OpenAI cloud.",
    )
    llm_temperature: float = 0.0

    # Embedding
    embedding_base_url: str = Field(
        default="",
        description=(
            "Base URL of an Ollama embedding service, e.g. 'http://localhost:11434'. "
            "Leave empty to embed locally with sentence-transformers."
        ),
    )
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Vector store
    chroma_url: str = Field(
        default="",
        description="Chroma server URL, e.g. 'http://localhost:8000'. Empty keeps vectors in memory.",
    )
    chroma_collection: str = "grounded_rag"
    store_probe_attempts: int = Field(default=3, ge=1)
    store_probe_delay_seconds: float = Field(default=1.0, ge=0.0)

    # Retrieval / chunking
    retrieval_k: int = Field(default=8, ge=1)
    chunk_size: int = Field(default=1000, ge=1)
    chunk_overlap: int = Field(default=150, ge=0)
    max_sources: int = Field(default=10, ge=1)

    # Serving
    upload_dir: str = "uploads"
    max_upload_files: int = Field(default=10, ge=1)

    # Logging
    log_format: str = Field(default="json", pattern="^(json|pretty)$")
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_overlap(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


# Singleton — import `settings` wherever needed.
settings = Settings()
