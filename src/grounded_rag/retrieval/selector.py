"""Store selection — decide once which backend serves this process.

State machine
-------------
::

    Unconfigured ───────────────────────────────▶ Ready(EPHEMERAL)
    Configured ─▶ Probing ─ success ────────────▶ Ready(PERSISTENT)
                          └ attempts exhausted ─▶ Ready(EPHEMERAL, fallback_reason)

``Ready`` is terminal: there is no re-probe or promotion back to the
persistent backend while the process runs. Records ingested while
degraded are lost on restart.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from grounded_rag.errors import StoreProbeFailure
from grounded_rag.retrieval.memory_store import InMemoryVectorStore

if TYPE_CHECKING:
    from grounded_rag.config import Settings
    from grounded_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class StoreKind(str, enum.Enum):
    EPHEMERAL = "ephemeral"
    PERSISTENT = "persistent"


@dataclass(frozen=True)
class StoreSelection:
    """The backend chosen at startup.

    Attributes
    ----------
    kind:
        Which variant was selected.
    store:
        The ready-to-use backend instance.
    fallback_reason:
        Why the persistent backend was abandoned; ``None`` unless the
        selector degraded to the ephemeral backend after probing.
    """

    kind: StoreKind
    store: VectorStoreBase
    fallback_reason: str | None = None

    @property
    def degraded(self) -> bool:
        return self.fallback_reason is not None


def _default_persistent_factory(settings: Settings) -> Callable[[], VectorStoreBase]:
    def factory() -> VectorStoreBase:
        # Lazy import keeps chromadb out of the in-memory code path.
        from grounded_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore(settings.chroma_url, settings.chroma_collection)

    return factory


def probe_once(factory: Callable[[], VectorStoreBase]) -> VectorStoreBase:
    """Build the persistent store and confirm it answers a heartbeat."""
    try:
        store = factory()
    except Exception as exc:
        raise StoreProbeFailure(f"{type(exc).__name__}: {exc}") from exc
    if not store.health_check():
        raise StoreProbeFailure("health check returned False")
    return store


def select_store(
    settings: Settings,
    *,
    persistent_factory: Callable[[], VectorStoreBase] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> StoreSelection:
    """Run the selection state machine and return the ready backend.

    Parameters
    ----------
    settings:
        Supplies ``chroma_url`` and the probe policy
        (``store_probe_attempts``, ``store_probe_delay_seconds``).
    persistent_factory:
        Builds the persistent store; defaults to
        :class:`~grounded_rag.retrieval.chroma_store.ChromaVectorStore`.
    sleep:
        Injected for tests.
    """
    if not settings.chroma_url:
        logger.info("No persistent store configured; using in-memory vector store")
        return StoreSelection(kind=StoreKind.EPHEMERAL, store=InMemoryVectorStore())

    factory = persistent_factory or _default_persistent_factory(settings)
    attempts = settings.store_probe_attempts
    last_error: StoreProbeFailure | None = None

    for attempt in range(1, attempts + 1):
        try:
            store = probe_once(factory)
        except StoreProbeFailure as exc:
            last_error = exc
            logger.info("Persistent store probe %d/%d failed: %s", attempt, attempts, exc.message)
            if attempt < attempts:
                sleep(settings.store_probe_delay_seconds)
            continue
        logger.info("Connected to persistent vector store at %s", settings.chroma_url)
        return StoreSelection(kind=StoreKind.PERSISTENT, store=store)

    reason = f"{settings.chroma_url} unreachable after {attempts} attempts"
    if last_error is not None:
        reason = f"{reason} ({last_error.message})"
    logger.warning("Falling back to in-memory vector store: %s", reason)
    return StoreSelection(kind=StoreKind.EPHEMERAL, store=InMemoryVectorStore(), fallback_reason=reason)
