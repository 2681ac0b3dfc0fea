"""Exclusive-access wrapper around the embedding engine.

The engine is not safe for concurrent invocation, while many request
handlers run at once. ``InferenceGate`` lets exactly one inference call run
at a time.

Callers queue on an ``asyncio.Lock`` on the event loop, so waiting for the
engine never occupies a threadpool worker. Only the lock holder runs the
blocking engine call in a worker thread. The lock is released when that
call returns, not when its caller does: a caller that disconnects leaves
the engine busy until the running call has finished.
"""

import asyncio
import time
from typing import List, Sequence

import numpy as np
from starlette.concurrency import run_in_threadpool
import structlog

from ..encoders.embedding_manager import EmbeddingEngine
from ..exceptions import EngineFailure

logger = structlog.get_logger("semembed.inference_gate")


class InferenceGate:
    """Serialize calls into a non-concurrency-safe engine.

    No retry is attempted on failure and no ordering between waiting
    callers is promised.
    """

    def __init__(self, engine: EmbeddingEngine):
        self._engine = engine
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> EmbeddingEngine:
        return self._engine

    @property
    def busy(self) -> bool:
        """Whether an inference call currently holds the engine."""
        return self._lock.locked()

    def _release(self, call: "asyncio.Future") -> None:
        # Runs when the engine call itself finishes, even if its caller is gone.
        self._lock.release()
        if not call.cancelled():
            call.exception()

    async def run(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed ``texts`` without blocking the event loop.

        Returns vectors in input order. Engine errors, a vector count that
        does not match the input, and non-finite components all surface as
        ``EngineFailure``.
        """
        texts = list(texts)

        await self._lock.acquire()
        started = time.perf_counter()
        call = asyncio.ensure_future(run_in_threadpool(self._engine.embed, texts))
        call.add_done_callback(self._release)

        try:
            vectors = await asyncio.shield(call)
        except Exception as e:
            logger.error("Failed to generate embeddings", error=str(e), count=len(texts))
            raise EngineFailure(str(e), cause=e) from e

        if len(vectors) != len(texts):
            raise EngineFailure(
                f"engine returned {len(vectors)} vectors for {len(texts)} inputs"
            )

        for index, vector in enumerate(vectors):
            if not np.isfinite(np.asarray(vector, dtype=np.float64)).all():
                logger.error("Engine produced non-finite values", index=index)
                raise EngineFailure(f"engine returned non-finite values for input {index}")

        logger.debug(
            "Inference completed",
            count=len(texts),
            inference_ms=round((time.perf_counter() - started) * 1000, 3)
        )
        return vectors
