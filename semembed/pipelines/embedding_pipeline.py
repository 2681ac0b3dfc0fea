"""End-to-end handling of one embeddings request.

Steps
1. Count the request and start the latency timer (observed on every exit)
2. Normalize ``input`` to a non-empty ordered list of texts
3. Account approximate tokens (whitespace-delimited)
4. Run inference through the ``InferenceGate``
5. Assemble the OpenAI-compatible response document

Every failure increments the error counter before it propagates.
"""

import base64
import time
from typing import List, Sequence, Union

import numpy as np
import structlog

from ..api.schemas import EmbeddingData, EmbeddingRequest, EmbeddingResponse, EmbeddingUsage
from ..exceptions import EngineFailure, InvalidRequestError
from ..runtime.state import ServiceState

logger = structlog.get_logger("semembed.pipeline")


def normalize_input(input_data: Union[str, Sequence[str]]) -> List[str]:
    """Resolve the single-string/list union into an ordered list.

    Raises ``InvalidRequestError`` when the result is empty. Empty strings
    inside a non-empty batch are passed through to the engine.
    """
    if isinstance(input_data, str):
        texts = [input_data]
    else:
        texts = list(input_data)

    if not texts:
        raise InvalidRequestError("Input cannot be empty")
    return texts


def count_tokens(texts: Sequence[str]) -> int:
    """Approximate token usage as the number of whitespace-delimited words.

    This is not the engine tokenizer's count.
    """
    return sum(len(text.split()) for text in texts)


def encode_embedding_base64(embedding: Sequence[float]) -> str:
    """Encode a vector as base64 of little-endian float32, the OpenAI wire format."""
    packed = np.asarray(embedding, dtype="<f4").tobytes()
    return base64.b64encode(packed).decode("ascii")


class EmbeddingOrchestrator:
    """Request handler for ``POST /v1/embeddings``.

    Holds no state of its own; everything shared lives in ``ServiceState``.
    """

    def __init__(self, state: ServiceState):
        self.state = state

    async def create_embeddings(self, request: EmbeddingRequest) -> EmbeddingResponse:
        metrics = self.state.metrics
        metrics.record_request()

        with metrics.time_request():
            try:
                return await self._create_embeddings(request)
            except Exception:
                metrics.record_error()
                raise

    async def _create_embeddings(self, request: EmbeddingRequest) -> EmbeddingResponse:
        start_time = time.perf_counter()

        try:
            texts = normalize_input(request.input)
        except InvalidRequestError as e:
            logger.warning("Rejected embedding request", error=e.message)
            raise

        token_count = count_tokens(texts)
        self.state.metrics.record_tokens(token_count)

        try:
            vectors = await self.state.gate.run(texts)
        except EngineFailure as e:
            raise EngineFailure(f"Failed to generate embeddings: {e.message}", cause=e.cause) from e

        if request.encoding_format == "base64":
            embeddings = [encode_embedding_base64(vector) for vector in vectors]
        else:
            embeddings = vectors

        response = EmbeddingResponse(
            data=[
                EmbeddingData(embedding=embedding, index=index)
                for index, embedding in enumerate(embeddings)
            ],
            model=self.state.model_name,
            usage=EmbeddingUsage(prompt_tokens=token_count, total_tokens=token_count),
        )

        logger.info(
            "Embeddings generated",
            model_name=self.state.model_name,
            count=len(texts),
            tokens=token_count,
            encoding_format=request.encoding_format,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 3)
        )
        return response
