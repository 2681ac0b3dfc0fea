"""Embedding engine loading and generation.

The engine is an opaque capability with two operations:

- ``load_engine(model_name, ...)`` runs once at startup and returns an engine
- ``engine.embed(texts)`` turns an ordered list of texts into an ordered
  list of vectors, or raises

``SentenceTransformerEngine`` is the production implementation. It is not
safe for concurrent invocation; callers go through ``InferenceGate``.
"""

import time
from typing import Any, Dict, List, Optional, Protocol, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer
import structlog

from ..exceptions import ModelLoadError

logger = structlog.get_logger("semembed.encoders")


class EmbeddingEngine(Protocol):
    """Anything that can turn texts into vectors."""

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        ...


class SentenceTransformerEngine:
    """Engine backed by a ``SentenceTransformer`` model.

    Notes
    - Model metadata (dimension, max length) is kept in ``model_info``
    - ``normalize`` L2-normalizes every vector so cosine similarity is a
      plain dot product, matching the hosted API
    """

    def __init__(self, model: SentenceTransformer, model_name: str, normalize: bool = True):
        self.model = model
        self.model_name = model_name
        self.normalize = normalize
        self.model_info: Dict[str, Any] = {
            "name": model_name,
            "dimension": model.get_sentence_embedding_dimension(),
            "max_length": model.max_seq_length,
            "loaded_at": time.time()
        }

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Generate one embedding per text, in input order."""
        vectors = self.model.encode(
            list(texts),
            convert_to_numpy=True,
            normalize_embeddings=self.normalize,
            show_progress_bar=False,
        )
        return np.asarray(vectors, dtype=np.float32).tolist()


def load_engine(
    model_name: str,
    device: Optional[str] = None,
    normalize: bool = True
) -> SentenceTransformerEngine:
    """Load the embedding model.

    Downloads the model on first use (cached by Hugging Face afterwards).
    Any failure is raised as ``ModelLoadError``; there is no retry.
    """
    started = time.time()
    logger.info("Loading embedding model", model_name=model_name, device=device)

    try:
        model = SentenceTransformer(model_name, device=device)
    except Exception as e:
        logger.error("Failed to load embedding model", model_name=model_name, error=str(e))
        raise ModelLoadError(f"Failed to load model {model_name}: {e}") from e

    engine = SentenceTransformerEngine(model, model_name, normalize=normalize)
    logger.info(
        "Model loaded successfully",
        model_name=model_name,
        dimension=engine.model_info["dimension"],
        max_length=engine.model_info["max_length"],
        load_seconds=round(time.time() - started, 3)
    )
    return engine
