"""semembed: OpenAI-compatible embedding service.

Layout:
- ``api``: FastAPI route handlers and request/response models.
- ``common``: configuration, structured logging and Prometheus metrics.
- ``encoders``: engine loading (``SentenceTransformer``) and generation.
- ``runtime``: the inference gate and process-wide service state.
- ``pipelines``: the embeddings request handler.

Import convenience:
- from semembed.main import create_app
"""

__version__ = "0.1.0"
