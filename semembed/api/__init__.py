"""API subpackage for the embedding service.

Contains the FastAPI router and the OpenAI-compatible schemas for:
- Embedding generation (``/v1/embeddings``)
- Health and model discovery (``/health``, ``/models``)
- Prometheus scraping (``/metrics``)
"""
