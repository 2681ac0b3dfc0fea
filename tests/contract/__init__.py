"""API contract tests.

These tests validate that public endpoints conform to the OpenAI embeddings
request/response schemas and remain stable across releases. They focus on
shape rather than specific vector values.
"""
