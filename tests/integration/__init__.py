"""Integration test suite for end-to-end flows.

Runs the HTTP surface against a real ``SentenceTransformer`` model instead of
the deterministic engine doubles used by the unit tests.
"""
