"""Tests for the semembed service.

Unit tests run against deterministic engine doubles (see ``conftest.py``);
no model is downloaded and no network is used.
"""
