"""Embedding engine loading and generation."""
