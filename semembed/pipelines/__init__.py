"""Request handling pipelines."""
