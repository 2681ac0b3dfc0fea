"""Common utilities shared across the service.

Includes:
- ``config``: pydantic-settings configuration from ``SEMEMBED_*`` variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics collector.
"""
