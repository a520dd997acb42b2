"""Observability helpers."""

from yamlenv.observability.logging import configure_logging


__all__ = [
    "configure_logging",
]
