"""HTTP inspection surface."""

from .app import create_inspection_app, host_lifespan

__all__ = ["create_inspection_app", "host_lifespan"]
