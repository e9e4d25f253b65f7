"""Transport tap module."""

from .transport_tap import TransportTap

__all__ = ["TransportTap"]
