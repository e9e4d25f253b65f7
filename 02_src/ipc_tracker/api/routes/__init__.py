"""API routes."""

from . import control, events

__all__ = ["control", "events"]
