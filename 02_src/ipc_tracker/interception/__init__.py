"""Primitive interception module."""

from .instrumented_bus import InstrumentedBus
from .registry import ListenerRegistry

__all__ = ["InstrumentedBus", "ListenerRegistry"]
