"""Requester-side instrumentation module."""

from .bootstrap import bootstrap_requester, privileged_worker_sink
from .instrumented_requester import EventSink, InstrumentedRequesterBus

__all__ = [
    "EventSink",
    "InstrumentedRequesterBus",
    "bootstrap_requester",
    "privileged_worker_sink",
]
