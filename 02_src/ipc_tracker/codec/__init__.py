"""Correlation codec module."""

from .correlation import (
    ENVELOPE_KEY,
    Correlated,
    Payload,
    Plain,
    decode,
    encode,
    new_token,
    unwrap,
    wrap,
)

__all__ = [
    "ENVELOPE_KEY",
    "Correlated",
    "Payload",
    "Plain",
    "decode",
    "encode",
    "new_token",
    "unwrap",
    "wrap",
]
