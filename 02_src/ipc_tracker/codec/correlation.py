"""Correlation envelope codec.

Request/response and synchronous calls carry a correlation token across the
bus inside an envelope. The payload is modelled as a tagged variant so the
decision "is this an envelope?" is made once, at the serialization boundary:

    Plain(args)              -> encoded as the args themselves
    Correlated(token, args)  -> encoded as [{ENVELOPE_KEY: token, "args": args}]

Detection is strict: exactly one dict argument with exactly the namespaced
token key and "args". Application payloads that merely look similar
decode as Plain.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Sequence, Union

ENVELOPE_KEY = "__ipc_tracker_correlation_token__"
_ENVELOPE_KEYS = frozenset({ENVELOPE_KEY, "args"})


@dataclass(frozen=True)
class Plain:
    """Arguments sent without a correlation token."""

    args: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Correlated:
    """Arguments tagged with a correlation token."""

    token: str
    args: list[Any] = field(default_factory=list)


Payload = Union[Plain, Correlated]


def new_token() -> str:
    """Generate a fresh correlation token."""
    return str(uuid.uuid4())


def encode(payload: Payload) -> list[Any]:
    """Turn a payload into the argument list put on the bus."""
    if isinstance(payload, Correlated):
        return [{ENVELOPE_KEY: payload.token, "args": list(payload.args)}]
    return list(payload.args)


def _is_envelope(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and set(value) == _ENVELOPE_KEYS
        and isinstance(value[ENVELOPE_KEY], str)
        and bool(value[ENVELOPE_KEY])
        and isinstance(value["args"], (list, tuple))
    )


def decode(received: Sequence[Any]) -> Payload:
    """Classify an argument list received from the bus."""
    if len(received) == 1 and _is_envelope(received[0]):
        envelope = received[0]
        return Correlated(token=envelope[ENVELOPE_KEY], args=list(envelope["args"]))
    return Plain(args=list(received))


def wrap(args: Sequence[Any], token: str) -> list[Any]:
    """Envelope args with a correlation token."""
    return encode(Correlated(token=token, args=list(args)))


def unwrap(received: Sequence[Any]) -> tuple[str | None, list[Any]]:
    """Return (token, real args); (None, args) when not enveloped."""
    payload = decode(received)
    if isinstance(payload, Correlated):
        return payload.token, payload.args
    return None, payload.args
