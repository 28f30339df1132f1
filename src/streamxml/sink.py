from __future__ import annotations
from typing import Protocol, runtime_checkable
from .errors import InvalidSinkError


@runtime_checkable
class Sink(Protocol):
    """Append-only byte destination. flush() is optional."""
    def write(self, data: bytes, /) -> object: ...


def check_sink(sink: object) -> Sink:
    if not isinstance(sink, Sink) or not callable(sink.write):
        raise InvalidSinkError(f"sink has no callable write(): {type(sink).__name__}")
    return sink  # type: ignore[return-value]


def flush_sink(sink: Sink) -> None:
    """Flush the sink if it knows how; plain write-only sinks are left alone."""
    flush = getattr(sink, "flush", None)
    if callable(flush):
        flush()
