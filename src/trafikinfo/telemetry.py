"""Scoped timings and counters for fetch, load and decode.

Off unless ``TRAFIKINFO_TELEMETRY=1`` is set when the module is imported. When
off, every context is one shared no-op object.
"""

from collections import Counter
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, TypeAlias, runtime_checkable

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar("scope_stack", default=())

_TELEMETRY_ENABLED = os.getenv("TRAFIKINFO_TELEMETRY") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives finished scopes and counter increments."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_count(self, name: str, increment: int, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        _: type[BaseException] | None,
        __: BaseException | None,
        ___: TracebackType | None,
    ) -> None:
        return None

    @property
    def is_enabled(self) -> bool:
        return False

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    """Times nested scopes and forwards them to reporters.

    Scope names nest with dots: a ``decode`` scope opened inside ``fetch`` is
    reported as ``fetch.decode``. The stack lives in a ``ContextVar`` so
    threads do not see each other's scopes.
    """

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager["_EnabledTelemetryContext"]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator["_EnabledTelemetryContext"]:
        stack = (*_scope_stack_var.get(), name)
        token = _scope_stack_var.set(stack)
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            self._emit("record_timing", ".".join(stack), duration, metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Add *increment* to counter *name*, qualified by the open scopes."""
        path = ".".join((*_scope_stack_var.get(), name))
        self._emit("record_count", path, increment, metadata)

    def _emit(self, method: str, key: str, value: Any, metadata: dict[str, Any]) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(key, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )

    @property
    def is_enabled(self) -> bool:
        return True


_NO_OP_SINGLETON = _NoOpTelemetryContext()

TelemetryContextProtocol: TypeAlias = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return an enabled context when telemetry is on, else the shared no-op.

    An enabled context with no reporters gets a fresh ``MemoryReporter``.
    """
    if _TELEMETRY_ENABLED:
        return _EnabledTelemetryContext(*(reporters or (MemoryReporter(),)))
    return _NO_OP_SINGLETON


class MemoryReporter:
    """Keeps timings and counts in memory, grouped by object type.

    Scopes and counters without an ``object_type`` are grouped under ``None``.
    """

    def __init__(self) -> None:
        self.timings: dict[tuple[str | None, str], list[float]] = {}
        self.counts: Counter[tuple[str | None, str]] = Counter()

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        key = (metadata.get("object_type"), scope)
        self.timings.setdefault(key, []).append(duration)

    def record_count(self, name: str, increment: int, **metadata: Any) -> None:
        self.counts[(metadata.get("object_type"), name)] += increment

    def summary(self, object_type: str | None = None) -> dict[str, dict[str, float]]:
        """Per-scope ``calls``/``total_s``/``mean_s`` plus counters for one object type."""
        out: dict[str, dict[str, float]] = {}
        for (otype, scope), durations in sorted(
            self.timings.items(), key=lambda item: item[0][1]
        ):
            if otype != object_type:
                continue
            total = sum(durations)
            out[scope] = {
                "calls": len(durations),
                "total_s": total,
                "mean_s": total / len(durations),
            }
        for (otype, name), value in self.counts.items():
            if otype == object_type:
                out[name] = {"count": value}
        return out

    def reset(self) -> None:
        self.timings.clear()
        self.counts.clear()
