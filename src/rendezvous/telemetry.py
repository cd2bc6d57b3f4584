"""Stage timings and counters for command invocations.

`TelemetryContext` returns a shared no-op object unless telemetry is enabled,
either explicitly or with ``RENDEZVOUS_TELEMETRY=1``, and at least one
reporter is attached. Scopes nest per asyncio task, so concurrent commands
never see each other's scope paths.
"""

from collections import defaultdict, deque
from contextvars import ContextVar, Token
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

log = logging.getLogger(__name__)

_active_scopes: ContextVar[tuple[str, ...]] = ContextVar("rendezvous_scopes", default=())


def telemetry_enabled_by_env() -> bool:
    return os.getenv("RENDEZVOUS_TELEMETRY") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives finished scope timings and recorded metrics."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _DisabledTelemetry:
    """Accepts every call and records nothing."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _Scope:
    """One timed, nested scope; reports its duration on exit."""

    __slots__ = ("_metadata", "_name", "_started", "_telemetry", "_token")

    def __init__(self, telemetry: "_ActiveTelemetry", name: str, metadata: dict[str, Any]):
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")
        self._telemetry = telemetry
        self._name = name
        self._metadata = metadata
        self._started = 0.0
        self._token: Token[tuple[str, ...]] | None = None

    def __enter__(self) -> "_ActiveTelemetry":
        self._token = _active_scopes.set((*_active_scopes.get(), self._name))
        self._started = time.perf_counter()
        return self._telemetry

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        duration = time.perf_counter() - self._started
        path = ".".join(_active_scopes.get())
        if self._token is not None:
            _active_scopes.reset(self._token)
        parents = _active_scopes.get()
        self._telemetry._dispatch(
            "record_timing",
            path,
            duration,
            depth=len(parents),
            parent_scope=".".join(parents) or None,
            failed=exc_type is not None,
            **self._metadata,
        )


class _ActiveTelemetry:
    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(self, name: str, **metadata: Any) -> _Scope:
        return _Scope(self, name, metadata)

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record ``value`` under ``name`` inside the current scope path."""
        path = ".".join((*_active_scopes.get(), name))
        self._dispatch("record_metric", path, value, **metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        self.metric(name, increment, metric_type="counter", **metadata)

    def _dispatch(self, method: str, scope: str, value: Any, **metadata: Any) -> None:
        # A broken reporter must not fail the command being measured.
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed on %s: %s",
                    type(reporter).__name__,
                    scope,
                    e,
                    exc_info=True,
                )


_DISABLED = _DisabledTelemetry()

type TelemetryContextProtocol = _ActiveTelemetry | _DisabledTelemetry


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: bool | None = None
) -> TelemetryContextProtocol:
    """Return the telemetry context for one command invocation.

    Args:
        *reporters: Sinks for timings and metrics.
        enabled: Force telemetry on or off; None defers to the environment.
    """
    is_enabled = telemetry_enabled_by_env() if enabled is None else enabled
    if is_enabled and reporters:
        return _ActiveTelemetry(*reporters)
    return _DISABLED


class MemoryReporter:
    """Keeps the most recent timings and metrics per scope in memory."""

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = defaultdict(
            self._new_buffer
        )
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = defaultdict(
            self._new_buffer
        )

    def _new_buffer(self) -> deque[Any]:
        return deque(maxlen=self.max_entries)

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings[scope].append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics[scope].append((value, metadata))

    def stage_durations(self, scope: str = "pipeline.stage") -> dict[str, list[float]]:
        """Group the durations recorded for ``scope`` by their ``stage`` metadata."""
        grouped: dict[str, list[float]] = defaultdict(list)
        for duration, metadata in self.timings.get(scope, ()):
            grouped[metadata.get("stage", "?")].append(duration)
        return dict(grouped)

    def get_report(self) -> str:
        lines = ["=== Rendezvous Telemetry ==="]
        for scope, entries in sorted(self.timings.items()):
            durations = [d for d, _ in entries]
            lines.append(
                f"{scope:<32} calls={len(durations):<4} "
                f"mean={sum(durations) / len(durations):.4f}s max={max(durations):.4f}s"
            )
        for scope, entries in sorted(self.metrics.items()):
            total = sum(v for v, _ in entries if isinstance(v, int | float))
            lines.append(f"{scope:<32} events={len(entries):<4} total={total:,.0f}")
        return "\n".join(lines)
