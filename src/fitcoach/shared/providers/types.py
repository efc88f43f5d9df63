"""Core types for the multi-provider fallback orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from fitcoach.domain.enums import Capability, FailureReason, OutcomeStatus
from fitcoach.ports.outbound import ProviderAdapter

T = TypeVar("T")

# raw provider payload + original request → canonical result (raises on bad shape)
Validator = Callable[[Any, Mapping[str, Any]], T]
# original request → canonical result, no I/O, never raises
DegradedSupplier = Callable[[Mapping[str, Any]], T]


@dataclass(frozen=True)
class ProviderSpec:
    """One entry in a capability's fallback chain.

    Attributes:
        provider_id:        Identifier used in logs, metrics and health output.
        adapter:            Object exposing ``invoke(request, timeout)``.
        timeout_s:          Budget for the whole attempt (polling included).
        credential_present: False → skipped without counting as an attempt.
    """

    provider_id: str
    adapter: ProviderAdapter
    timeout_s: float = 30.0
    credential_present: bool = True


@dataclass(frozen=True)
class CapabilityPolicy(Generic[T]):
    """Ordered chain, validator and optional degraded supplier for a capability."""

    capability: Capability
    providers: tuple[ProviderSpec, ...]
    validator: Validator[T]
    degraded: DegradedSupplier[T] | None = None

    def __post_init__(self) -> None:
        if not self.providers and self.degraded is None:
            raise ValueError(
                f"{self.capability.value}: provider chain is empty and no degraded result is defined"
            )

    @property
    def has_degraded(self) -> bool:
        return self.degraded is not None


@dataclass(frozen=True)
class AttemptRecord:
    """Outcome of one provider invocation (``reason is None`` means success)."""

    provider_id: str
    reason: FailureReason | None = None
    latency_ms: float = 0.0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class ObtainResult(Generic[T]):
    """What ``FallbackOrchestrator.obtain`` hands back — never an exception.

    ``status == UNAVAILABLE`` is the Unavailable marker: ``value`` is None.
    """

    capability: Capability
    status: OutcomeStatus
    value: T | None = None
    provider_id: str | None = None
    attempts: tuple[AttemptRecord, ...] = ()
    skipped: tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return self.status != OutcomeStatus.UNAVAILABLE

    @property
    def degraded(self) -> bool:
        return self.status == OutcomeStatus.DEGRADED

    def failure_summary(self) -> dict[str, str]:
        return {
            a.provider_id: a.reason.value
            for a in self.attempts
            if a.reason is not None
        }
