"""Fallback orchestrator — the single entry-point for provider calls.

Each capability is configured once with an ordered chain of providers, a
response validator and (optionally) a degraded-result supplier.  ``obtain``
walks the chain in order, one attempt per provider, and returns the first
validated result.  When the chain is exhausted it returns the degraded
result, or an UNAVAILABLE outcome for capabilities that have none.  Provider
failures never escape as exceptions.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog

from fitcoach.domain.enums import Capability, FailureReason, OutcomeStatus
from fitcoach.domain.exceptions import InvalidShapeError, ProviderTimeoutError
from fitcoach.shared.observability.metrics import (
    CAPABILITY_OUTCOMES,
    PROVIDER_ATTEMPTS,
    PROVIDER_LATENCY,
)
from fitcoach.shared.providers.types import (
    AttemptRecord,
    CapabilityPolicy,
    ObtainResult,
    ProviderSpec,
)

logger = structlog.get_logger(__name__)


def classify_failure(exc: BaseException) -> FailureReason:
    """Map an attempt's exception onto the failure taxonomy."""
    if isinstance(exc, (asyncio.TimeoutError, ProviderTimeoutError)):
        return FailureReason.TIMEOUT
    if isinstance(exc, InvalidShapeError):
        return FailureReason.INVALID_SHAPE
    return FailureReason.TRANSPORT_ERROR


class FallbackOrchestrator:
    """Configuration-driven, sequential fallback across providers.

    Usage::

        orchestrator = FallbackOrchestrator({
            Capability.IMAGE_LOOKUP: CapabilityPolicy(
                capability=Capability.IMAGE_LOOKUP,
                providers=(ProviderSpec("replicate", replicate), ...),
                validator=validate_image,
                degraded=placeholder_image(),
            ),
        })
        result = await orchestrator.obtain(Capability.IMAGE_LOOKUP, {"prompt": ..., "item_name": ...})

    Policies are frozen at construction; ``obtain`` keeps all of its state
    on the stack, so concurrent calls need no locking.
    """

    def __init__(self, policies: Mapping[Capability, CapabilityPolicy[Any]]) -> None:
        for capability, policy in policies.items():
            if policy.capability != capability:
                raise ValueError(
                    f"Policy for {policy.capability.value} registered under {capability.value}"
                )
        self._policies: Mapping[Capability, CapabilityPolicy[Any]] = MappingProxyType(dict(policies))

    @property
    def policies(self) -> Mapping[Capability, CapabilityPolicy[Any]]:
        return self._policies

    # ── Main entry-point ─────────────────────────────────────
    async def obtain(self, capability: Capability, request: Mapping[str, Any]) -> ObtainResult[Any]:
        """Return the first validated provider result, the degraded result, or UNAVAILABLE.

        Worst-case latency is bounded by the sum of the chain's per-provider
        timeouts.  Cancellation of the calling task propagates and abandons
        the in-flight attempt.
        """
        log = logger.bind(capability=capability.value)
        policy = self._policies.get(capability)
        if policy is None:
            log.error("capability_not_configured")
            return self._finish(ObtainResult(capability=capability, status=OutcomeStatus.UNAVAILABLE))

        attempts: list[AttemptRecord] = []
        skipped: list[str] = []

        for spec in policy.providers:
            if not spec.credential_present:
                skipped.append(spec.provider_id)
                log.debug("provider_skipped", provider=spec.provider_id, reason=FailureReason.CREDENTIAL_MISSING.value)
                continue

            record, value = await self._attempt(policy, spec, request)
            attempts.append(record)
            if record.succeeded:
                if len(attempts) > 1:
                    log.info(
                        "provider_failover_success",
                        provider=spec.provider_id,
                        attempts=len(attempts),
                        failed_providers=[a.provider_id for a in attempts[:-1]],
                    )
                return self._finish(
                    ObtainResult(
                        capability=capability,
                        status=OutcomeStatus.SUCCEEDED,
                        value=value,
                        provider_id=spec.provider_id,
                        attempts=tuple(attempts),
                        skipped=tuple(skipped),
                    )
                )

        # Chain exhausted
        if policy.degraded is not None:
            log.warning(
                "capability_degraded",
                failures={a.provider_id: a.reason.value for a in attempts if a.reason},
                skipped=skipped,
            )
            return self._finish(
                ObtainResult(
                    capability=capability,
                    status=OutcomeStatus.DEGRADED,
                    value=policy.degraded(request),
                    attempts=tuple(attempts),
                    skipped=tuple(skipped),
                )
            )

        log.error(
            "capability_unavailable",
            failures={a.provider_id: a.reason.value for a in attempts if a.reason},
            skipped=skipped,
        )
        return self._finish(
            ObtainResult(
                capability=capability,
                status=OutcomeStatus.UNAVAILABLE,
                attempts=tuple(attempts),
                skipped=tuple(skipped),
            )
        )

    # ── One provider attempt ─────────────────────────────────
    async def _attempt(
        self,
        policy: CapabilityPolicy[Any],
        spec: ProviderSpec,
        request: Mapping[str, Any],
    ) -> tuple[AttemptRecord, Any]:
        capability = policy.capability.value
        log = logger.bind(capability=capability, provider=spec.provider_id)

        start = time.monotonic()
        try:
            raw = await asyncio.wait_for(
                spec.adapter.invoke(request, spec.timeout_s),
                timeout=spec.timeout_s,
            )
        except Exception as exc:
            return self._failed(log, spec, capability, classify_failure(exc), exc, start), None

        try:
            value = policy.validator(raw, request)
        except Exception as exc:
            return self._failed(log, spec, capability, FailureReason.INVALID_SHAPE, exc, start), None

        latency_ms = (time.monotonic() - start) * 1000
        self._observe(capability, spec.provider_id, "success", latency_ms)
        log.info("provider_attempt_succeeded", latency_ms=float(f"{latency_ms:.1f}"))
        return AttemptRecord(spec.provider_id, None, latency_ms), value

    # ── Health / introspection ───────────────────────────────
    def describe(self) -> dict[str, dict[str, Any]]:
        """Static view of every configured chain (for the health endpoint)."""
        return {
            capability.value: {
                "providers": [
                    {
                        "provider_id": spec.provider_id,
                        "credential_present": spec.credential_present,
                        "timeout_s": spec.timeout_s,
                    }
                    for spec in policy.providers
                ],
                "has_degraded_result": policy.has_degraded,
            }
            for capability, policy in self._policies.items()
        }

    # ── Internals ────────────────────────────────────────────
    def _failed(
        self,
        log: Any,
        spec: ProviderSpec,
        capability: str,
        reason: FailureReason,
        exc: Exception,
        start: float,
    ) -> AttemptRecord:
        latency_ms = (time.monotonic() - start) * 1000
        error_msg = (
            f"Timeout after {spec.timeout_s}s"
            if isinstance(exc, asyncio.TimeoutError)
            else f"{type(exc).__name__}: {exc}"
        )
        self._observe(capability, spec.provider_id, reason.value, latency_ms)
        log.warning(
            "provider_attempt_failed",
            reason=reason.value,
            error=error_msg,
            latency_ms=float(f"{latency_ms:.1f}"),
        )
        return AttemptRecord(spec.provider_id, reason, latency_ms, error_msg)

    @staticmethod
    def _observe(capability: str, provider: str, outcome: str, latency_ms: float) -> None:
        PROVIDER_ATTEMPTS.labels(capability=capability, provider=provider, outcome=outcome).inc()
        PROVIDER_LATENCY.labels(capability=capability, provider=provider).observe(latency_ms / 1000)

    @staticmethod
    def _finish(result: ObtainResult[Any]) -> ObtainResult[Any]:
        CAPABILITY_OUTCOMES.labels(capability=result.capability.value, status=result.status.value).inc()
        return result
