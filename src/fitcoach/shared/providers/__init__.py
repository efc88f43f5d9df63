"""Multi-provider fallback framework.

Ordered provider chains, per-attempt timeouts, response validation and
degraded results for every generation capability.
"""

from fitcoach.shared.providers.types import (
    AttemptRecord,
    CapabilityPolicy,
    ObtainResult,
    ProviderSpec,
)
from fitcoach.shared.providers.orchestrator import FallbackOrchestrator, classify_failure
from fitcoach.shared.providers.polling import JobSnapshot, JobState, PollingJob

__all__ = [
    "AttemptRecord",
    "CapabilityPolicy",
    "FallbackOrchestrator",
    "JobSnapshot",
    "JobState",
    "ObtainResult",
    "PollingJob",
    "ProviderSpec",
    "classify_failure",
]
