"""Domain-specific exception hierarchy.

All exceptions inherit from ``DomainError`` so callers can catch the entire
family in one clause while still discriminating on subclass.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain-layer errors."""

    def __init__(self, message: str, *, code: str = "DOMAIN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


# ── Validation ───────────────────────────────────────────────
class ValidationError(DomainError):
    """Input failed domain validation rules."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


class InvalidShapeError(DomainError):
    """A provider answered, but the payload is not the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_SHAPE")


# ── External providers ──────────────────────────────────────
class ProviderError(DomainError):
    """Base for failures talking to an external generative provider."""

    def __init__(self, provider: str, message: str, *, code: str = "PROVIDER_ERROR") -> None:
        self.provider = provider
        super().__init__(f"[{provider}] {message}", code=code)


class ProviderTransportError(ProviderError):
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(provider, message, code="TRANSPORT_ERROR")


class ProviderTimeoutError(ProviderError):
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(provider, message, code="PROVIDER_TIMEOUT")


class JobFailedError(ProviderTransportError):
    """An asynchronous provider job reached a failed terminal state."""


class JobTimeoutError(ProviderTimeoutError):
    """An asynchronous provider job did not finish within its poll ceiling."""

    def __init__(self, provider: str, polls: int) -> None:
        self.polls = polls
        super().__init__(provider, f"Job still running after {polls} polls")


# ── Capability outcome ──────────────────────────────────────
class CapabilityUnavailableError(DomainError):
    """Every provider failed and the capability has no safe substitute."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CAPABILITY_UNAVAILABLE")
