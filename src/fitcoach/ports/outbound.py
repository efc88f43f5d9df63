"""Outbound ports — interfaces that infrastructure adapters must implement.

The orchestration layer depends only on these abstractions, never on a
concrete provider's HTTP client or wire format.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from fitcoach.domain.results import FitnessPlan


# ═══════════════════════════════════════════════════════════════
#  Generative provider port
# ═══════════════════════════════════════════════════════════════
class ProviderAdapter(ABC):
    """One external generative service, seen as a capability-agnostic black box.

    ``invoke`` returns the provider's raw payload (text, URL, audio bytes) or
    raises.  Implementations must raise rather than return an empty payload,
    so a transport success with nothing in it stays distinguishable from a
    real result:

    * ``ProviderTimeoutError``    — the provider exceeded ``timeout``
    * ``ProviderTransportError``  — network / non-2xx / failed job
    * ``InvalidShapeError``       — 2xx, but the body could not be read
    """

    provider_id: str

    @abstractmethod
    async def invoke(self, request: Mapping[str, Any], timeout: float) -> Any: ...

    async def close(self) -> None:  # noqa: B027
        """Release adapter-owned resources (default: nothing)."""


# ═══════════════════════════════════════════════════════════════
#  Document rendering port
# ═══════════════════════════════════════════════════════════════
class PlanRendererPort(ABC):
    """Renders a canonical ``FitnessPlan`` into a downloadable document."""

    media_type: str
    extension: str

    @abstractmethod
    def render(self, plan: FitnessPlan) -> bytes: ...
