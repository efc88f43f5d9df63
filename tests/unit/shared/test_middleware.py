"""Tests for route → capability tagging and metric path labels."""

from __future__ import annotations

import pytest

from fitcoach.domain.enums import Capability
from fitcoach.shared.middleware import capability_for, normalize_path


class TestCapabilityFor:
    @pytest.mark.parametrize(
        "path,capability",
        [
            ("/api/generate-plan", Capability.PLAN_GENERATION),
            ("/api/generate-image/", Capability.IMAGE_LOOKUP),
            ("/api/text-to-speech", Capability.SPEECH_SYNTHESIS),
            ("/api/motivation", Capability.MOTIVATION_QUOTE),
        ],
    )
    def test_coaching_routes(self, path: str, capability: Capability) -> None:
        assert capability_for(path) is capability

    @pytest.mark.parametrize("path", ["/health", "/api/export-pdf", "/", "/api/unknown"])
    def test_routes_without_provider_chain(self, path: str) -> None:
        assert capability_for(path) is None


class TestNormalizePath:
    def test_known_paths_kept(self) -> None:
        assert normalize_path("/api/export-pdf") == "/api/export-pdf"
        assert normalize_path("/metrics") == "/metrics"

    def test_docs_collapsed(self) -> None:
        assert normalize_path("/docs/oauth2-redirect") == "docs"

    def test_unknown_api_path_collapsed(self) -> None:
        assert normalize_path("/api/does-not-exist/123") == "other"
