"""Google Gemini text adapter (``generateContent``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from fitcoach.adapters.outbound.providers.base import HttpProviderAdapter
from fitcoach.domain.enums import ProviderId
from fitcoach.domain.exceptions import InvalidShapeError

logger = structlog.get_logger(__name__)


class GeminiTextAdapter(HttpProviderAdapter):
    """Returns the first candidate's text, untouched.

    Request keys: ``prompt`` (required), ``system_prompt``, ``temperature``,
    ``max_tokens``.
    """

    provider_id = ProviderId.GEMINI.value

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash-lite",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, client=client)
        self._model = model
        self._base_url = base_url.rstrip("/")

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> str:
        body: dict[str, Any] = {"contents": [{"parts": [{"text": request["prompt"]}]}]}
        if request.get("system_prompt"):
            body["system_instruction"] = {"parts": [{"text": request["system_prompt"]}]}

        generation_config: dict[str, Any] = {}
        if request.get("temperature") is not None:
            generation_config["temperature"] = request["temperature"]
        if request.get("max_tokens"):
            generation_config["maxOutputTokens"] = request["max_tokens"]
        if generation_config:
            body["generationConfig"] = generation_config

        response = await self._post(
            f"{self._base_url}/models/{self._model}:generateContent",
            params={"key": self._api_key},
            headers={"Content-Type": "application/json"},
            json=body,
            timeout=timeout,
        )
        data = self._json(response)
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise InvalidShapeError(f"[{self.provider_id}] No candidate text in response") from exc
        if not isinstance(text, str) or not text.strip():
            raise InvalidShapeError(f"[{self.provider_id}] Empty candidate text")
        logger.debug("gemini_text_received", model=self._model, chars=len(text))
        return text.strip()
