"""OpenAI adapters — chat completions (text) and image generations (DALL·E)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from fitcoach.adapters.outbound.providers.base import HttpProviderAdapter
from fitcoach.domain.enums import ProviderId
from fitcoach.domain.exceptions import InvalidShapeError


class _OpenAIAdapter(HttpProviderAdapter):
    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, client=client)
        self._model = model
        self._base_url = base_url.rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }


class OpenAIChatAdapter(_OpenAIAdapter):
    """Request keys: ``prompt`` (required), ``system_prompt``, ``temperature``, ``max_tokens``."""

    provider_id = ProviderId.OPENAI.value

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, model=model, base_url=base_url, client=client)

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> str:
        messages: list[dict[str, str]] = []
        if request.get("system_prompt"):
            messages.append({"role": "system", "content": request["system_prompt"]})
        messages.append({"role": "user", "content": request["prompt"]})

        body: dict[str, Any] = {"model": self._model, "messages": messages}
        if request.get("temperature") is not None:
            body["temperature"] = request["temperature"]
        if request.get("max_tokens"):
            body["max_tokens"] = request["max_tokens"]

        response = await self._post(
            f"{self._base_url}/chat/completions",
            headers=self._headers,
            json=body,
            timeout=timeout,
        )
        data = self._json(response)
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise InvalidShapeError(f"[{self.provider_id}] No message content in response") from exc
        if not isinstance(text, str) or not text.strip():
            raise InvalidShapeError(f"[{self.provider_id}] Empty message content")
        return text.strip()


class OpenAIImageAdapter(_OpenAIAdapter):
    """Request keys: ``prompt`` (required).  Returns the generated image URL."""

    provider_id = ProviderId.OPENAI_IMAGES.value

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "dall-e-2",
        size: str = "512x512",
        base_url: str = "https://api.openai.com/v1",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, model=model, base_url=base_url, client=client)
        self._size = size

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> str:
        response = await self._post(
            f"{self._base_url}/images/generations",
            headers=self._headers,
            json={
                "model": self._model,
                "prompt": request["prompt"],
                "n": 1,
                "size": self._size,
            },
            timeout=timeout,
        )
        data = self._json(response)
        try:
            url = data["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as exc:
            raise InvalidShapeError(f"[{self.provider_id}] No image URL in response") from exc
        if not isinstance(url, str) or not url:
            raise InvalidShapeError(f"[{self.provider_id}] Empty image URL")
        return url
