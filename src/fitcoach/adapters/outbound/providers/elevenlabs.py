"""ElevenLabs text-to-speech adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from fitcoach.adapters.outbound.providers.base import HttpProviderAdapter
from fitcoach.domain.enums import ProviderId
from fitcoach.domain.exceptions import InvalidShapeError


class ElevenLabsSpeechAdapter(HttpProviderAdapter):
    """Request keys: ``text`` (required).  Returns MPEG audio bytes."""

    provider_id = ProviderId.ELEVENLABS.value

    def __init__(
        self,
        api_key: str,
        *,
        voice_id: str = "21m00Tcm4TlvDq8ikWAM",
        model_id: str = "eleven_monolingual_v1",
        stability: float = 0.5,
        similarity_boost: float = 0.75,
        base_url: str = "https://api.elevenlabs.io/v1",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, client=client)
        self._voice_id = voice_id
        self._model_id = model_id
        self._voice_settings = {"stability": stability, "similarity_boost": similarity_boost}
        self._base_url = base_url.rstrip("/")

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> bytes:
        response = await self._post(
            f"{self._base_url}/text-to-speech/{self._voice_id}",
            headers={
                "xi-api-key": self._api_key,
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            json={
                "text": request["text"],
                "model_id": self._model_id,
                "voice_settings": self._voice_settings,
            },
            timeout=timeout,
        )
        audio = response.content
        if not audio:
            raise InvalidShapeError(f"[{self.provider_id}] Empty audio body")
        return audio
