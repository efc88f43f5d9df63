"""Replicate image adapter — submit a prediction, then poll it to completion."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from fitcoach.adapters.outbound.providers.base import HttpProviderAdapter
from fitcoach.domain.enums import ProviderId
from fitcoach.domain.exceptions import InvalidShapeError
from fitcoach.shared.providers.polling import JobSnapshot, JobState, PollingJob

logger = structlog.get_logger(__name__)

_STATUS_MAP: dict[str, JobState] = {
    "starting": JobState.SUBMITTED,
    "processing": JobState.POLLING,
    "succeeded": JobState.SUCCEEDED,
    "failed": JobState.FAILED,
    "canceled": JobState.FAILED,
}


class ReplicateImageAdapter(HttpProviderAdapter):
    """One ``invoke`` is one logical attempt: submit plus a bounded poll loop.

    Request keys: ``prompt`` (required).  Returns the first output URL.
    """

    provider_id = ProviderId.REPLICATE.value

    def __init__(
        self,
        api_key: str,
        *,
        model_version: str,
        base_url: str = "https://api.replicate.com/v1",
        request_timeout_s: float = 30.0,
        poll_interval_s: float = 1.0,
        max_polls: int = 60,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, client=client)
        self._model_version = model_version
        self._base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout_s
        self._poll_interval = poll_interval_s
        self._max_polls = max_polls

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> str:
        http_timeout = min(self._request_timeout, timeout)
        headers = {
            "Authorization": f"Token {self._api_key}",
            "Content-Type": "application/json",
        }

        async def _submit() -> JobSnapshot:
            response = await self._post(
                f"{self._base_url}/predictions",
                headers=headers,
                json={
                    "version": self._model_version,
                    "input": {
                        "prompt": request["prompt"],
                        "num_outputs": 1,
                        "width": 512,
                        "height": 512,
                        "guidance_scale": 7.5,
                    },
                },
                timeout=http_timeout,
            )
            return self._snapshot(self._json(response))

        async def _fetch(job_id: str) -> JobSnapshot:
            response = await self._get(
                f"{self._base_url}/predictions/{job_id}",
                headers={"Authorization": f"Token {self._api_key}"},
                timeout=http_timeout,
            )
            return self._snapshot(self._json(response))

        job = PollingJob(
            self.provider_id,
            _submit,
            _fetch,
            interval_s=self._poll_interval,
            max_polls=self._max_polls,
        )
        output = await job.run()

        if isinstance(output, str):
            output = [output]
        if not isinstance(output, list) or not output or not isinstance(output[0], str):
            raise InvalidShapeError(f"[{self.provider_id}] Prediction succeeded without an output URL")
        logger.debug("replicate_prediction_succeeded", polls=job.polls)
        return output[0]

    def _snapshot(self, data: Any) -> JobSnapshot:
        if not isinstance(data, dict) or not data.get("id"):
            raise InvalidShapeError(f"[{self.provider_id}] Prediction payload has no id")
        status = str(data.get("status", "")).lower()
        state = _STATUS_MAP.get(status)
        if state is None:
            raise InvalidShapeError(f"[{self.provider_id}] Unknown prediction status {status!r}")
        error = data.get("error")
        return JobSnapshot(
            job_id=str(data["id"]),
            state=state,
            output=data.get("output"),
            error=str(error) if error else None,
        )
