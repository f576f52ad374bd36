"""HTTP client for the cloud rendering service.

The client is constructed explicitly and handed to whoever needs it; tests
pass an ``httpx.AsyncClient`` backed by ``httpx.MockTransport``.

Any response that is not 2xx or lacks the fields we rely on is treated as a
failure (fail closed) so an export never hangs on a garbled answer.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from vibecut.config import Settings, get_settings
from vibecut.exceptions import MalformedRenderResponseError, RenderSubmitError
from vibecut.schemas.render import RenderStatus

logger = logging.getLogger(__name__)


def _response_body(resp: httpx.Response) -> dict[str, Any]:
    """Extract the ``response`` envelope the render service wraps results in."""
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedRenderResponseError(f"Render service returned invalid JSON: {e}")
    body = data.get("response") if isinstance(data, dict) else None
    if not isinstance(body, dict):
        raise MalformedRenderResponseError("Render service response has no 'response' object")
    return body


class RenderClient:
    """Submit render jobs and query their status."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"x-api-key": api_key, "Content-Type": "application/json"}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RenderClient":
        settings = settings or get_settings()
        return cls(
            settings.render_api_url,
            settings.render_api_key,
            timeout=settings.render_request_timeout_s,
        )

    async def __aenter__(self) -> "RenderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, payload: dict[str, Any]) -> str:
        """Send a render job.

        Args:
            payload: Render request body (timeline + output)

        Returns:
            Job id assigned by the render service

        Raises:
            RenderSubmitError: Transport failure or non-2xx answer
            MalformedRenderResponseError: Answer without a job id
        """
        try:
            resp = await self._client.post(
                f"{self.base_url}/render", json=payload, headers=self._headers
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Render submit rejected: HTTP {e.response.status_code}")
            raise RenderSubmitError(f"Render service rejected the job (HTTP {e.response.status_code})")
        except httpx.TransportError as e:
            logger.warning(f"Render submit transport error: {e}")
            raise RenderSubmitError(f"Could not reach the render service: {e}")
        except httpx.RequestError as e:
            logger.warning(f"Render submit failed: {e!r}")
            raise RenderSubmitError(f"Render service answer could not be read: {e}")

        job_id = _response_body(resp).get("id")
        if not isinstance(job_id, str) or not job_id:
            raise MalformedRenderResponseError("Render service did not return a job id")
        logger.info(f"Render job submitted: {job_id}")
        return job_id

    async def get_status(self, job_id: str) -> RenderStatus:
        """Fetch the current status of a job.

        Raises:
            httpx.TransportError: Network failure (the poller decides whether to retry)
            MalformedRenderResponseError: Undecodable or non-2xx answer, missing/unknown status
        """
        try:
            resp = await self._client.get(
                f"{self.base_url}/render/{job_id}", headers=self._headers
            )
        except httpx.TransportError:
            raise
        except httpx.RequestError as e:
            raise MalformedRenderResponseError(
                f"Render status answer could not be read: {e}", job_id=job_id
            )
        if resp.is_error:
            raise MalformedRenderResponseError(
                f"Render status check failed (HTTP {resp.status_code})", job_id=job_id
            )

        body = _response_body(resp)
        try:
            status = RenderStatus(
                job_id=job_id,
                status=body.get("status"),
                url=body.get("url"),
                error=body.get("error"),
            )
        except ValidationError as e:
            raise MalformedRenderResponseError(
                f"Render status response is invalid: {e.errors()[0]['msg']}", job_id=job_id
            )

        if status.status == "done" and not status.url:
            raise MalformedRenderResponseError(
                "Render finished without an output URL", job_id=job_id
            )
        return status
