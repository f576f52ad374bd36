"""Export round-trip: assemble, submit, then poll at a fixed interval.

The poll loop runs as an ``asyncio.Task`` owned by the exporter so the owner
(the editing session) can abandon it on teardown. The task reference is
dropped as soon as the loop finishes, whatever the outcome.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from vibecut.config import Settings, get_settings
from vibecut.exceptions import RenderFailedError, RenderTimeoutError
from vibecut.render.request_assembler import RenderRequestAssembler
from vibecut.schemas.render import RenderResult
from vibecut.schemas.timeline import CutWindow
from vibecut.services.render_client import RenderClient

logger = logging.getLogger(__name__)


class RenderExporter:
    """Drives one render job at a time through the render service."""

    def __init__(
        self,
        client: RenderClient,
        *,
        assembler: RenderRequestAssembler | None = None,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.assembler = assembler or RenderRequestAssembler(self.settings)
        self._sleep = sleep
        self._task: asyncio.Task[RenderResult] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def export(self, windows: list[CutWindow]) -> RenderResult:
        """Render a timeline and wait for the result.

        Raises:
            RenderError subclasses on any render-boundary failure
        """
        request = self.assembler.assemble(windows)
        job_id = await self.client.submit(request.to_dict())
        logger.info(f"Export started: job {job_id}, {len(windows)} windows, {request.duration:.1f}s")
        return await self.poll(job_id)

    async def poll(self, job_id: str) -> RenderResult:
        """Check the job every ``render_poll_interval_s`` until done or failed."""
        interval = self.settings.render_poll_interval_s
        max_errors = self.settings.render_max_poll_errors
        consecutive_errors = 0

        for attempt in range(1, self.settings.render_max_polls + 1):
            await self._sleep(interval)
            try:
                status = await self.client.get_status(job_id)
            except httpx.TransportError as e:
                consecutive_errors += 1
                logger.warning(
                    f"Render status check {attempt} for {job_id} failed "
                    f"({consecutive_errors}/{max_errors}): {e}"
                )
                if consecutive_errors >= max_errors:
                    raise RenderFailedError(
                        "Lost contact with the render service", job_id=job_id
                    )
                continue

            consecutive_errors = 0
            logger.debug(f"Render job {job_id}: {status.status} (poll {attempt})")
            if status.status == "done":
                logger.info(f"Render job {job_id} done: {status.url}")
                return RenderResult(job_id=job_id, url=status.url, polls=attempt)
            if status.status == "failed":
                raise RenderFailedError(status.error or "Render failed", job_id=job_id)

        raise RenderTimeoutError(
            f"Render job {job_id} still running after {self.settings.render_max_polls} checks",
            job_id=job_id,
        )

    def start(self, windows: list[CutWindow]) -> asyncio.Task[RenderResult]:
        """Run ``export`` in the background. Only one export may run at a time."""
        if self.is_running:
            raise RuntimeError("An export is already running")
        task = asyncio.get_running_loop().create_task(self.export(windows))
        task.add_done_callback(self._on_done)
        self._task = task
        return task

    def cancel(self) -> bool:
        """Abandon a running export. Returns True if one was cancelled."""
        if not self.is_running:
            return False
        logger.info("Cancelling running export")
        self._task.cancel()
        return True

    async def close(self) -> None:
        """Teardown: cancel any poll loop and wait for it to unwind."""
        task = self._task
        if task is None:
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            # Outcome already delivered to whoever awaited the task
            logger.debug("Export task ended with an error during close", exc_info=True)
        self._task = None

    def _on_done(self, task: asyncio.Task) -> None:
        if self._task is task:
            self._task = None
