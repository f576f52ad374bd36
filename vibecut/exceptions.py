"""Custom exceptions for vibecut.

Only boundary failures (upload probing, render service, persistence) are
raised as exceptions. Invariant-guard rejections inside the editor are
reachable UI states and are handled locally without raising.
"""

from vibecut.constants.error_codes import get_error_spec
from vibecut.schemas.envelope import ErrorInfo, ErrorLocation


class VibecutError(Exception):
    """Base exception for all vibecut errors.

    Provides structured error information for the user-facing alert.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        location: ErrorLocation | None = None,
    ):
        self.message = message or self.__class__.message
        if code:
            self.code = code
        self.location = location
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return get_error_spec(self.code).get("retryable", False)

    def to_error_info(self) -> ErrorInfo:
        """Convert exception to ErrorInfo for the alert layer."""
        spec = get_error_spec(self.code)
        return ErrorInfo(
            code=self.code,
            message=self.message,
            location=self.location,
            retryable=spec.get("retryable", False),
            suggested_action=spec.get("suggested_action"),
            suggested_fix=spec.get("suggested_fix"),
        )


# =============================================================================
# Input / Media Errors
# =============================================================================


class InvalidSourceClipError(VibecutError):
    """Source clip metadata violates the upload contract."""

    code = "INVALID_SOURCE_CLIP"
    message = "Invalid source clip"

    def __init__(self, message: str | None = None, *, field: str | None = None):
        location = ErrorLocation(field=field) if field else None
        super().__init__(message, location=location)


class MediaProbeError(VibecutError):
    """Duration / dimension probe failed for an uploaded file."""

    code = "MEDIA_PROBE_FAILED"
    message = "Could not read video metadata"

    def __init__(self, url: str | None = None, reason: str | None = None):
        message = self.message
        if url and reason:
            message = f"Could not read video metadata for {url}: {reason}"
        elif url:
            message = f"Could not read video metadata for {url}"
        super().__init__(message)


# =============================================================================
# Render Boundary Errors
# =============================================================================


class RenderError(VibecutError):
    """Base class for render service failures."""

    code = "RENDER_FAILED"
    message = "Render failed"

    def __init__(self, message: str | None = None, *, job_id: str | None = None):
        self.job_id = job_id
        location = ErrorLocation(job_id=job_id) if job_id else None
        super().__init__(message, location=location)


class RenderSubmitError(RenderError):
    """The render service refused or could not receive the job."""

    code = "RENDER_SUBMIT_FAILED"
    message = "Render request was rejected"


class RenderFailedError(RenderError):
    """The render service reported the job as failed."""

    code = "RENDER_FAILED"
    message = "Render failed"


class RenderTimeoutError(RenderError):
    """The job did not reach a terminal status within the poll budget."""

    code = "RENDER_TIMEOUT"
    message = "Render did not finish in time"


class MalformedRenderResponseError(RenderError):
    """The render service answered with a payload missing required fields."""

    code = "RENDER_MALFORMED_RESPONSE"
    message = "Render service returned an unexpected response"


class RenderCancelledError(RenderError):
    """The export was abandoned before completion."""

    code = "RENDER_CANCELLED"
    message = "Render was cancelled"


# =============================================================================
# Persistence Errors
# =============================================================================


class ProjectNotFoundError(VibecutError):
    """Project not found."""

    code = "PROJECT_NOT_FOUND"
    message = "Project not found"

    def __init__(self, project_id: str | None = None):
        message = f"Project not found: {project_id}" if project_id else self.message
        super().__init__(message)


class PersistenceError(VibecutError):
    """Project store failure."""

    code = "PERSISTENCE_ERROR"
    message = "Could not save the project"


# =============================================================================
# Playback
# =============================================================================


class PlaybackRejectedError(VibecutError):
    """A media buffer refused to start playing (autoplay policy, not ready)."""

    code = "PLAYBACK_REJECTED"
    message = "Playback was rejected"
