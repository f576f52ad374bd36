"""Error codes dictionary.

Single source of truth for all error codes, their retryability and the
human-readable fix shown next to the alert. Used by ``VibecutError`` to build
``ErrorInfo`` payloads for the UI layer.
"""

from typing import TypedDict


class ErrorCodeSpec(TypedDict, total=False):
    """Specification for an error code."""

    retryable: bool
    suggested_action: str
    suggested_fix: str


ERROR_CODES: dict[str, ErrorCodeSpec] = {
    # ==========================================================================
    # Input / media errors (fix the upload)
    # ==========================================================================
    "INVALID_SOURCE_CLIP": {
        "retryable": False,
        "suggested_fix": "Upload the clip again; its duration could not be read.",
    },
    "MEDIA_PROBE_FAILED": {
        "retryable": False,
        "suggested_action": "reupload",
        "suggested_fix": "The video metadata is unreadable. Try exporting it again from your camera app.",
    },
    # ==========================================================================
    # Render boundary errors (timeline is untouched, export can be retried)
    # ==========================================================================
    "RENDER_SUBMIT_FAILED": {
        "retryable": True,
        "suggested_action": "retry_export",
        "suggested_fix": "Export failed, try again.",
    },
    "RENDER_FAILED": {
        "retryable": True,
        "suggested_action": "retry_export",
        "suggested_fix": "Export failed, try again.",
    },
    "RENDER_TIMEOUT": {
        "retryable": True,
        "suggested_action": "retry_export",
        "suggested_fix": "The render is taking too long. Try again in a few minutes.",
    },
    "RENDER_MALFORMED_RESPONSE": {
        "retryable": True,
        "suggested_action": "retry_export",
    },
    "RENDER_CANCELLED": {
        "retryable": True,
    },
    # ==========================================================================
    # Persistence errors
    # ==========================================================================
    "PROJECT_NOT_FOUND": {
        "retryable": False,
        "suggested_fix": "The project no longer exists. Start a new edit from your clips.",
    },
    "PERSISTENCE_ERROR": {
        "retryable": True,
    },
    # ==========================================================================
    # Playback (logged only, never shown to the user)
    # ==========================================================================
    "PLAYBACK_REJECTED": {
        "retryable": True,
    },
    "INTERNAL_ERROR": {
        "retryable": False,
    },
}


def get_error_spec(code: str) -> ErrorCodeSpec:
    """Get error specification by code.

    Args:
        code: The error code

    Returns:
        ErrorCodeSpec with retryable flag and suggested fix
    """
    return ERROR_CODES.get(code, {"retryable": False})


def is_retryable(code: str) -> bool:
    """Check if an error code is retryable."""
    return get_error_spec(code).get("retryable", False)
