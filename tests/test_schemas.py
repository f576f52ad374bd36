"""Tests for schemas, the style catalog, probe parsing and error payloads."""

import pytest
from pydantic import ValidationError

from conftest import make_window
from vibecut.constants.error_codes import ERROR_CODES, get_error_spec, is_retryable
from vibecut.constants.style_profiles import (
    STYLE_PROFILES,
    get_style_profile,
    list_style_profiles,
)
from vibecut.exceptions import (
    InvalidSourceClipError,
    MediaProbeError,
    RenderTimeoutError,
    VibecutError,
)
from vibecut.schemas.style import StyleProfile
from vibecut.schemas.timeline import CutWindow, SourceClip, timeline_duration
from vibecut.utils.media_info import source_clip_from_probe, source_clip_from_upload


class TestCutWindow:
    """Tests for window validation and serialization."""

    @pytest.mark.parametrize(
        "start, duration",
        [(-0.5, 2.0), (0.0, 0.4), (8.5, 2.0)],
    )
    def test_invariants_enforced(self, start, duration):
        """Test that windows outside their source are rejected."""
        with pytest.raises(ValidationError):
            make_window(total=10.0, start=start, duration=duration)

    def test_boundary_window_allowed(self):
        """Test that a window ending exactly at the source end is valid."""
        window = make_window(total=10.0, start=9.5, duration=0.5)
        assert window.trim_end == 10.0

    @pytest.mark.parametrize(
        "total, start, duration",
        [
            (float("inf"), 0.0, 2.0),
            (10.0, float("nan"), 2.0),
            (10.0, 0.0, float("nan")),
        ],
    )
    def test_non_finite_rejected(self, total, start, duration):
        """Test that nan and inf never make it into a window."""
        with pytest.raises(ValidationError):
            make_window(total=total, start=start, duration=duration)

    def test_frozen(self):
        """Test that windows can't be edited in place."""
        window = make_window()
        with pytest.raises(ValidationError):
            window.trim_start = 1.0

    def test_with_trim_validates_pair(self):
        """Test that a new pair is checked as a whole."""
        window = make_window(total=10.0, start=2.0, duration=3.0)
        assert window.with_trim(7.0, 3.0).trim_end == 10.0
        with pytest.raises(ValidationError):
            window.with_trim(8.0, 3.0)

    def test_record_keys(self):
        """Test the stored document shape."""
        record = make_window(total=10.0, start=1.0, duration=2.0, width=1080, height=1920).to_record()
        assert record == {
            "url": "https://cdn.test/a.mp4",
            "duration": 10.0,
            "width": 1080,
            "height": 1920,
            "trimStart": 1.0,
            "trimDuration": 2.0,
            "muted": False,
        }

    def test_record_round_trip(self):
        """Test that a stored record reads back to the same window."""
        window = make_window(total=10.0, start=1.0, duration=2.0, muted=True, transition="fade")
        assert CutWindow.model_validate(window.to_record()) == window

    def test_legacy_long_clip(self):
        """Test that a legacy record of a long clip gets a centred 3s window."""
        window = CutWindow.model_validate({"url": "https://cdn.test/x.mp4", "duration": 20})
        assert window.trim_start == pytest.approx(8.5)
        assert window.trim_duration == pytest.approx(3.0)

    def test_legacy_short_clip(self):
        """Test that a legacy record of a short clip uses the whole clip."""
        window = CutWindow.model_validate({"url": "https://cdn.test/x.mp4", "duration": 5})
        assert window.trim_start == 0
        assert window.trim_duration == 5

    def test_timeline_duration(self):
        windows = [make_window(duration=2.0), make_window(duration=1.5)]
        assert timeline_duration(windows) == pytest.approx(3.5)

    def test_vertical_detection(self):
        assert make_window(width=720, height=1280).is_vertical
        assert not make_window(width=1280, height=720).is_vertical
        assert not make_window().is_vertical


class TestSourceClip:
    """Tests for source clip validation and probe parsing."""

    @pytest.mark.parametrize("duration", [0, -3, float("nan"), float("inf")])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValidationError):
            SourceClip(url="https://cdn.test/x.mp4", total_duration=duration)

    def test_from_probe(self):
        """Test reading duration and size from probe output."""
        probe = {
            "format": {"duration": "12.480000"},
            "streams": [
                {"codec_type": "audio", "duration": "12.5"},
                {"codec_type": "video", "width": 1080, "height": 1920},
            ],
        }
        clip = source_clip_from_probe("https://cdn.test/x.mp4", probe)

        assert clip.total_duration == pytest.approx(12.48)
        assert clip.width == 1080
        assert clip.height == 1920
        assert clip.is_vertical

    def test_from_probe_stream_duration_fallback(self):
        """Test that the stream duration is used when the container has none."""
        probe = {"format": {}, "streams": [{"codec_type": "video", "duration": "4.0"}]}
        assert source_clip_from_probe("u", probe).total_duration == 4.0

    @pytest.mark.parametrize(
        "probe",
        [
            {"format": {}, "streams": []},
            {"format": {"duration": "N/A"}},
            {"format": {"duration": "0"}},
            {"format": {"duration": "nan"}},
            {"format": {"duration": "inf"}},
            {"format": {}, "streams": [{"codec_type": "video", "duration": "-inf"}]},
        ],
    )
    def test_from_probe_without_duration(self, probe):
        """Test that a clip without a usable duration is rejected."""
        with pytest.raises(MediaProbeError):
            source_clip_from_probe("https://cdn.test/x.mp4", probe)

    def test_from_upload(self):
        clip = source_clip_from_upload("https://cdn.test/x.mp4", 7.5, 1920, 1080)
        assert clip.total_duration == 7.5
        assert not clip.is_vertical

    def test_from_upload_invalid(self):
        """Test that an upload with a bad duration raises InvalidSourceClipError."""
        with pytest.raises(InvalidSourceClipError) as exc_info:
            source_clip_from_upload("https://cdn.test/x.mp4", None)
        assert exc_info.value.location.field == "duration"

    def test_from_upload_names_bad_field(self):
        """Test that the error points at the field that failed, not always duration."""
        with pytest.raises(InvalidSourceClipError) as exc_info:
            source_clip_from_upload("https://cdn.test/x.mp4", 7.5, width="wide")
        assert exc_info.value.location.field == "width"

    def test_from_upload_non_finite(self):
        with pytest.raises(InvalidSourceClipError) as exc_info:
            source_clip_from_upload("https://cdn.test/x.mp4", float("inf"))
        assert exc_info.value.location.field == "duration"


class TestStyleCatalog:
    """Tests for the style presets."""

    def test_lookup(self):
        assert get_style_profile("corporate").category == "business"

    @pytest.mark.parametrize("style_id", ["unknown", "", None])
    def test_fallback_is_first_entry(self, style_id):
        assert get_style_profile(style_id) is STYLE_PROFILES[0]

    def test_filter_by_category(self):
        business = list_style_profiles("business")
        assert business
        assert all(p.category == "business" for p in business)
        assert len(list_style_profiles()) == len(STYLE_PROFILES)

    def test_catalog_ids_unique(self):
        ids = [p.id for p in STYLE_PROFILES]
        assert len(ids) == len(set(ids))

    def test_range_validated(self):
        """Test that a profile with max below min is rejected."""
        with pytest.raises(ValidationError):
            StyleProfile(id="x", label="X", category="personal", min_cut_duration=3, max_cut_duration=2)


class TestErrorInfo:
    """Tests for structured error payloads."""

    def test_render_error_info(self):
        """Test that render errors carry retry hints and the job id."""
        info = RenderTimeoutError(job_id="job-9").to_error_info()

        assert info.code == "RENDER_TIMEOUT"
        assert info.retryable is True
        assert info.suggested_action == "retry_export"
        assert info.location.job_id == "job-9"

    def test_unknown_code_defaults(self):
        """Test that an unknown code is treated as non-retryable."""
        error = VibecutError("boom", code="NOT_A_CODE")
        assert error.retryable is False
        assert get_error_spec("NOT_A_CODE") == ERROR_CODES["INTERNAL_ERROR"]

    def test_is_retryable(self):
        assert is_retryable("RENDER_FAILED")
        assert not is_retryable("PROJECT_NOT_FOUND")
