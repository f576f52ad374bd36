"""Static catalog of style ("vibe") presets.

The first entry is the fallback for unknown ids.
"""

import logging

from vibecut.schemas.style import StyleCategory, StyleEffect, StyleProfile

logger = logging.getLogger(__name__)

STYLE_PROFILES: tuple[StyleProfile, ...] = (
    StyleProfile(
        id="fast",
        emoji="⚡",
        label="Hype",
        description="Fast cuts and high energy. Best for TikTok-style reels.",
        category="personal",
        min_cut_duration=0.6,
        max_cut_duration=1.2,
        transition="cut",
        effect=StyleEffect(kind="zoomIn", scale_in=1.0, scale_out=1.15),
    ),
    StyleProfile(
        id="travel",
        emoji="✈️",
        label="Journey",
        description="A mini vlog or day in my life. Great with voiceovers and storytelling.",
        category="personal",
        min_cut_duration=2.0,
        max_cut_duration=3.5,
        transition="fade",
        effect=StyleEffect(kind="slideLeft", pan_x=0.1),
    ),
    StyleProfile(
        id="food",
        emoji="🍳",
        label="Cooking",
        description="Process-focused, step-by-step flow. Perfect for recipes, DIY and tutorials.",
        category="personal",
        min_cut_duration=1.5,
        max_cut_duration=2.5,
        transition="wipe",
    ),
    StyleProfile(
        id="vibe",
        emoji="✨",
        label="Calm",
        description="Slow, aesthetic pacing for peaceful and scenic shots.",
        category="personal",
        min_cut_duration=3.0,
        max_cut_duration=5.0,
        transition="fade",
        effect=StyleEffect(kind="zoomOut", scale_in=1.1, scale_out=1.0),
    ),
    StyleProfile(
        id="corporate",
        emoji="💼",
        label="Professional",
        description="Steady cuts that keep the original framing. Good for team updates and interviews.",
        category="business",
        min_cut_duration=2.5,
        max_cut_duration=4.0,
        transition="fade",
    ),
    StyleProfile(
        id="product",
        emoji="📦",
        label="Showcase",
        description="Punchy product reveals with a gentle push-in.",
        category="business",
        min_cut_duration=1.5,
        max_cut_duration=3.0,
        transition="zoom",
        effect=StyleEffect(kind="zoomIn", scale_in=1.0, scale_out=1.08),
    ),
)

_PROFILES_BY_ID: dict[str, StyleProfile] = {p.id: p for p in STYLE_PROFILES}


def get_style_profile(style_id: str | None) -> StyleProfile:
    """Look up a profile by id, falling back to the first catalog entry."""
    profile = _PROFILES_BY_ID.get(style_id or "")
    if profile is None:
        logger.debug(f"Unknown style {style_id!r}, using {STYLE_PROFILES[0].id!r}")
        return STYLE_PROFILES[0]
    return profile


def list_style_profiles(category: StyleCategory | None = None) -> list[StyleProfile]:
    """List profiles in catalog order, optionally filtered by category."""
    if category is None:
        return list(STYLE_PROFILES)
    return [p for p in STYLE_PROFILES if p.category == category]
