"""
Typed settings for every creative kind.

Each kind owns one settings model. Models are discriminated by ``kind`` so an
API payload can carry any of them in a single field. Free-text fields are
plain strings here and are escaped at render time; colors are validated
because they end up inside CSS.
"""

from __future__ import annotations

import re
from typing import Annotated, ClassVar, Literal, NamedTuple, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

_COLOR_RE = re.compile(
    r"^(#[0-9a-fA-F]{3,8}|rgba?\(\s*[0-9.%\s,/]+\)|[a-zA-Z]{3,20})$"
)


def _check_color(value: str) -> str:
    if not _COLOR_RE.match(value):
        raise ValueError(f"not a CSS color: {value!r}")
    return value


Color = Annotated[str, AfterValidator(_check_color)]

_URL_SCHEMES = ("http://", "https://", "//")


def _check_url(value: str) -> str:
    """Links end up in href and src attributes; only web URLs get through."""
    value = value.strip()
    if value and not value.lower().startswith(_URL_SCHEMES):
        raise ValueError(f"not an http(s) URL: {value[:64]!r}")
    return value


WebUrl = Annotated[str, AfterValidator(_check_url)]


class AssetSlot(NamedTuple):
    """An asset a kind can reference."""

    role: str
    required: bool = True
    media: Literal["image", "audio", "video"] = "image"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class CreativeSettings(BaseModel):
    """Fields shared by every creative kind."""

    model_config = ConfigDict(extra="forbid")

    kind: str
    campaign: str = Field("", max_length=200, description="Campaign name, used for file naming")
    placement: str = Field("", max_length=200, description="Placement name, used for file naming")
    width: int = Field(300, ge=1, le=4096, description="Declared width in px")
    height: int = Field(250, ge=1, le=4096, description="Declared height in px")
    target_url: WebUrl = Field("", max_length=2048, description="Click-through landing URL")
    target_element_id: str | None = Field(
        None,
        max_length=200,
        description="Element id on the publisher page where the universal tag mounts this creative",
    )

    asset_slots: ClassVar[tuple[AssetSlot, ...]] = ()

    def slots(self) -> tuple[AssetSlot, ...]:
        """Asset slots for this instance."""
        return self.asset_slots

    def embed_size(self) -> tuple[int, int]:
        """Size of the container the loader snippet builds."""
        return self.width, self.height


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class ExpandableBannerSettings(CreativeSettings):
    """Push-down banner. ``height`` is the expanded height."""

    kind: Literal["expandable-banner"] = "expandable-banner"
    width: int = Field(970, ge=1, le=4096)
    height: int = Field(250, ge=1, le=4096)
    collapsed_height: int = Field(90, ge=1, le=4096)
    init_expanded: bool = False
    auto_close_seconds: int = Field(8, ge=0, le=600, description="0 disables auto-close")
    transition_ms: int = Field(250, ge=0, le=10000)
    expand_action: Literal["click", "mouseover"] = "click"
    click_layer: bool = Field(True, description="Make the banner artwork a click-through zone")
    background_color: Color = "#000000"

    asset_slots = (AssetSlot("collapsed"), AssetSlot("expanded"))

    @model_validator(mode="after")
    def _collapsed_fits(self) -> "ExpandableBannerSettings":
        if self.collapsed_height > self.height:
            raise ValueError("collapsed_height must not exceed height")
        return self


class PuzzleSettings(CreativeSettings):
    """Sliding-tile puzzle that reveals a win panel."""

    kind: Literal["puzzle"] = "puzzle"
    brand_label: str = "Sponsored"
    brand_name: str = ""
    headline: str = "Solve the puzzle!"
    cta_text: str = "Learn more"
    win_title: str = "Well done!"
    win_text: str = ""
    win_cta_text: str = "Discover"
    win_target_url: WebUrl | None = Field(None, max_length=2048)
    accent_color: Color = "#ff4f7b"
    grid_size: int = Field(3, ge=2, le=4)

    asset_slots = (AssetSlot("background"), AssetSlot("logo", required=False))


class ColorRevealSettings(CreativeSettings):
    """Tap the image while it shows in color."""

    kind: Literal["color-reveal"] = "color-reveal"
    background_color: Color = "#ffffff"
    brand_label: str = "Sponsored"
    brand_name: str = ""
    headline: str = "Tap when it turns to color!"
    cta_text: str = "Shop now"
    hits_to_win: int = Field(3, ge=1, le=20)
    flip_interval_ms: int = Field(700, ge=100, le=10000)

    asset_slots = (
        AssetSlot("bw_image"),
        AssetSlot("color_image"),
        AssetSlot("logo", required=False),
    )


class PodcastSnippetSettings(CreativeSettings):
    """Audio teaser with play control."""

    kind: Literal["podcast-snippet"] = "podcast-snippet"
    brand_text: str = ""
    title_text: str = ""
    cta_text: str = "Listen now"
    accent_color: Color = "#1db954"

    asset_slots = (
        AssetSlot("background"),
        AssetSlot("audio", media="audio"),
        AssetSlot("logo", required=False),
    )


class NativeSettings(CreativeSettings):
    """In-feed card: image, headline, body, call to action."""

    kind: Literal["native"] = "native"
    headline: str = ""
    body: str = ""
    cta_text: str = "Learn more"
    sponsor_label: str = "Sponsored"

    asset_slots = (AssetSlot("image", required=False),)


class ScratchRevealSettings(CreativeSettings):
    """Scratch a cover image away to reveal the artwork beneath."""

    kind: Literal["scratch-reveal"] = "scratch-reveal"
    scratch_percent: int = Field(50, ge=1, le=100, description="Cleared share that completes the reveal")
    brush_radius: int = Field(22, ge=4, le=120)
    hint_text: str = "Scratch to reveal!"
    cta_text: str = "Shop now"

    asset_slots = (AssetSlot("cover"), AssetSlot("back"))


class ParallaxSettings(CreativeSettings):
    """Layered artwork shifted by the host page's scroll position."""

    kind: Literal["parallax"] = "parallax"
    width: int = Field(970, ge=1, le=4096)
    height: int = Field(250, ge=1, le=4096)
    headline: str = ""
    cta_text: str = "Learn more"
    parallax_speed: float = Field(0.5, ge=0.0, le=2.0)

    asset_slots = (AssetSlot("background"), AssetSlot("content", required=False))


class InterstitialSettings(CreativeSettings):
    """Full-screen overlay with countdown auto-close."""

    kind: Literal["interstitial"] = "interstitial"
    width: int = Field(320, ge=1, le=4096)
    height: int = Field(480, ge=1, le=4096)
    headline: str = ""
    body: str = ""
    cta_text: str = "Learn more"
    background_color: Color = "#000000"
    auto_close_seconds: int = Field(10, ge=0, le=600, description="0 disables the countdown")
    show_timer: bool = True
    timer_label: str = "Closes in"

    asset_slots = (AssetSlot("background"), AssetSlot("logo", required=False))


class SkinSettings(CreativeSettings):
    """Page takeover: artwork framing the publisher's content column."""

    kind: Literal["skin"] = "skin"
    width: int = Field(1920, ge=1, le=4096)
    height: int = Field(1080, ge=1, le=4096)
    content_width: int = Field(1000, ge=0, le=4096, description="Width of the uncovered center column")

    asset_slots = (AssetSlot("background"),)


class SideRailSettings(CreativeSettings):
    """Vertical rail on one or both page edges."""

    kind: Literal["side-rail"] = "side-rail"
    width: int = Field(160, ge=1, le=4096)
    height: int = Field(600, ge=1, le=4096)
    side: Literal["left", "right", "both"] = "right"

    asset_slots = (AssetSlot("rail"),)

    def embed_size(self) -> tuple[int, int]:
        if self.side == "both":
            return self.width * 2, self.height
        return self.width, self.height


class ScrollRevealSettings(CreativeSettings):
    """Interscroller: fixed artwork revealed as the page scrolls past."""

    kind: Literal["scroll-reveal"] = "scroll-reveal"
    width: int = Field(320, ge=1, le=4096)
    height: int = Field(480, ge=1, le=4096)
    hint_text: str = "Scroll to continue"

    asset_slots = (AssetSlot("background"),)


class NativeVideoSettings(CreativeSettings):
    """In-feed card with a muted autoplay video."""

    kind: Literal["native-video"] = "native-video"
    headline: str = ""
    body: str = ""
    cta_text: str = "Learn more"
    autoplay: bool = True

    asset_slots = (AssetSlot("video", media="video"), AssetSlot("poster", required=False))


class GatedMiniGameSettings(CreativeSettings):
    """Three-pair memory game that unlocks the page content."""

    kind: Literal["gated-mini-game"] = "gated-mini-game"
    width: int = Field(300, ge=1, le=4096)
    height: int = Field(400, ge=1, le=4096)
    instruction: str = "Match the pairs to unlock the article"
    success_text: str = "Unlocked! Enjoy the article."
    cta_text: str = "Visit sponsor"
    brand_name: str = ""
    overlay: bool = Field(False, description="Cover the viewport instead of blurring the content below")

    asset_slots = (
        AssetSlot("icon_1"),
        AssetSlot("icon_2"),
        AssetSlot("icon_3"),
        AssetSlot("logo", required=False),
    )


class GalleryVideo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = ""


class VideoGallerySettings(CreativeSettings):
    """Vertical swipe feed of up to three videos."""

    kind: Literal["video-gallery"] = "video-gallery"
    width: int = Field(300, ge=1, le=4096)
    height: int = Field(600, ge=1, le=4096)
    videos: list[GalleryVideo] = Field(
        default_factory=lambda: [GalleryVideo()],
        min_length=1,
        max_length=3,
    )
    cta_text: str = "Learn more"

    def slots(self) -> tuple[AssetSlot, ...]:
        return tuple(
            AssetSlot(f"video_{index}", media="video")
            for index in range(1, len(self.videos) + 1)
        )


class DialogueLine(BaseModel):
    model_config = ConfigDict(extra="forbid")

    speaker: Literal["A", "B"] = "A"
    text: str = Field(..., min_length=1, max_length=500)


class TextDialogueSettings(CreativeSettings):
    """Two-speaker chat played line by line."""

    kind: Literal["text-dialogue"] = "text-dialogue"
    speaker_a: str = "A"
    speaker_b: str = "B"
    lines: list[DialogueLine] = Field(..., min_length=1, max_length=40)
    line_interval_ms: int = Field(1800, ge=200, le=20000)
    cta_text: str = "Learn more"
    accent_color: Color = "#4f6bff"

    asset_slots = (
        AssetSlot("audio", required=False, media="audio"),
        AssetSlot("logo", required=False),
    )


AnyCreativeSettings = Annotated[
    Union[
        ExpandableBannerSettings,
        PuzzleSettings,
        ColorRevealSettings,
        PodcastSnippetSettings,
        NativeSettings,
        ScratchRevealSettings,
        ParallaxSettings,
        InterstitialSettings,
        SkinSettings,
        SideRailSettings,
        ScrollRevealSettings,
        NativeVideoSettings,
        GatedMiniGameSettings,
        VideoGallerySettings,
        TextDialogueSettings,
    ],
    Field(discriminator="kind"),
]
