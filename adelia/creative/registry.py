"""
Creative kind registry.

Maps each kind tag to its settings model and renderer. Renderers register
themselves with :func:`register_kind` when ``adelia.creative.kinds`` is
imported.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from adelia.common.exceptions import CreativeValidationError, UnknownCreativeKindError
from adelia.common.logger import get_logger
from adelia.creative.assets import AssetReference, AssetResolver, BuildPhase
from adelia.schemas.settings import CreativeSettings

logger = get_logger(__name__)

Renderer = Callable[[Any, AssetResolver], str]


@dataclass(frozen=True)
class CreativeType:
    """A registered creative kind."""

    kind: str
    settings_model: type[CreativeSettings]
    renderer: Renderer
    title: str
    description: str = ""


@dataclass(frozen=True)
class RenderedCreative:
    """One rendering of a creative, produced once per build phase."""

    kind: str
    phase: BuildPhase
    html: str
    references: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "references", MappingProxyType(dict(self.references)))


class CreativeRegistry:
    """Kind tag to :class:`CreativeType`."""

    def __init__(self) -> None:
        self._types: dict[str, CreativeType] = {}

    def register(
        self,
        settings_model: type[CreativeSettings],
        title: str,
        description: str = "",
    ) -> Callable[[Renderer], Renderer]:
        """Decorator registering a renderer for ``settings_model``'s kind."""
        kind = settings_model.model_fields["kind"].default

        def decorator(renderer: Renderer) -> Renderer:
            if kind in self._types:
                raise ValueError(f"Creative kind already registered: {kind}")
            self._types[kind] = CreativeType(
                kind=kind,
                settings_model=settings_model,
                renderer=renderer,
                title=title,
                description=description,
            )
            return renderer

        return decorator

    def get(self, kind: str) -> CreativeType:
        try:
            return self._types[kind]
        except KeyError:
            raise UnknownCreativeKindError(
                f"Unknown creative kind: {kind}",
                {"kind": kind, "available": self.kinds()},
            ) from None

    def kinds(self) -> list[str]:
        return sorted(self._types)

    def types(self) -> list[CreativeType]:
        return [self._types[kind] for kind in self.kinds()]

    def parse_settings(self, kind: str, data: Mapping[str, Any]) -> CreativeSettings:
        """Validate raw settings for ``kind``."""
        creative_type = self.get(kind)
        try:
            return creative_type.settings_model.model_validate({**data, "kind": kind})
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise CreativeValidationError(error["msg"], field=field) from e

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_assets(
        self,
        settings: CreativeSettings,
        assets: Mapping[str, AssetReference],
    ) -> None:
        """Reject a build whose target URL or required assets are missing."""
        self.get(settings.kind)
        self._check_target(settings)
        known = {slot.role for slot in settings.slots()}
        for slot in settings.slots():
            if slot.required and slot.role not in assets:
                raise CreativeValidationError(
                    f"Missing required asset '{slot.role}' for {settings.kind}",
                    field=f"assets.{slot.role}",
                )
        for role in assets:
            if role not in known:
                raise CreativeValidationError(
                    f"Asset '{role}' is not used by {settings.kind}",
                    field=f"assets.{role}",
                )

    def _check_target(self, settings: CreativeSettings) -> None:
        if not settings.target_url.strip():
            raise CreativeValidationError(
                f"A target URL is required for {settings.kind}",
                field="target_url",
            )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, settings: CreativeSettings, resolver: AssetResolver) -> RenderedCreative:
        """
        Render ``settings`` with assets taken from ``resolver``.

        Raises:
            UnknownCreativeKindError: No renderer for the kind.
            CreativeValidationError: Missing target URL or required asset.
        """
        creative_type = self.get(settings.kind)
        self._check_target(settings)

        references: dict[str, str] = {}
        for slot in settings.slots():
            ref = resolver.resolve(slot.role)
            if ref is None:
                if slot.required:
                    raise CreativeValidationError(
                        f"Missing required asset '{slot.role}' for {settings.kind}",
                        field=f"assets.{slot.role}",
                    )
                continue
            references[slot.role] = ref

        html = creative_type.renderer(settings, resolver)
        logger.debug(
            "Creative rendered",
            kind=settings.kind,
            phase=resolver.phase.value,
            size=len(html),
        )
        return RenderedCreative(
            kind=settings.kind,
            phase=resolver.phase,
            html=html,
            references=references,
        )


registry = CreativeRegistry()
register_kind = registry.register


def get_registry() -> CreativeRegistry:
    """Registry with every built-in kind loaded."""
    import adelia.creative.kinds  # noqa: F401

    return registry


def render(settings: CreativeSettings, resolver: AssetResolver) -> RenderedCreative:
    """Render with the default registry."""
    return get_registry().render(settings, resolver)
