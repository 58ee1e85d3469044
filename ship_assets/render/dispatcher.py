"""Per-kind asset dispatch.

Each entry of the asset list is routed to the renderer registered for
its kind.  A renderer is any object with
``execute(spec, template_context)``.  Failures are captured per asset
so one bad asset does not stop the rest of the list; nothing is retried.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Union

import requests

from ship_assets.api.models import Asset, AssetKind, Assets, AssetSpec
from ship_assets.render.eks import EKSRenderer
from ship_assets.render.files import DEFAULT_MODE, AssetRenderError
from ship_assets.render.inline import InlineRenderer
from ship_assets.render.templating import TemplateError, evaluate_when
from ship_assets.render.terraform import TerraformRenderer
from ship_assets.render.web import GitHubRenderer, WebRenderer
from ship_assets.state.models import AssetResult, RenderReport, RenderStatus

logger = logging.getLogger(__name__)

_RENDER_FAILURES = (
    AssetRenderError,
    TemplateError,
    OSError,
    requests.RequestException,
)


class Renderer(Protocol):
    def execute(self, asset: Any, template_context: Mapping[str, str]) -> Any:
        ...


def _label(index: int, kind: AssetKind, spec: AssetSpec) -> str:
    """Human-readable asset name for log and error messages."""
    name = spec.description or spec.dest or "<no dest>"
    return f"asset #{index} ({kind.value}: {name})"


class AssetDispatcher:
    """Route assets to renderers by kind."""

    def __init__(self, renderers: Optional[Dict[AssetKind, Renderer]] = None) -> None:
        self.renderers: Dict[AssetKind, Renderer] = dict(renderers or {})

    def register(self, kind: AssetKind, renderer: Renderer) -> None:
        """Add or replace the renderer for *kind*."""
        self.renderers[kind] = renderer

    def execute(
        self,
        asset: Asset,
        template_context: Mapping[str, str],
        *,
        index: int = 0,
    ) -> AssetResult:
        """Render one asset and describe the outcome."""
        kind = asset.kind
        spec = asset.spec
        if kind is None or spec is None:
            logger.error("Asset #%d has no kind set", index)
            return AssetResult(
                index=index,
                status=RenderStatus.FAILED,
                error=f"asset #{index}: no asset kind set",
            )

        result = AssetResult(
            index=index,
            kind=kind.value,
            dest=spec.dest,
            description=spec.description,
            status=RenderStatus.RENDERED,
        )
        label = _label(index, kind, spec)

        try:
            if not evaluate_when(spec.when, template_context):
                logger.info("Skipping %s: 'when' is false", label)
                result.status = RenderStatus.SKIPPED
                return result

            renderer = self.renderers.get(kind)
            if renderer is None:
                raise AssetRenderError(
                    f"no renderer registered for asset kind {kind.value!r}"
                )
            logger.debug("Rendering %s", label)
            renderer.execute(spec, template_context)
        except _RENDER_FAILURES as exc:
            logger.error("Failed to render %s: %s", label, exc)
            result.status = RenderStatus.FAILED
            result.error = f"{label}: {exc}"
        return result

    def render_all(
        self,
        assets: Assets,
        template_context: Mapping[str, str],
        *,
        assets_file: str = "",
        install_root: str = "",
    ) -> RenderReport:
        """Render every asset in list order, continuing after failures."""
        report = RenderReport(assets_file=assets_file, install_root=install_root)
        for index, asset in enumerate(assets.v1):
            report.results.append(
                self.execute(asset, template_context, index=index)
            )
        counts = report.counts()
        logger.info(
            "Rendered %d asset(s): %d rendered, %d skipped, %d failed",
            len(report.results),
            counts[RenderStatus.RENDERED.value],
            counts[RenderStatus.SKIPPED.value],
            counts[RenderStatus.FAILED.value],
        )
        return report


def default_dispatcher(
    install_root: Union[str, Path],
    *,
    session: Optional[requests.Session] = None,
    default_mode: int = DEFAULT_MODE,
    github_token: Optional[str] = None,
) -> AssetDispatcher:
    """Dispatcher wired with every built-in renderer.

    Docker, docker-layer and Helm assets have no built-in renderer and
    report as failed unless one is registered.
    """
    inline = InlineRenderer(install_root, default_mode=default_mode)
    github = GitHubRenderer(
        install_root,
        session=session,
        token=github_token,
        default_mode=default_mode,
    )
    return AssetDispatcher(
        {
            AssetKind.INLINE: inline,
            AssetKind.EKS: EKSRenderer(inline),
            AssetKind.TERRAFORM: TerraformRenderer(inline, github),
            AssetKind.WEB: WebRenderer(
                install_root, session=session, default_mode=default_mode
            ),
            AssetKind.GITHUB: github,
        }
    )
