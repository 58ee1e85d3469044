"""Orchestrator for rendering an asset list.

Execution model:

1. **Load** — config YAML (+ env overrides, + ``KEY=VALUE`` overrides)
   and the asset file.
2. **Render** — every asset, in list order, through the dispatcher.
3. **Report** — per-asset outcome on the console and, unless disabled,
   as JSON under ``~/.config/ship-assets/``.

Input problems (unreadable config or asset file) abort before anything
is written.  A failing asset does not stop the others but makes the run
exit non-zero.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from ship_assets import ui
from ship_assets.api.codec import AssetDecodeError, read_assets_file
from ship_assets.api.models import AssetKind, EKSAsset
from ship_assets.config.loader import (
    load_config,
    merge_template_values,
    parse_overrides,
)
from ship_assets.render.dispatcher import default_dispatcher
from ship_assets.render.eks import render_terraform_contents
from ship_assets.render.templating import render_template
from ship_assets.state.models import RenderReport, RenderStatus
from ship_assets.state.store import write_render_report

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_RENDER_FAILURE = 1
EXIT_INPUT_FAILURE = 2


def exit_code_for(report: RenderReport) -> int:
    """Map a render report to the appropriate exit code."""
    if not report.passed:
        return EXIT_RENDER_FAILURE
    return EXIT_SUCCESS


def _print_report(report: RenderReport) -> None:
    for result in report.results:
        name = result.description or result.dest or f"asset #{result.index}"
        if result.status == RenderStatus.RENDERED:
            ui.ok(f"{name} → {result.dest}")
        elif result.status == RenderStatus.SKIPPED:
            ui.skipped(f"{name} (when is false)")
        else:
            ui.fail(result.error)


def run_render_workflow(
    assets_path: str,
    *,
    config_path: Optional[str] = None,
    install_root: Optional[str] = None,
    overrides: Optional[Iterable[str]] = None,
) -> int:
    """Render every asset in *assets_path*.

    Returns one of the ``EXIT_*`` constants.
    """
    # -- 1. Load ----------------------------------------------------------------
    ui.phase("LOAD")
    try:
        cfg = load_config(config_path).ship_assets
        values = merge_template_values(cfg, parse_overrides(overrides or []))
        assets = read_assets_file(assets_path)
    except (OSError, ValueError) as exc:
        # AssetDecodeError and pydantic's ValidationError are ValueErrors
        logger.error("Could not load inputs: %s", exc)
        ui.error_msg(str(exc))
        return EXIT_INPUT_FAILURE

    root = Path(install_root or cfg.install_root).resolve()
    ui.detail("assets", str(assets_path))
    ui.detail("install root", str(root))
    ui.detail("asset count", str(len(assets.v1)))

    # -- 2. Render --------------------------------------------------------------
    ui.phase("RENDER")
    dispatcher = default_dispatcher(root, default_mode=cfg.default_mode)
    report = dispatcher.render_all(
        assets,
        values,
        assets_file=str(assets_path),
        install_root=str(root),
    )
    _print_report(report)

    # -- 3. Report --------------------------------------------------------------
    if cfg.write_report:
        try:
            path = write_render_report(report)
            ui.info(f"report written to {path}")
        except OSError as exc:
            logger.warning("Could not write render report: %s", exc)
            ui.error_msg(f"could not write render report: {exc}")

    counts = report.counts()
    summary = (
        f"rendered {counts[RenderStatus.RENDERED.value]}, "
        f"skipped {counts[RenderStatus.SKIPPED.value]}, "
        f"failed {counts[RenderStatus.FAILED.value]}"
    )
    if report.passed:
        ui.success_panel("Assets rendered", summary)
    else:
        ui.error_panel("Asset rendering failed", summary)
    return exit_code_for(report)


def eks_assets(assets_path: str) -> List[EKSAsset]:
    """All EKS asset records in *assets_path*, in list order."""
    assets = read_assets_file(assets_path)
    return [
        a.amazon_elastic_kubernetes_service
        for a in assets.v1
        if a.kind == AssetKind.EKS and a.amazon_elastic_kubernetes_service is not None
    ]


def load_template_values(
    config_path: Optional[str] = None,
    overrides: Optional[Iterable[str]] = None,
) -> Dict[str, str]:
    """Config ``template_values`` with ``KEY=VALUE`` *overrides* on top."""
    cfg = load_config(config_path).ship_assets
    return merge_template_values(cfg, parse_overrides(overrides or []))


def render_eks_document(
    assets_path: str,
    index: Optional[int] = None,
    *,
    template_values: Optional[Mapping[str, str]] = None,
) -> str:
    """Terraform for the EKS assets in *assets_path*, without writing it.

    *index* selects one EKS asset (counting EKS assets only); otherwise
    every EKS document is returned, concatenated.  Each document is
    evaluated against *template_values* exactly as the inline renderer
    does on write, so the text matches what ``render`` puts on disk.

    Raises :class:`AssetDecodeError` when the file holds no EKS asset and
    :class:`IndexError` when *index* is out of range.
    """
    values = template_values or {}
    clusters = eks_assets(assets_path)
    if not clusters:
        raise AssetDecodeError(f"{assets_path}: no amazon_elastic_kubernetes_service assets")
    if index is not None:
        if not 0 <= index < len(clusters):
            raise IndexError(
                f"EKS asset index {index} out of range (found {len(clusters)})"
            )
        clusters = [clusters[index]]
    return "".join(
        render_template(render_terraform_contents(c.cluster_spec()), values)
        for c in clusters
    )
