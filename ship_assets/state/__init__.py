"""Render reports and their on-disk store."""

from ship_assets.state.models import AssetResult, RenderReport, RenderStatus
from ship_assets.state.store import (
    config_dir,
    load_render_report,
    write_render_report,
)

__all__ = [
    "AssetResult",
    "RenderReport",
    "RenderStatus",
    "config_dir",
    "load_render_report",
    "write_render_report",
]
