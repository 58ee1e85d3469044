"""Persistent storage for render reports.

Writes JSON to ``~/.config/ship-assets/`` (XDG_CONFIG_HOME / ship-assets).

File naming::

    render_<run_id>.json

All JSON is serialised with **sorted keys** for deterministic, diff-friendly output.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ship_assets.state.models import RenderReport

logger = logging.getLogger(__name__)

_APP_DIR = "ship-assets"


# ---------------------------------------------------------------------------
# Directory resolution
# ---------------------------------------------------------------------------


def config_dir() -> Path:
    """Return the XDG config directory for ship-assets.

    Uses ``XDG_CONFIG_HOME`` if set, otherwise ``~/.config``.
    Creates the directory if it does not exist.
    """
    base = os.environ.get("XDG_CONFIG_HOME", "")
    if not base:
        base = str(Path.home() / ".config")
    path = Path(base) / _APP_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------------
# Write / load helpers
# ---------------------------------------------------------------------------


def write_render_report(
    report: RenderReport,
    directory: Optional[Union[str, Path]] = None,
) -> Path:
    """Persist *report* as sorted-key JSON and return the written path.

    Path pattern: ``<directory or config_dir>/render_<run_id>.json``
    """
    out_dir = Path(directory) if directory is not None else config_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    dest = out_dir / f"render_{report.run_id}.json"

    dest.write_text(report.to_sorted_json() + "\n", encoding="utf-8")
    logger.info("Render report written to %s", dest)
    return dest


def load_render_report(path: Union[str, Path]) -> RenderReport:
    """Read a report previously written by :func:`write_render_report`."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Render report not found: {path}")
    return RenderReport.model_validate_json(path.read_text(encoding="utf-8"))
