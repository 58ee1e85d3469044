"""Render config loading, environment overrides, and write-back.

- :func:`load_config` — parse a ship-assets config YAML into a :class:`ConfigFile`
- :func:`apply_env_overrides` — ``SHIP_ASSETS_*`` environment variables win over the file
- :func:`parse_overrides` — ``KEY=VALUE`` pairs from the command line
- :func:`merge_template_values` — layer overrides onto ``template_values``
- :func:`write_config` — serialize back to YAML
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml

from ship_assets.config.models import ConfigFile, RenderConfig

ENV_INSTALL_ROOT = "SHIP_ASSETS_INSTALL_ROOT"
ENV_DISABLE_REPORT = "SHIP_ASSETS_DISABLE_REPORT"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_config(path: str | Path | None) -> ConfigFile:
    """Load a ship-assets config YAML file.

    A missing file (or ``None``) yields the defaults.  Environment
    overrides are applied on top.
    """
    raw: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path, encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    cfg = ConfigFile.model_validate(raw)
    apply_env_overrides(cfg.ship_assets)
    return cfg


def apply_env_overrides(cfg: RenderConfig) -> RenderConfig:
    """Apply ``SHIP_ASSETS_INSTALL_ROOT`` and ``SHIP_ASSETS_DISABLE_REPORT``."""
    install_root = os.environ.get(ENV_INSTALL_ROOT, "")
    if install_root:
        cfg.install_root = install_root
    if os.environ.get(ENV_DISABLE_REPORT, "") == "1":
        cfg.write_report = False
    return cfg


# ---------------------------------------------------------------------------
# Template value overrides
# ---------------------------------------------------------------------------

def parse_overrides(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` strings.

    The value may itself contain ``=``; an empty key or a pair without
    ``=`` raises :class:`ValueError`.
    """
    out: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        out[key] = value
    return out


def merge_template_values(
    cfg: RenderConfig, overrides: Mapping[str, str]
) -> Dict[str, str]:
    """Return ``template_values`` with *overrides* taking precedence."""
    merged = dict(cfg.template_values)
    merged.update(overrides)
    return merged


# ---------------------------------------------------------------------------
# Write-back
# ---------------------------------------------------------------------------

def write_config(cfg: ConfigFile, path: str | Path) -> None:
    """Serialize *cfg* back to YAML at *path* (mode as an octal string)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    section = cfg.ship_assets
    data: Dict[str, Any] = {
        "ship_assets": {
            "install_root": section.install_root,
            "default_mode": format(section.default_mode, "04o"),
            "write_report": section.write_report,
        }
    }
    if section.template_values:
        data["ship_assets"]["template_values"] = dict(section.template_values)

    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, sort_keys=False)
