"""Render configuration loading and template value overrides."""

from ship_assets.config.loader import (
    ENV_DISABLE_REPORT,
    ENV_INSTALL_ROOT,
    apply_env_overrides,
    load_config,
    merge_template_values,
    parse_overrides,
    write_config,
)
from ship_assets.config.models import ConfigFile, RenderConfig

__all__ = [
    "ConfigFile",
    "ENV_DISABLE_REPORT",
    "ENV_INSTALL_ROOT",
    "RenderConfig",
    "apply_env_overrides",
    "load_config",
    "merge_template_values",
    "parse_overrides",
    "write_config",
]
