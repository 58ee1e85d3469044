"""Pydantic models for ship-assets render configuration.

Structure::

    ship_assets:
      install_root: installer
      default_mode: "0644"
      write_report: true
      template_values:
        <KEY>: <value>
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator, model_validator

from ship_assets.api.models import parse_mode
from ship_assets.render.files import DEFAULT_MODE
from ship_assets.render.templating import context_from_values


class RenderConfig(BaseModel):
    """Settings for one render run."""

    install_root: str = Field(default="installer")
    default_mode: int = Field(default=DEFAULT_MODE, ge=1, le=0o7777)
    write_report: bool = Field(default=True)
    template_values: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """``key: null`` in YAML means "use the default"."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("default_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        return parse_mode(value)

    @field_validator("template_values", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return context_from_values(value)
        return value


class ConfigFile(BaseModel):
    """Root model wrapping the ``ship_assets:`` key."""

    ship_assets: RenderConfig = Field(default_factory=RenderConfig)

    @model_validator(mode="before")
    @classmethod
    def _null_section(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("ship_assets") is None:
            return {**data, "ship_assets": {}}
        return data
