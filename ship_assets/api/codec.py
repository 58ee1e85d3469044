"""Encode/decode the asset list to and from YAML and JSON.

Both notations share one key vocabulary, but each kind has an explicit
key table here rather than relying on model field names, so the on-disk
format can't drift when a model attribute is renamed.

The one notation-specific difference is ``mode``: JSON carries the
integer value, YAML carries an octal string (``"0644"``).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ValidationError

from ship_assets.api.models import (
    Asset,
    AssetKind,
    Assets,
    AssetSpec,
    DockerAsset,
    DockerLayerAsset,
    EKSAsset,
    EKSAutoscalingGroup,
    EKSCreatedVPC,
    EKSExistingVPC,
    GitHubAsset,
    HelmAsset,
    InlineAsset,
    LocalHelmOpts,
    TerraformAsset,
    WebAsset,
)

logger = logging.getLogger(__name__)

NOTATIONS = ("yaml", "json")


class AssetDecodeError(ValueError):
    """Raised when an asset document cannot be mapped onto the schema."""


# ---------------------------------------------------------------------------
# Key tables: (wire key, model attribute, omit when empty)
# ---------------------------------------------------------------------------

KeyTable = Tuple[Tuple[str, str, bool], ...]

_SHARED: KeyTable = (
    ("dest", "dest", False),
    ("mode", "mode", False),
    ("description", "description", False),
    ("when", "when", False),
)

_INLINE: KeyTable = _SHARED + (("contents", "contents", False),)

_DOCKER: KeyTable = _SHARED + (
    ("image", "image", False),
    ("source", "source", False),
)

_DOCKER_LAYER: KeyTable = _DOCKER + (("layer", "layer", False),)

_GITHUB: KeyTable = _SHARED + (
    ("repo", "repo", False),
    ("ref", "ref", False),
    ("path", "path", False),
    ("source", "source", False),
)

_WEB: KeyTable = _SHARED + (
    ("body", "body", False),
    ("bodyFormat", "body_format", False),
    ("headers", "headers", False),
    ("method", "method", False),
    ("url", "url", False),
)

_HELM: KeyTable = _SHARED + (
    ("values", "values", False),
    ("helm_opts", "helm_opts", False),
)

_LOCAL_HELM: KeyTable = (("chart_root", "chart_root", False),)

_TERRAFORM: KeyTable = _SHARED + (("inline", "inline", True),)

_CREATED_VPC: KeyTable = (
    ("zones", "zones", True),
    ("vpc_cidr", "vpc_cidr", True),
    ("public_subnets", "public_subnets", True),
    ("private_subnets", "private_subnets", True),
)

_EXISTING_VPC: KeyTable = (
    ("vpc_id", "vpc_id", True),
    ("public_subnets", "public_subnets", True),
    ("private_subnets", "private_subnets", True),
)

_AUTOSCALING_GROUP: KeyTable = (
    ("name", "name", True),
    ("group_size", "group_size", True),
    ("machine_type", "machine_type", True),
)

_EKS: KeyTable = _SHARED + (
    ("cluster_name", "cluster_name", True),
    ("region", "region", True),
)


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


def _require_mapping(data: Any, where: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise AssetDecodeError(
            f"{where}: expected a mapping, got {type(data).__name__}"
        )
    return data


def _pick(data: Dict[str, Any], table: KeyTable) -> Dict[str, Any]:
    """Translate wire keys to model attributes, dropping ``null`` values."""
    out: Dict[str, Any] = {}
    for wire, attr, _ in table:
        if data.get(wire) is not None:
            out[attr] = data[wire]
    return out


def _put(model: BaseModel, table: KeyTable, notation: str) -> Dict[str, Any]:
    """Translate model attributes to wire keys, honouring omit-when-empty."""
    out: Dict[str, Any] = {}
    for wire, attr, omit_empty in table:
        value = getattr(model, attr)
        if omit_empty and not value:
            continue
        if wire == "mode" and notation == "yaml":
            value = format(value, "04o")
        elif isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = {k: (list(v) if isinstance(v, list) else v) for k, v in value.items()}
        out[wire] = value
    return out


def _validate(model: type, kwargs: Dict[str, Any], where: str) -> Any:
    try:
        return model.model_validate(kwargs)
    except ValidationError as exc:
        raise AssetDecodeError(f"{where}: {exc}") from exc


# ---------------------------------------------------------------------------
# Per-kind decoders
# ---------------------------------------------------------------------------


def _decode_github(data: Any, where: str) -> GitHubAsset:
    data = _require_mapping(data, where)
    return _validate(GitHubAsset, _pick(data, _GITHUB), where)


def _decode_helm(data: Any, where: str) -> HelmAsset:
    data = _require_mapping(data, where)
    kwargs = _pick(data, _HELM)
    if data.get("github") is not None:
        kwargs["github"] = _decode_github(data["github"], f"{where}.github")
    if data.get("local") is not None:
        local = _require_mapping(data["local"], f"{where}.local")
        kwargs["local"] = _validate(LocalHelmOpts, _pick(local, _LOCAL_HELM), f"{where}.local")
    return _validate(HelmAsset, kwargs, where)


def _decode_terraform(data: Any, where: str) -> TerraformAsset:
    data = _require_mapping(data, where)
    kwargs = _pick(data, _TERRAFORM)
    if data.get("github") is not None:
        kwargs["github"] = _decode_github(data["github"], f"{where}.github")
    return _validate(TerraformAsset, kwargs, where)


def _decode_eks(data: Any, where: str) -> EKSAsset:
    data = _require_mapping(data, where)
    kwargs = _pick(data, _EKS)
    if data.get("created_vpc") is not None:
        vpc = _require_mapping(data["created_vpc"], f"{where}.created_vpc")
        kwargs["created_vpc"] = _validate(
            EKSCreatedVPC, _pick(vpc, _CREATED_VPC), f"{where}.created_vpc"
        )
    if data.get("existing_vpc") is not None:
        vpc = _require_mapping(data["existing_vpc"], f"{where}.existing_vpc")
        kwargs["existing_vpc"] = _validate(
            EKSExistingVPC, _pick(vpc, _EXISTING_VPC), f"{where}.existing_vpc"
        )
    groups: List[EKSAutoscalingGroup] = []
    raw_groups = data.get("autoscaling_groups") or []
    if not isinstance(raw_groups, list):
        raise AssetDecodeError(f"{where}.autoscaling_groups: expected a list")
    for i, raw in enumerate(raw_groups):
        gwhere = f"{where}.autoscaling_groups[{i}]"
        group = _require_mapping(raw, gwhere)
        groups.append(
            _validate(EKSAutoscalingGroup, _pick(group, _AUTOSCALING_GROUP), gwhere)
        )
    kwargs["autoscaling_groups"] = groups
    return _validate(EKSAsset, kwargs, where)


def _flat_decoder(model: type, table: KeyTable) -> Callable[[Any, str], Any]:
    def decode(data: Any, where: str) -> Any:
        return _validate(model, _pick(_require_mapping(data, where), table), where)

    return decode


_DECODERS: Dict[AssetKind, Callable[[Any, str], Any]] = {
    AssetKind.INLINE: _flat_decoder(InlineAsset, _INLINE),
    AssetKind.DOCKER: _flat_decoder(DockerAsset, _DOCKER),
    AssetKind.DOCKER_LAYER: _flat_decoder(DockerLayerAsset, _DOCKER_LAYER),
    AssetKind.GITHUB: _decode_github,
    AssetKind.WEB: _flat_decoder(WebAsset, _WEB),
    AssetKind.HELM: _decode_helm,
    AssetKind.TERRAFORM: _decode_terraform,
    AssetKind.EKS: _decode_eks,
}


# ---------------------------------------------------------------------------
# Per-kind encoders
# ---------------------------------------------------------------------------


def _encode_helm(asset: HelmAsset, notation: str) -> Dict[str, Any]:
    out = _put(asset, _HELM, notation)
    if asset.github is not None:
        out["github"] = _put(asset.github, _GITHUB, notation)
    if asset.local is not None:
        out["local"] = _put(asset.local, _LOCAL_HELM, notation)
    return out


def _encode_terraform(asset: TerraformAsset, notation: str) -> Dict[str, Any]:
    out = _put(asset, _TERRAFORM, notation)
    if asset.github is not None:
        out["github"] = _put(asset.github, _GITHUB, notation)
    return out


def _encode_eks(asset: EKSAsset, notation: str) -> Dict[str, Any]:
    out = _put(asset, _EKS, notation)
    if asset.created_vpc is not None:
        out["created_vpc"] = _put(asset.created_vpc, _CREATED_VPC, notation)
    if asset.existing_vpc is not None:
        out["existing_vpc"] = _put(asset.existing_vpc, _EXISTING_VPC, notation)
    if asset.autoscaling_groups:
        out["autoscaling_groups"] = [
            _put(group, _AUTOSCALING_GROUP, notation)
            for group in asset.autoscaling_groups
        ]
    return out


def _flat_encoder(table: KeyTable) -> Callable[[Any, str], Dict[str, Any]]:
    def encode(asset: Any, notation: str) -> Dict[str, Any]:
        return _put(asset, table, notation)

    return encode


_ENCODERS: Dict[AssetKind, Callable[[Any, str], Dict[str, Any]]] = {
    AssetKind.INLINE: _flat_encoder(_INLINE),
    AssetKind.DOCKER: _flat_encoder(_DOCKER),
    AssetKind.DOCKER_LAYER: _flat_encoder(_DOCKER_LAYER),
    AssetKind.GITHUB: _flat_encoder(_GITHUB),
    AssetKind.WEB: _flat_encoder(_WEB),
    AssetKind.HELM: _encode_helm,
    AssetKind.TERRAFORM: _encode_terraform,
    AssetKind.EKS: _encode_eks,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def asset_from_dict(data: Any, where: str = "asset") -> Asset:
    """Decode one entry of the ``v1`` list."""
    data = _require_mapping(data, where)
    known = {kind.value for kind in AssetKind}
    unknown = sorted(k for k in data if k not in known)
    if unknown:
        raise AssetDecodeError(
            f"{where}: unknown asset kind(s): {', '.join(unknown)}"
        )

    fields: Dict[str, AssetSpec] = {}
    for kind in AssetKind:
        if data.get(kind.value) is None:
            continue
        fields[kind.value] = _DECODERS[kind](data[kind.value], f"{where}.{kind.value}")
    return Asset(**fields)


def asset_to_dict(asset: Asset, notation: str = "json") -> Dict[str, Any]:
    """Encode one asset; unset kinds are omitted."""
    _check_notation(notation)
    out: Dict[str, Any] = {}
    for kind in AssetKind:
        spec = getattr(asset, kind.value)
        if spec is not None:
            out[kind.value] = _ENCODERS[kind](spec, notation)
    return out


def assets_from_dict(data: Any) -> Assets:
    """Decode a whole ``{v1: [...]}`` document."""
    data = _require_mapping(data, "assets")
    raw_list = data.get("v1") or []
    if not isinstance(raw_list, list):
        raise AssetDecodeError("assets.v1: expected a list")
    return Assets(
        v1=[asset_from_dict(raw, f"assets.v1[{i}]") for i, raw in enumerate(raw_list)]
    )


def assets_to_dict(assets: Assets, notation: str = "json") -> Dict[str, Any]:
    """Encode a whole document; an empty list is omitted."""
    if not assets.v1:
        return {}
    return {"v1": [asset_to_dict(a, notation) for a in assets.v1]}


def load_assets(text: str, notation: str = "yaml") -> Assets:
    """Parse *text* in the given notation into :class:`Assets`.

    Accepts both a bare ``{v1: [...]}`` document and one wrapped in a
    top-level ``assets:`` key.
    """
    _check_notation(notation)
    try:
        if notation == "json":
            raw = json.loads(text) if text.strip() else {}
        else:
            raw = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise AssetDecodeError(f"could not parse {notation}: {exc}") from exc

    if isinstance(raw, dict) and "assets" in raw and "v1" not in raw:
        raw = raw["assets"]
    assets = assets_from_dict(raw)
    logger.debug("Decoded %d asset(s) from %s", len(assets.v1), notation)
    return assets


def dump_assets(assets: Assets, notation: str = "yaml") -> str:
    """Serialise *assets* in the given notation."""
    _check_notation(notation)
    data = assets_to_dict(assets, notation)
    if notation == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def notation_for(path: str | Path) -> str:
    """``.json`` files are JSON; everything else is YAML."""
    return "json" if Path(path).suffix.lower() == ".json" else "yaml"


def read_assets_file(path: str | Path, notation: Optional[str] = None) -> Assets:
    """Load an asset list from *path*.

    Raises :class:`FileNotFoundError` when *path* does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Assets file not found: {path}")
    return load_assets(path.read_text(encoding="utf-8"), notation or notation_for(path))


def _check_notation(notation: str) -> None:
    if notation not in NOTATIONS:
        raise ValueError(
            f"unsupported notation {notation!r}; expected one of {', '.join(NOTATIONS)}"
        )
