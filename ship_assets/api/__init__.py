"""Asset specification schema and its YAML/JSON codec."""

from ship_assets.api.codec import (
    AssetDecodeError,
    asset_from_dict,
    asset_to_dict,
    dump_assets,
    load_assets,
    read_assets_file,
)
from ship_assets.api.models import (
    Asset,
    AssetKind,
    Assets,
    AssetShared,
    ClusterSpec,
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

__all__ = [
    "Asset",
    "AssetDecodeError",
    "AssetKind",
    "AssetShared",
    "Assets",
    "ClusterSpec",
    "DockerAsset",
    "DockerLayerAsset",
    "EKSAsset",
    "EKSAutoscalingGroup",
    "EKSCreatedVPC",
    "EKSExistingVPC",
    "GitHubAsset",
    "HelmAsset",
    "InlineAsset",
    "LocalHelmOpts",
    "TerraformAsset",
    "WebAsset",
    "asset_from_dict",
    "asset_to_dict",
    "dump_assets",
    "load_assets",
    "read_assets_file",
]
