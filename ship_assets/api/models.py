"""Pydantic models for the asset specification.

One canonical in-memory schema for every asset kind.  The mapping to and
from the on-disk notations lives in :mod:`ship_assets.api.codec`; the
models here only normalise and validate values.

Structure::

    assets:
      v1:
        - inline: {dest: ..., contents: ...}
        - amazon_elastic_kubernetes_service:
            dest: terraform/eks.tf
            cluster_name: ...
            created_vpc: {...}   # or existing_vpc: {...}
            autoscaling_groups: [...]
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


def parse_mode(value: Any) -> Any:
    """Accept ``420``, ``"0644"``, ``"644"`` or ``"0o644"``.

    Strings are read as octal; anything else is returned unchanged for
    pydantic to validate.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            return int(text, 8)
        except ValueError as exc:
            raise ValueError(f"invalid file mode {value!r}") from exc
    return value


class AssetKind(str, Enum):
    """Asset kinds, valued by their key in the asset list."""

    INLINE = "inline"
    DOCKER = "docker"
    DOCKER_LAYER = "dockerlayer"
    GITHUB = "github"
    WEB = "web"
    HELM = "helm"
    TERRAFORM = "terraform"
    EKS = "amazon_elastic_kubernetes_service"


# ---------------------------------------------------------------------------
# Shared attributes
# ---------------------------------------------------------------------------


class AssetShared(BaseModel):
    """Attributes common to all assets.

    Attributes:
        dest: Output path, relative to the install root.
        mode: File mode of the written file, ``0`` to ``0o7777``.  ``0``
            means "use the default".
        description: Optional human-readable description.
        when: Optional predicate; the asset is skipped when it evaluates false.
    """

    dest: str = ""
    mode: int = Field(default=0, ge=0, le=0o7777)
    description: str = ""
    when: str = ""

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return parse_mode(value)


# ---------------------------------------------------------------------------
# Simple asset kinds
# ---------------------------------------------------------------------------


class InlineAsset(AssetShared):
    """An asset whose contents are specified directly in the asset list."""

    contents: str = ""


class DockerAsset(AssetShared):
    """An asset that declares a docker image."""

    image: str = ""
    source: str = ""


class DockerLayerAsset(DockerAsset):
    """An asset that unpacks a single docker layer at ``dest``."""

    layer: str = ""


class GitHubAsset(AssetShared):
    """A file (or directory) pulled from a GitHub repository."""

    repo: str = ""
    ref: str = ""
    path: str = ""
    source: str = ""


class WebAsset(AssetShared):
    """An asset whose contents are the response body of an HTTP request."""

    body: str = ""
    body_format: str = ""
    headers: Dict[str, List[str]] = Field(default_factory=dict)
    method: str = ""
    url: str = ""


class LocalHelmOpts(BaseModel):
    """A chart templated from files already present at ``chart_root``."""

    chart_root: str = ""


class HelmAsset(AssetShared):
    """A helm chart, pulled from GitHub or found locally."""

    values: Dict[str, Any] = Field(default_factory=dict)
    helm_opts: List[str] = Field(default_factory=list)
    github: Optional[GitHubAsset] = None
    local: Optional[LocalHelmOpts] = None


class TerraformAsset(AssetShared):
    """A terraform module, either inline or pulled from GitHub."""

    github: Optional[GitHubAsset] = None
    inline: str = ""


# ---------------------------------------------------------------------------
# Managed Kubernetes cluster (EKS)
# ---------------------------------------------------------------------------


class EKSCreatedVPC(BaseModel):
    """A VPC that the generated terraform creates.

    List order is written out verbatim; positional correspondence between
    ``zones`` and the subnet lists is the caller's responsibility.
    """

    zones: List[str] = Field(default_factory=list)
    vpc_cidr: str = ""
    public_subnets: List[str] = Field(default_factory=list)
    private_subnets: List[str] = Field(default_factory=list)


class EKSExistingVPC(BaseModel):
    """A pre-existing VPC referenced by ID."""

    vpc_id: str = ""
    public_subnets: List[str] = Field(default_factory=list)
    private_subnets: List[str] = Field(default_factory=list)


class EKSAutoscalingGroup(BaseModel):
    """A fixed-size pool of worker nodes of a single machine type.

    ``group_size`` is used for min, max and desired capacity alike.
    Negative values are passed through as given.
    """

    name: str = ""
    group_size: int = 0
    machine_type: str = ""


VPCTopology = Union[EKSCreatedVPC, EKSExistingVPC]


class ClusterSpec(BaseModel):
    """Description of a managed Kubernetes cluster."""

    cluster_name: str = ""
    region: str = ""
    created_vpc: Optional[EKSCreatedVPC] = None
    existing_vpc: Optional[EKSExistingVPC] = None
    autoscaling_groups: List[EKSAutoscalingGroup] = Field(default_factory=list)

    def vpc_topology(self) -> VPCTopology:
        """Return the VPC variant to render.

        A created VPC wins over an existing one; with neither set an empty
        :class:`EKSExistingVPC` is returned.
        """
        if self.created_vpc is not None:
            return self.created_vpc
        if self.existing_vpc is not None:
            return self.existing_vpc
        return EKSExistingVPC()


class EKSAsset(AssetShared, ClusterSpec):
    """A managed cluster rendered as terraform to ``dest``."""

    def cluster_spec(self) -> ClusterSpec:
        """Strip the shared asset attributes."""
        return ClusterSpec(
            cluster_name=self.cluster_name,
            region=self.region,
            created_vpc=self.created_vpc,
            existing_vpc=self.existing_vpc,
            autoscaling_groups=list(self.autoscaling_groups),
        )


# ---------------------------------------------------------------------------
# Asset list
# ---------------------------------------------------------------------------

AssetSpec = Union[
    InlineAsset,
    DockerAsset,
    DockerLayerAsset,
    GitHubAsset,
    WebAsset,
    HelmAsset,
    TerraformAsset,
    EKSAsset,
]

_KIND_FIELDS: Dict[AssetKind, str] = {
    AssetKind.INLINE: "inline",
    AssetKind.DOCKER: "docker",
    AssetKind.DOCKER_LAYER: "dockerlayer",
    AssetKind.GITHUB: "github",
    AssetKind.WEB: "web",
    AssetKind.HELM: "helm",
    AssetKind.TERRAFORM: "terraform",
    AssetKind.EKS: "amazon_elastic_kubernetes_service",
}


class Asset(BaseModel):
    """A tagged asset record.  Exactly one kind is expected to be set."""

    inline: Optional[InlineAsset] = None
    docker: Optional[DockerAsset] = None
    dockerlayer: Optional[DockerLayerAsset] = None
    github: Optional[GitHubAsset] = None
    web: Optional[WebAsset] = None
    helm: Optional[HelmAsset] = None
    terraform: Optional[TerraformAsset] = None
    amazon_elastic_kubernetes_service: Optional[EKSAsset] = None

    @property
    def kind(self) -> Optional[AssetKind]:
        """First populated kind, in declaration order, or ``None``."""
        for kind, attr in _KIND_FIELDS.items():
            if getattr(self, attr) is not None:
                return kind
        return None

    @property
    def spec(self) -> Optional[AssetSpec]:
        """The record for :attr:`kind`."""
        kind = self.kind
        if kind is None:
            return None
        return getattr(self, _KIND_FIELDS[kind])

    @classmethod
    def of(cls, spec: AssetSpec) -> "Asset":
        """Wrap a single kind record."""
        for kind, attr in _KIND_FIELDS.items():
            if type(spec) is _KIND_TYPES[kind]:
                return cls(**{attr: spec})
        raise TypeError(f"not an asset record: {type(spec).__name__}")


_KIND_TYPES: Dict[AssetKind, type] = {
    AssetKind.INLINE: InlineAsset,
    AssetKind.DOCKER: DockerAsset,
    AssetKind.DOCKER_LAYER: DockerLayerAsset,
    AssetKind.GITHUB: GitHubAsset,
    AssetKind.WEB: WebAsset,
    AssetKind.HELM: HelmAsset,
    AssetKind.TERRAFORM: TerraformAsset,
    AssetKind.EKS: EKSAsset,
}


class Assets(BaseModel):
    """Top level assets object."""

    v1: List[Asset] = Field(default_factory=list)
