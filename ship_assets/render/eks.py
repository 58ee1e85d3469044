"""Terraform generator for managed Kubernetes clusters (EKS).

Produces one terraform document from a :class:`ClusterSpec`::

    <vpc block>          created VPC (variables + module + locals)
                         or existing VPC (locals only)
    <autoscaling block>  worker_group_count + worker_groups locals
    <cluster block>      provider, cluster-name variable, eks module

Every block starts with a newline and ends with ``}\\n``, so plain
concatenation leaves exactly one blank line between blocks.  The output
is consumed as infrastructure code: whitespace, key order and quoting
are part of the format, keep them byte-stable.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Sequence

from ship_assets.api.models import (
    ClusterSpec,
    EKSAsset,
    EKSAutoscalingGroup,
    EKSCreatedVPC,
    EKSExistingVPC,
    InlineAsset,
)
from ship_assets.render.inline import InlineRenderer
from ship_assets.render.templating import render_template

logger = logging.getLogger(__name__)

# ── fixed blocks ─────────────────────────────────────────────────────

#: Version of ``terraform-aws-modules/vpc/aws`` used for created VPCs.
VPC_MODULE_VERSION = "1.37.0"

_VPC_MODULE = (
    'module "vpc" {\n'
    '  source  = "terraform-aws-modules/vpc/aws"\n'
    f'  version = "{VPC_MODULE_VERSION}"\n'
    '  name    = "eks-vpc"\n'
    '  cidr    = "${var.vpc_cidr}"\n'
    '  azs     = "${var.vpc_azs}"\n'
    "\n"
    '  private_subnets = "${var.vpc_private_subnets}"\n'
    '  public_subnets  = "${var.vpc_public_subnets}"\n'
    "\n"
    "  map_public_ip_on_launch = true\n"
    "  enable_nat_gateway      = true\n"
    "  single_nat_gateway      = true\n"
    "\n"
    '  tags = "${map("kubernetes.io/cluster/${var.eks-cluster-name}", "shared")}"\n'
    "}\n"
)

_WORKER_SUBNETS = '"${join(",", local.eks_vpc_private_subnets)}"'

#: Cluster-level block.  ``${EKS_REGION}`` and ``${EKS_CLUSTER_NAME}`` are
#: template tokens and receive already-quoted literals.
CLUSTER_TEMPLATE = (
    'provider "aws" {\n'
    '  version = "~> 1.27"\n'
    "  region  = ${EKS_REGION}\n"
    "}\n"
    "\n"
    'variable "eks-cluster-name" {\n'
    "  default = ${EKS_CLUSTER_NAME}\n"
    '  type    = "string"\n'
    "}\n"
    "\n"
    'module "eks" {\n'
    '  #source = "terraform-aws-modules/eks/aws"\n'
    '  source  = "laverya/eks/aws"\n'
    '  version = "1.4.0"\n'
    "\n"
    '  cluster_name = "${var.eks-cluster-name}"\n'
    "\n"
    '  subnets = ["${local.eks_vpc_private_subnets}", "${local.eks_vpc_public_subnets}"]\n'
    "\n"
    '  vpc_id = "${local.eks_vpc}"\n'
    "\n"
    '  worker_group_count = "${local.worker_group_count}"\n'
    '  worker_groups      = "${local.worker_groups}"\n'
    "}\n"
)


# ── formatting helpers ───────────────────────────────────────────────


def quote(value: str) -> str:
    """Render *value* as a double-quoted terraform string literal."""
    escaped = (
        value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    )
    return f'"{escaped}"'


def render_list(values: Iterable[str]) -> str:
    """Render a list value, one quoted entry per line.

    ``[]`` renders as ``[`` newline ``  ]`` with no entries.
    """
    lines = ["["]
    lines.extend(f"    {quote(v)}," for v in values)
    lines.append("  ]")
    return "\n".join(lines)


def _document(blocks: Sequence[str]) -> str:
    return "\n" + "\n".join(blocks)


def _list_variable(name: str, values: Sequence[str]) -> str:
    return f'variable "{name}" {{\n  default = {render_list(values)}\n}}\n'


def _vpc_locals(vpc_id: str, public_subnets: str, private_subnets: str) -> str:
    return (
        "locals {\n"
        f'  "eks_vpc"                 = {vpc_id}\n'
        f'  "eks_vpc_public_subnets"  = {public_subnets}\n'
        f'  "eks_vpc_private_subnets" = {private_subnets}\n'
        "}\n"
    )


# ── VPC block ────────────────────────────────────────────────────────


def render_new_vpc(vpc: EKSCreatedVPC) -> str:
    """Variables, ``module "vpc"`` and locals bound to the module outputs."""
    cidr = (
        'variable "vpc_cidr" {\n'
        '  type    = "string"\n'
        f"  default = {quote(vpc.vpc_cidr)}\n"
        "}\n"
    )
    return _document(
        [
            cidr,
            _list_variable("vpc_public_subnets", vpc.public_subnets),
            _list_variable("vpc_private_subnets", vpc.private_subnets),
            _list_variable("vpc_azs", vpc.zones),
            _VPC_MODULE,
            _vpc_locals(
                '"${module.vpc.vpc_id}"',
                '"${module.vpc.public_subnets}"',
                '"${module.vpc.private_subnets}"',
            ),
        ]
    )


def render_existing_vpc(vpc: EKSExistingVPC) -> str:
    """Locals bound directly to the given VPC ID and subnet IDs."""
    return _document(
        [
            _vpc_locals(
                quote(vpc.vpc_id),
                render_list(vpc.public_subnets),
                render_list(vpc.private_subnets),
            ),
        ]
    )


def render_vpc(spec: ClusterSpec) -> str:
    """Render whichever VPC variant *spec* selects."""
    topology = spec.vpc_topology()
    if isinstance(topology, EKSCreatedVPC):
        return render_new_vpc(topology)
    return render_existing_vpc(topology)


# ── autoscaling groups ───────────────────────────────────────────────


def _render_asg(group: EKSAutoscalingGroup) -> str:
    size = quote(str(int(group.group_size)))
    return (
        "    {\n"
        f"      name                 = {quote(group.name)}\n"
        f"      asg_min_size         = {size}\n"
        f"      asg_max_size         = {size}\n"
        f"      asg_desired_capacity = {size}\n"
        f"      instance_type        = {quote(group.machine_type)}\n"
        "\n"
        f"      subnets = {_WORKER_SUBNETS}\n"
        "    },\n"
    )


def render_asgs(groups: Sequence[EKSAutoscalingGroup]) -> str:
    """Worker group count and worker group list, in input order."""
    count = (
        "locals {\n"
        f'  "worker_group_count" = {quote(str(len(groups)))}\n'
        "}\n"
    )
    records: List[str] = [_render_asg(g) for g in groups]
    worker_groups = (
        "locals {\n"
        '  "worker_groups" = [\n'
        + "".join(records)
        + "  ]\n"
        "}\n"
    )
    return _document([count, worker_groups])


# ── full document ────────────────────────────────────────────────────


def render_cluster(spec: ClusterSpec) -> str:
    """Provider, cluster-name variable and ``module "eks"``.

    Raises :class:`~ship_assets.render.templating.TemplateError` if the
    cluster template can't be evaluated.
    """
    body = render_template(
        CLUSTER_TEMPLATE,
        {
            "EKS_REGION": quote(spec.region),
            "EKS_CLUSTER_NAME": quote(spec.cluster_name),
        },
        strict=True,
    )
    return "\n" + body


def render_terraform_contents(spec: ClusterSpec) -> str:
    """Assemble the complete terraform document for *spec*.

    Either the whole document is returned or the template error
    propagates; nothing partial is produced.
    """
    cluster = render_cluster(spec)
    return render_vpc(spec) + render_asgs(spec.autoscaling_groups) + cluster


# ── asset renderer ───────────────────────────────────────────────────


class EKSRenderer:
    """Renders an :class:`EKSAsset` through the inline renderer."""

    def __init__(self, inline: InlineRenderer) -> None:
        self.inline = inline

    def execute(self, asset: EKSAsset, template_context: Mapping[str, str]) -> None:
        logger.debug(
            "Rendering EKS terraform for cluster %r to %s",
            asset.cluster_name,
            asset.dest,
        )
        contents = render_terraform_contents(asset.cluster_spec())
        self.inline.execute(
            InlineAsset(
                dest=asset.dest,
                mode=asset.mode,
                description=asset.description,
                when=asset.when,
                contents=contents,
            ),
            template_context,
        )
