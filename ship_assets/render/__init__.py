"""Asset renderers, the EKS terraform generator, and per-kind dispatch."""

from ship_assets.render.dispatcher import AssetDispatcher, default_dispatcher
from ship_assets.render.eks import (
    EKSRenderer,
    render_asgs,
    render_existing_vpc,
    render_new_vpc,
    render_terraform_contents,
    render_vpc,
)
from ship_assets.render.files import DEFAULT_MODE, AssetRenderError, write_file
from ship_assets.render.inline import InlineRenderer
from ship_assets.render.templating import (
    TemplateError,
    evaluate_when,
    render_template,
)
from ship_assets.render.terraform import TerraformRenderer
from ship_assets.render.web import GitHubRenderer, WebRenderer

__all__ = [
    "AssetDispatcher",
    "AssetRenderError",
    "DEFAULT_MODE",
    "EKSRenderer",
    "GitHubRenderer",
    "InlineRenderer",
    "TemplateError",
    "TerraformRenderer",
    "WebRenderer",
    "default_dispatcher",
    "evaluate_when",
    "render_asgs",
    "render_existing_vpc",
    "render_new_vpc",
    "render_template",
    "render_terraform_contents",
    "render_vpc",
    "write_file",
]
