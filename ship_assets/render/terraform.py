"""Terraform module asset renderer."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ship_assets.api.models import GitHubAsset, InlineAsset, TerraformAsset
from ship_assets.render.files import AssetRenderError
from ship_assets.render.inline import InlineRenderer
from ship_assets.render.web import GitHubRenderer

logger = logging.getLogger(__name__)


class TerraformRenderer:
    """Write an inline module, or pull one from GitHub.

    The GitHub record inherits ``dest``/``mode`` from the terraform asset
    when it leaves them unset.
    """

    def __init__(
        self,
        inline: InlineRenderer,
        github: Optional[GitHubRenderer] = None,
    ) -> None:
        self.inline = inline
        self.github = github

    def execute(self, asset: TerraformAsset, template_context: Mapping[str, str]) -> None:
        if asset.inline:
            self.inline.execute(
                InlineAsset(
                    dest=asset.dest,
                    mode=asset.mode,
                    description=asset.description,
                    when=asset.when,
                    contents=asset.inline,
                ),
                template_context,
            )
            return

        if asset.github is not None:
            if self.github is None:
                raise AssetRenderError("no GitHub renderer configured for terraform module")
            source: GitHubAsset = asset.github.model_copy(
                update={
                    "dest": asset.github.dest or asset.dest,
                    "mode": asset.github.mode or asset.mode,
                }
            )
            logger.debug("Pulling terraform module from %s", source.repo)
            self.github.execute(source, template_context)
            return

        raise AssetRenderError("terraform asset needs either inline or github")
