"""Inline asset renderer.

Writes ``contents`` to ``dest`` after template evaluation.  Other
renderers that generate text (EKS, inline terraform) hand their output
to this renderer as an ordinary :class:`InlineAsset`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Union

from ship_assets.api.models import InlineAsset
from ship_assets.render.files import DEFAULT_MODE, write_file
from ship_assets.render.templating import render_template

logger = logging.getLogger(__name__)


class InlineRenderer:
    """Render inline assets below *install_root*."""

    def __init__(
        self,
        install_root: Union[str, Path],
        *,
        default_mode: int = DEFAULT_MODE,
    ) -> None:
        self.install_root = Path(install_root)
        self.default_mode = default_mode

    def execute(self, asset: InlineAsset, template_context: Mapping[str, str]) -> Path:
        """Evaluate ``asset.contents`` and write it.  Returns the written path."""
        contents = render_template(asset.contents, template_context)
        return write_file(
            self.install_root,
            asset.dest,
            contents,
            asset.mode,
            default_mode=self.default_mode,
        )
