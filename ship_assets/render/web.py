"""Web and GitHub asset renderers - fetch a body over HTTP, write it to dest."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import requests

from ship_assets.api.models import GitHubAsset, WebAsset
from ship_assets.render.files import DEFAULT_MODE, AssetRenderError, write_file
from ship_assets.render.templating import render_template

logger = logging.getLogger(__name__)

#: Seconds before an HTTP request is abandoned.
REQUEST_TIMEOUT = 60

GITHUB_RAW_URL = "https://raw.githubusercontent.com"
DEFAULT_GITHUB_REF = "master"


def _fetch(
    session: requests.Session,
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[str] = None,
) -> bytes:
    """Perform one request and return the body; non-2xx is an error."""
    logger.info("%s %s", method, url)
    response = session.request(
        method,
        url,
        headers=headers or {},
        data=body.encode("utf-8") if body else None,
        timeout=REQUEST_TIMEOUT,
    )
    if not response.ok:
        raise AssetRenderError(
            f"{method} {url} returned {response.status_code} {response.reason}"
        )
    return response.content


class WebRenderer:
    """Render :class:`WebAsset` records with :mod:`requests`."""

    def __init__(
        self,
        install_root: Union[str, Path],
        *,
        session: Optional[requests.Session] = None,
        default_mode: int = DEFAULT_MODE,
    ) -> None:
        self.install_root = Path(install_root)
        self.session = session or requests.Session()
        self.default_mode = default_mode

    def execute(self, asset: WebAsset, template_context: Mapping[str, str]) -> Path:
        if not asset.url:
            raise AssetRenderError("web asset has no url")
        url = render_template(asset.url, template_context)

        # Repeated header values are joined the way HTTP folds them.
        headers = {
            name: ", ".join(render_template(v, template_context) for v in values)
            for name, values in asset.headers.items()
        }
        if asset.body_format and "Content-Type" not in headers:
            headers["Content-Type"] = asset.body_format
        body = render_template(asset.body, template_context) if asset.body else None

        content = _fetch(
            self.session,
            (asset.method or "GET").upper(),
            url,
            headers=headers,
            body=body,
        )
        return write_file(
            self.install_root,
            asset.dest,
            content,
            asset.mode,
            default_mode=self.default_mode,
        )


class GitHubRenderer:
    """Render a single file from a GitHub repository.

    ``repo`` is ``owner/name``; ``ref`` defaults to ``master``.  A token
    from ``GITHUB_TOKEN`` is sent when present.
    """

    def __init__(
        self,
        install_root: Union[str, Path],
        *,
        session: Optional[requests.Session] = None,
        token: Optional[str] = None,
        default_mode: int = DEFAULT_MODE,
    ) -> None:
        self.install_root = Path(install_root)
        self.session = session or requests.Session()
        self.token = token if token is not None else os.environ.get("GITHUB_TOKEN", "")
        self.default_mode = default_mode

    def url_for(self, asset: GitHubAsset) -> str:
        if not asset.repo or not asset.path:
            raise AssetRenderError("github asset needs both repo and path")
        ref = asset.ref or DEFAULT_GITHUB_REF
        path = asset.path.lstrip("/")
        return f"{GITHUB_RAW_URL}/{asset.repo.strip('/')}/{ref}/{path}"

    def execute(self, asset: GitHubAsset, template_context: Mapping[str, str]) -> Path:
        headers = {}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        content = _fetch(self.session, "GET", self.url_for(asset), headers=headers)
        return write_file(
            self.install_root,
            asset.dest,
            content,
            asset.mode,
            default_mode=self.default_mode,
        )
