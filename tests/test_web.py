"""Tests for ship_assets.render.web — web and GitHub renderers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from ship_assets.api.models import GitHubAsset, WebAsset
from ship_assets.render.files import AssetRenderError
from ship_assets.render.web import (
    GITHUB_RAW_URL,
    REQUEST_TIMEOUT,
    GitHubRenderer,
    WebRenderer,
)


def _session(content: bytes = b"body", status: int = 200, reason: str = "OK") -> MagicMock:
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = reason
    response.content = content
    session = MagicMock(spec=requests.Session)
    session.request.return_value = response
    return session


# ── WebRenderer ─────────────────────────────────────────────────────────


class TestWebRenderer:
    def test_get_and_write(self, tmp_path):
        session = _session(b"<html></html>")
        renderer = WebRenderer(tmp_path, session=session)
        renderer.execute(WebAsset(dest="page.html", url="https://example.com/"), {})

        assert (tmp_path / "page.html").read_bytes() == b"<html></html>"
        session.request.assert_called_once_with(
            "GET",
            "https://example.com/",
            headers={},
            data=None,
            timeout=REQUEST_TIMEOUT,
        )

    def test_post_with_templated_body_and_headers(self, tmp_path):
        session = _session()
        asset = WebAsset(
            dest="out.json",
            url="https://api.example.com/${ENV}/config",
            method="post",
            body='{"region": "${REGION}"}',
            body_format="application/json",
            headers={"Authorization": ["Bearer ${TOKEN}"], "X-Multi": ["a", "b"]},
        )
        WebRenderer(tmp_path, session=session).execute(
            asset, {"ENV": "prod", "REGION": "us-east-1", "TOKEN": "t0k"}
        )

        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "POST"
        assert url == "https://api.example.com/prod/config"
        assert kwargs["data"] == b'{"region": "us-east-1"}'
        assert kwargs["headers"] == {
            "Authorization": "Bearer t0k",
            "X-Multi": "a, b",
            "Content-Type": "application/json",
        }

    def test_explicit_content_type_wins(self, tmp_path):
        session = _session()
        asset = WebAsset(
            dest="f",
            url="https://x",
            body_format="application/json",
            headers={"Content-Type": ["text/plain"]},
        )
        WebRenderer(tmp_path, session=session).execute(asset, {})
        assert session.request.call_args.kwargs["headers"]["Content-Type"] == "text/plain"

    def test_non_2xx_fails_without_writing(self, tmp_path):
        session = _session(status=404, reason="Not Found")
        renderer = WebRenderer(tmp_path, session=session)
        with pytest.raises(AssetRenderError, match="404 Not Found"):
            renderer.execute(WebAsset(dest="page.html", url="https://x/missing"), {})
        assert not (tmp_path / "page.html").exists()

    def test_missing_url(self, tmp_path):
        with pytest.raises(AssetRenderError, match="no url"):
            WebRenderer(tmp_path, session=_session()).execute(WebAsset(dest="f"), {})

    def test_connection_error_propagates(self, tmp_path):
        session = _session()
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(requests.ConnectionError):
            WebRenderer(tmp_path, session=session).execute(
                WebAsset(dest="f", url="https://x"), {}
            )


# ── GitHubRenderer ──────────────────────────────────────────────────────


class TestGitHubRenderer:
    def test_url(self, tmp_path):
        renderer = GitHubRenderer(tmp_path, session=_session(), token="")
        asset = GitHubAsset(repo="replicatedhq/ship", ref="v1.0", path="/docs/README.md")
        assert renderer.url_for(asset) == (
            f"{GITHUB_RAW_URL}/replicatedhq/ship/v1.0/docs/README.md"
        )

    def test_default_ref(self, tmp_path):
        renderer = GitHubRenderer(tmp_path, session=_session(), token="")
        url = renderer.url_for(GitHubAsset(repo="o/r", path="f"))
        assert url.endswith("/o/r/master/f")

    def test_missing_repo(self, tmp_path):
        renderer = GitHubRenderer(tmp_path, session=_session(), token="")
        with pytest.raises(AssetRenderError, match="repo and path"):
            renderer.url_for(GitHubAsset(path="f"))

    def test_fetch_and_write(self, tmp_path):
        session = _session(b"module {}")
        renderer = GitHubRenderer(tmp_path, session=session, token="")
        renderer.execute(GitHubAsset(dest="tf/main.tf", repo="o/r", path="main.tf"), {})
        assert (tmp_path / "tf" / "main.tf").read_bytes() == b"module {}"
        assert session.request.call_args.kwargs["headers"] == {}

    def test_token_header(self, tmp_path):
        session = _session()
        GitHubRenderer(tmp_path, session=session, token="abc").execute(
            GitHubAsset(dest="f", repo="o/r", path="p"), {}
        )
        assert session.request.call_args.kwargs["headers"] == {
            "Authorization": "token abc"
        }

    def test_token_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        renderer = GitHubRenderer(tmp_path, session=_session())
        assert renderer.token == "from-env"
