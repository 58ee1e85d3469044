"""Tests for ship_assets.config — loading, env overrides, write-back."""

from __future__ import annotations

import textwrap

import pytest

from ship_assets.config.loader import (
    ENV_DISABLE_REPORT,
    ENV_INSTALL_ROOT,
    load_config,
    merge_template_values,
    parse_overrides,
    write_config,
)
from ship_assets.config.models import ConfigFile, RenderConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(ENV_INSTALL_ROOT, raising=False)
    monkeypatch.delenv(ENV_DISABLE_REPORT, raising=False)


def _write(tmp_path, text: str):
    path = tmp_path / "ship-assets.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


# ── loading ─────────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_missing_file_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nope.yaml").ship_assets
        assert cfg.install_root == "installer"
        assert cfg.default_mode == 0o644
        assert cfg.write_report is True
        assert cfg.template_values == {}

    def test_none_path_defaults(self):
        assert load_config(None).ship_assets == RenderConfig()

    def test_full_file(self, tmp_path):
        path = _write(
            tmp_path,
            """\
            ship_assets:
              install_root: out
              default_mode: "0600"
              write_report: false
              template_values:
                REGION: us-east-1
                REPLICAS: 3
                ENABLED: true
            """,
        )
        cfg = load_config(path).ship_assets
        assert cfg.install_root == "out"
        assert cfg.default_mode == 0o600
        assert cfg.write_report is False
        assert cfg.template_values == {
            "REGION": "us-east-1",
            "REPLICAS": "3",
            "ENABLED": "true",
        }

    def test_null_values_use_defaults(self, tmp_path):
        path = _write(
            tmp_path,
            """\
            ship_assets:
              install_root: null
              template_values:
            """,
        )
        cfg = load_config(path).ship_assets
        assert cfg.install_root == "installer"
        assert cfg.template_values == {}

    def test_empty_section(self, tmp_path):
        path = _write(tmp_path, "ship_assets:\n")
        assert load_config(path).ship_assets == RenderConfig()

    @pytest.mark.parametrize("mode", ['"0"', '"-644"', '"17777"'])
    def test_out_of_range_default_mode_rejected(self, tmp_path, mode):
        path = _write(tmp_path, f"ship_assets:\n  default_mode: {mode}\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


class TestEnvOverrides:
    def test_install_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ENV_INSTALL_ROOT, "/srv/out")
        path = _write(tmp_path, "ship_assets:\n  install_root: out\n")
        assert load_config(path).ship_assets.install_root == "/srv/out"

    def test_disable_report(self, monkeypatch):
        monkeypatch.setenv(ENV_DISABLE_REPORT, "1")
        assert load_config(None).ship_assets.write_report is False

    def test_disable_report_other_value_ignored(self, monkeypatch):
        monkeypatch.setenv(ENV_DISABLE_REPORT, "yes")
        assert load_config(None).ship_assets.write_report is True


# ── overrides ───────────────────────────────────────────────────────────


class TestOverrides:
    def test_parse(self):
        assert parse_overrides(["A=1", "B=x=y", "C="]) == {"A": "1", "B": "x=y", "C": ""}

    def test_parse_missing_equals(self):
        with pytest.raises(ValueError, match="KEY=VALUE"):
            parse_overrides(["nope"])

    def test_parse_empty_key(self):
        with pytest.raises(ValueError, match="KEY=VALUE"):
            parse_overrides(["=v"])

    def test_merge_precedence(self):
        cfg = RenderConfig(template_values={"A": "file", "B": "file"})
        assert merge_template_values(cfg, {"B": "cli"}) == {"A": "file", "B": "cli"}
        assert cfg.template_values == {"A": "file", "B": "file"}


# ── write-back ──────────────────────────────────────────────────────────


class TestWriteConfig:
    def test_roundtrip(self, tmp_path):
        original = ConfigFile(
            ship_assets=RenderConfig(
                install_root="out",
                default_mode=0o640,
                template_values={"REGION": "eu-west-1"},
            )
        )
        path = tmp_path / "nested" / "cfg.yaml"
        write_config(original, path)
        assert load_config(path) == original

    def test_mode_written_as_octal_string(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        write_config(ConfigFile(), path)
        assert "default_mode: '0644'" in path.read_text(encoding="utf-8")
