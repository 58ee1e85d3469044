"""CLI entry point for ship-assets, built on cli-core-yo.

Provides ``render`` and ``eks`` commands.

Usage::

    ship-assets --help
    ship-assets render --assets ship.yaml --install-root installer
    ship-assets render --assets ship.yaml --set REGION=us-east-1
    ship-assets eks --assets ship.yaml --index 0 --set CLUSTER=prod
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

import typer
from cli_core_yo import output
from cli_core_yo.app import create_app
from cli_core_yo.runtime import _reset, initialize
from cli_core_yo.spec import CliSpec, XdgSpec

# ── App specification ────────────────────────────────────────────────────────

spec = CliSpec(
    prog_name="ship-assets",
    app_display_name="Ship Assets",
    dist_name="ship-assets",
    root_help=(
        "Render deployment assets (inline files, web and GitHub files, "
        "terraform modules, EKS clusters) into an install directory."
    ),
    xdg=XdgSpec(app_dir_name="ship-assets"),
)

app = create_app(spec)


# ── Root callback (global options) ───────────────────────────────────────────


@app.callback()
def _root_callback(
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON."
    ),
) -> None:
    """Ship Assets rendering pipeline."""
    _reset()
    debug = os.environ.get("CLI_CORE_YO_DEBUG") == "1"
    xdg_paths = app._cli_core_yo_xdg_paths  # type: ignore[attr-defined]
    initialize(spec, xdg_paths, json_mode=json_flag, debug=debug)


# ── render command ───────────────────────────────────────────────────────────


@app.command()
def render(
    assets: str = typer.Option(
        ...,
        "--assets",
        help="Path to the asset list (YAML, or JSON with a .json suffix).",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to a ship-assets config YAML.",
    ),
    install_root: Optional[str] = typer.Option(
        None,
        "--install-root",
        help=(
            "Directory asset dest paths are relative to. "
            "Overrides the config file and SHIP_ASSETS_INSTALL_ROOT."
        ),
    ),
    set_values: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Template value KEY=VALUE. Can be specified multiple times.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Render every asset in the asset list.

    Exit codes: 0 = all rendered or skipped, 1 = an asset failed,
    2 = the config or asset file could not be loaded.

    Environment variables:
      SHIP_ASSETS_INSTALL_ROOT     Default install root.
      SHIP_ASSETS_DISABLE_REPORT   Set to 1 to skip writing the JSON report.
      GITHUB_TOKEN                 Token for GitHub-sourced assets.
    """
    from ship_assets.workflow.render_assets import run_render_workflow

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    output.action(f"Rendering assets from {assets} ...")
    rc = run_render_workflow(
        assets,
        config_path=config,
        install_root=install_root,
        overrides=set_values or [],
    )
    raise typer.Exit(rc)


# ── eks command ──────────────────────────────────────────────────────────────


@app.command()
def eks(
    assets: str = typer.Option(
        ...,
        "--assets",
        help="Path to the asset list.",
    ),
    index: Optional[int] = typer.Option(
        None,
        "--index",
        help="Only the Nth EKS asset (0-based, counting EKS assets only).",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to a ship-assets config YAML.",
    ),
    set_values: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Template value KEY=VALUE. Can be specified multiple times.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Print the terraform generated for EKS assets without writing files.

    Template values are applied as ``render`` applies them, so the output
    matches the file ``render`` would write.
    """
    from ship_assets.workflow.render_assets import (
        EXIT_INPUT_FAILURE,
        load_template_values,
        render_eks_document,
    )

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        values = load_template_values(config, set_values or [])
        document = render_eks_document(assets, index=index, template_values=values)
    except (OSError, ValueError, IndexError) as exc:
        output.error(str(exc))
        raise typer.Exit(EXIT_INPUT_FAILURE) from exc

    sys.stdout.write(document)
    raise typer.Exit(0)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
