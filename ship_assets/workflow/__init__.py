"""Orchestration workflows (render an asset list, preview EKS terraform)."""

from ship_assets.workflow.render_assets import (
    EXIT_INPUT_FAILURE,
    EXIT_RENDER_FAILURE,
    EXIT_SUCCESS,
    eks_assets,
    exit_code_for,
    load_template_values,
    render_eks_document,
    run_render_workflow,
)

__all__ = [
    "EXIT_INPUT_FAILURE",
    "EXIT_RENDER_FAILURE",
    "EXIT_SUCCESS",
    "eks_assets",
    "exit_code_for",
    "load_template_values",
    "render_eks_document",
    "run_render_workflow",
]
