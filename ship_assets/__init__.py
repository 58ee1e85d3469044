"""ship-assets - deployment asset rendering pipeline.

Turns a declarative list of asset specifications (inline files, web and
GitHub sourced files, Terraform modules, managed Kubernetes clusters) into
files on disk under an install root.
"""

try:
    from importlib.metadata import version

    __version__ = version("ship-assets")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
