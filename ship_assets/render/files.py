"""Destination resolution and all-or-nothing file writes for assets."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

#: Mode used when an asset leaves ``mode`` unset (``0``).
DEFAULT_MODE = 0o644

#: Highest valid mode (permission bits plus setuid, setgid and sticky).
MAX_MODE = 0o7777


class AssetRenderError(RuntimeError):
    """An asset could not be rendered."""


def resolve_dest(install_root: Union[str, Path], dest: str) -> Path:
    """Return the absolute output path for *dest* under *install_root*.

    Raises :class:`AssetRenderError` when *dest* is empty, absolute, or
    escapes the install root.
    """
    if not dest:
        raise AssetRenderError("asset has no dest")
    if os.path.isabs(dest):
        raise AssetRenderError(f"dest must be a relative path, got {dest!r}")

    root = Path(install_root).resolve()
    target = (root / dest).resolve()
    if target != root and root not in target.parents:
        raise AssetRenderError(f"dest {dest!r} escapes the install root {root}")
    if target == root:
        raise AssetRenderError(f"dest {dest!r} resolves to the install root itself")
    return target


def write_file(
    install_root: Union[str, Path],
    dest: str,
    data: Union[str, bytes],
    mode: int = 0,
    *,
    default_mode: int = DEFAULT_MODE,
) -> Path:
    """Write *data* to *dest* with *mode*, replacing any existing file.

    The bytes land in a temporary file next to the target which is then
    renamed over it, so readers see the old file or the new one, never a
    partial write.

    A mode outside ``1..0o7777`` raises :class:`AssetRenderError`.
    """
    target = resolve_dest(install_root, dest)
    payload = data.encode("utf-8") if isinstance(data, str) else data
    file_mode = mode or default_mode
    if not 0 < file_mode <= MAX_MODE:
        raise AssetRenderError(f"invalid file mode {file_mode!r} for {dest!r}")

    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.chmod(tmp_name, file_mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote %s (%d bytes, mode %04o)", target, len(payload), file_mode)
    return target
