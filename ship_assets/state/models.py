"""Render report models.

Serialised shape::

    {
      "run_id": "YYYYMMDDHHMMSS",
      "assets_file": "ship.yaml",
      "install_root": "/abs/installer",
      "results": [
        {
          "index": 0,
          "kind": "amazon_elastic_kubernetes_service",
          "dest": "terraform/eks.tf",
          "description": "cluster",
          "status": "RENDERED|SKIPPED|FAILED",
          "error": ""
        }
      ]
    }
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


def _run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")


class RenderStatus(str, Enum):
    """Outcome of rendering one asset."""

    RENDERED = "RENDERED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class AssetResult(BaseModel):
    """Outcome of one entry of the asset list.

    Attributes:
        index: Position in the ``v1`` list.
        kind: Asset kind key, or ``None`` for an empty record.
        dest: Destination path as given.
        description: Asset description as given.
        status: RENDERED, SKIPPED, or FAILED.
        error: Failure message.  Empty unless status is FAILED.
    """

    index: int
    kind: Optional[str] = None
    dest: str = ""
    description: str = ""
    status: RenderStatus
    error: str = ""


class RenderReport(BaseModel):
    """Everything that happened in one render run."""

    run_id: str = Field(default_factory=_run_id)
    assets_file: str = ""
    install_root: str = ""
    results: List[AssetResult] = Field(default_factory=list)

    # -- convenience helpers ------------------------------------------------

    @property
    def passed(self) -> bool:
        """True when **no** asset failed."""
        return not any(r.status == RenderStatus.FAILED for r in self.results)

    @property
    def failed_results(self) -> List[AssetResult]:
        return [r for r in self.results if r.status == RenderStatus.FAILED]

    def counts(self) -> Dict[str, int]:
        """Number of results per status, every status present."""
        out = {status.value: 0 for status in RenderStatus}
        for result in self.results:
            out[result.status.value] += 1
        return out

    def to_sorted_json(self, indent: int = 2) -> str:
        """Serialise with sorted keys for deterministic output."""
        return json.dumps(
            self.model_dump(mode="json"),
            indent=indent,
            sort_keys=True,
        )
