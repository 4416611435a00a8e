"""JSON export of a fan-out result.

Why JSON:
- Interoperability with other tools and pipelines.
- Keeps the outcome of a run without depending on the HTML rendering.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import OrchestrationResult


def export_result_json(*, result: OrchestrationResult, output_path: Path) -> Path:
    """Export `OrchestrationResult` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
