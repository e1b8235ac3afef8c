"""JSON export of service payloads.

Why JSON:
- Exported workspaces can be versioned, diffed, or re-imported with
  `create_workspace`.
- Uses the wire encoding, so the file is exactly what the service would accept.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.codec import to_json_data
from core.interfaces.codec import JSONEncodable


def export_model_json(*, model: JSONEncodable, output_path: Path) -> Path:
    """Write `model` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = to_json_data(model)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
