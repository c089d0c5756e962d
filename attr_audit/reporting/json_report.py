from __future__ import annotations

import json
from pathlib import Path

from attr_audit.core.metadata import AuditResult


def write_json_report(result: AuditResult, path: str | Path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
    return output_path


def append_history(result: AuditResult, path: str | Path) -> Path:
    """Appends a one-line summary so coverage can be tracked across CI runs."""

    history_path = Path(path)
    history_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "timestamp": result.timestamp,
        "page_url": result.page_url,
        "attribute_name": result.attribute_name,
        "total_elements_scanned": result.total_elements_scanned,
        "missing_attribute_count": result.missing_attribute_count,
        "coverage": round(result.coverage_percentage, 2),
    }
    with history_path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(payload) + "\n")
    return history_path
