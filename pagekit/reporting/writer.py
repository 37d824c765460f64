# pagekit/reporting/writer.py
"""
Writers to persist an AuditReport as JSON and CSV.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Tuple

from .schemas import AuditReport


def write_report(report: AuditReport, out_dir: Path) -> Tuple[Path, Path]:
    """
    Write an AuditReport into out_dir as JSON and CSV.
    Returns (json_path, csv_path).
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / f"audit-{report.page}.json"
    csv_path = out_dir / f"audit-{report.page}.csv"

    json_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    # CSV: one row per locator
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["page", "path", "selector", "matches", "found", "visible", "enabled"])
        for item in report.items:
            writer.writerow(
                [
                    report.page,
                    item.path,
                    item.selector,
                    item.matches,
                    "OK" if item.found else "MISSING",
                    "yes" if item.visible else "no",
                    "" if item.enabled is None else ("yes" if item.enabled else "no"),
                ]
            )

    return json_path, csv_path
