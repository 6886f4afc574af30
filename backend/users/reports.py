from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from ..stalls.data_store import get_stall

logger = logging.getLogger(__name__)

_reports: list[dict[str, Any]] = []


def add_report(
    user_id: str,
    report_type: str,
    description: str,
    stall_id: str | None = None,
) -> dict[str, Any]:
    report = {
        "id": uuid.uuid4().hex[:12],
        "user_id": user_id,
        "stall_id": stall_id or None,
        "type": report_type,
        "description": description,
        "status": "pending",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    _reports.append(report)
    logger.info("Report %s (%s) filed by %s", report["id"], report_type, user_id)
    return report


def get_reports_for_user(user_id: str) -> list[dict[str, Any]]:
    """A user's reports, newest first, each with the reported stall's name if known."""
    reports = []
    for report in reversed(_reports):
        if report["user_id"] != user_id:
            continue
        stall = get_stall(report["stall_id"]) if report["stall_id"] else None
        reports.append({**report, "stall_name": stall["name"] if stall else None})
    return reports


def clear_reports() -> None:
    _reports.clear()
