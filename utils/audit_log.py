from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_mutation(
    *,
    action: str,
    company_id: Optional[int],
    status: str = "ok",
    duration_ms: Optional[int] = None,
    error: Optional[str] = None,
    company: Optional[Dict[str, Any]] = None,
) -> None:
    """Append one JSON line describing a create/update/delete attempt.

    Only active when AUDIT_TRACE is on; see config/settings.py.
    """
    from config.settings import get_settings

    settings = get_settings()
    if not settings.audit_trace:
        return

    log_path = Path(settings.audit_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "company_id": company_id,
        "status": status,
        "duration_ms": duration_ms,
        "error": error,
        "api_url": settings.api_url,
    }
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id
    if company:
        payload["company"] = company

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break the app on logging failures
        return
