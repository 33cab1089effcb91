"""Audit logging utilities.

Booking lifecycle events are written as JSON records on the
``clinicslots.audit`` logger.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..core.utils.datetime_utils import get_current_timestamp


logger = logging.getLogger("clinicslots.audit")


async def audit_log_event(
    *,
    event: str,
    reservation_id: Optional[str] = None,
    schedule_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    record = {
        "ts": get_current_timestamp().isoformat(),
        "event": event,
        "reservation_id": reservation_id,
        "schedule_id": schedule_id,
        "patient_id": patient_id,
        "payload": payload or {},
    }
    logger.info("AUDIT %s", json.dumps(record, ensure_ascii=False, default=str))
