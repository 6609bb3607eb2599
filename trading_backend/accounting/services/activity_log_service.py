# PATH: accounting/services/activity_log_service.py

"""
ACTIVITY LOG SERVICE

Best-effort audit trail.

RULES:
- log_activity never raises: a failed write is logged and discarded
- Called after the primary operation has committed (transaction.on_commit),
  so a rolled-back operation leaves no audit row
"""

from __future__ import annotations

import logging
from typing import List, Optional

from django.conf import settings
from django.db import transaction

from accounting.models.activity import ActivityLog

logger = logging.getLogger("activity")

SYSTEM_ACTOR = "System"


def actor_name(user) -> str:
    if user is None or not getattr(user, "is_authenticated", False):
        return SYSTEM_ACTOR
    return (user.get_username() or SYSTEM_ACTOR)[:150]


def _write(
    *,
    action: str,
    entity: str,
    entity_id,
    description: str,
    performed_by: str,
    metadata: Optional[dict],
) -> Optional[ActivityLog]:
    try:
        return ActivityLog.objects.create(
            action=action,
            entity=entity,
            entity_id=str(entity_id or ""),
            description=(description or "")[:255],
            performed_by=performed_by or SYSTEM_ACTOR,
            metadata=metadata or {},
        )
    except Exception:
        logger.exception(
            "Activity log write failed",
            extra={"action": action, "entity": entity, "entity_id": str(entity_id)},
        )
        return None


def log_activity(
    *,
    action: str,
    entity: str,
    entity_id=None,
    description: str = "",
    user=None,
    metadata: Optional[dict] = None,
) -> None:
    if not getattr(settings, "ACTIVITY_LOG_ENABLED", True):
        return

    kwargs = {
        "action": action,
        "entity": entity,
        "entity_id": entity_id,
        "description": description,
        "performed_by": actor_name(user),
        "metadata": metadata,
    }

    try:
        transaction.on_commit(lambda: _write(**kwargs))
    except Exception:
        logger.exception(
            "Activity log scheduling failed",
            extra={"action": action, "entity": entity, "entity_id": str(entity_id)},
        )


def recent_activity(limit: Optional[int] = None) -> List[ActivityLog]:
    if limit is None:
        limit = int(getattr(settings, "DASHBOARD_RECENT_LOG_LIMIT", 10))
    return list(ActivityLog.objects.order_by("-created_at", "-id")[: max(limit, 0)])
