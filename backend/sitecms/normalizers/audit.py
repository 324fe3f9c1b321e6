# sitecms/normalizers/audit.py
from __future__ import annotations

from typing import Any, Dict

from sitecms.models.audit_log import AuditLog


def normalize_audit_log(log: AuditLog) -> Dict[str, Any]:
    """Audit entry as JSON. `entity_id` is "*" for site-wide actions such as reorders."""
    return {
        "id": log.id,
        "site_id": log.site_id,
        "actor_id": log.actor_id,
        "action": log.action,
        "entity_type": log.entity_type,
        "entity_id": log.entity_id,
        "payload": log.payload or {},
        "created_at": log.created_at.isoformat() if log.created_at else None,
    }
