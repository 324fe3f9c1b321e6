from flask import g, has_app_context
from sitecms.extensions import db
from sitecms.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    site_id: Optional[str] = None
):
    if not has_app_context():
        return

    site = getattr(g, "current_site", None)
    site_id = site_id or (site.id if site is not None else None)
    if site_id is None:
        return  # Skip logging if site context is missing

    user = getattr(g, "current_user", None)

    log = AuditLog()
    log.actor_id = user.id if user is not None else None
    log.site_id = site_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id) if entity_id is not None else "*"
    log.payload = payload or {}

    db.session.add(log)
