from flask import request, jsonify, g
from flask_jwt_extended import jwt_required
from sitecms.utils.decorators import site_required, roles_required
from sitecms.utils.pagination import apply_cursor, paginate_cursor
from sitecms.models.audit_log import AuditLog
from sitecms.normalizers.audit import normalize_audit_log
from sitecms.normalizers.pagination import normalize_pagination
from sitecms.domain.exceptions import ValidationError
from . import v1_bp


@v1_bp.route("/audit", methods=["GET"])
@jwt_required()
@site_required
@roles_required("admin")
def list_audit_logs():
    site = g.current_site

    # Cursor Pagination
    try:
        limit = min(int(request.args.get("limit", 20)), 100)
    except ValueError as exc:
        raise ValidationError("limit must be an integer") from exc

    query = AuditLog.query.filter(
        AuditLog.site_id == site.id
    )

    # Optional filters
    if action := request.args.get("action"):
        query = query.filter(AuditLog.action == action)

    if entity_type := request.args.get("entity_type"):
        query = query.filter(AuditLog.entity_type == entity_type)

    if entity_id := request.args.get("entity_id"):
        query = query.filter(AuditLog.entity_id == entity_id)

    query = apply_cursor(query, model=AuditLog, cursor=request.args.get("cursor"))
    logs, meta = paginate_cursor(query, model=AuditLog, limit=limit)

    return jsonify(normalize_pagination(logs, normalize_audit_log, cursor=meta)), 200
