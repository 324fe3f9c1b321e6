from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity

from sitecms.auth.context import load_user_context, role_at_least
from sitecms.domain.exceptions import ValidationError


def site_required(fn):
    """
    Resolve the caller's memberships and check them against the site from
    X-Site-ID. Must run after @jwt_required().
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        site = g.current_site
        if not site:
            raise ValidationError("Site context missing")

        context = load_user_context(user_id=get_jwt_identity(), jti=get_jwt()["jti"])

        g.current_user = context.user
        g.user_context = context
        g.current_role = context.require_site(site.id)

        return fn(*args, **kwargs)
    return wrapper

def roles_required(minimum_role):
    """Allow the wrapped view to members holding `minimum_role` or higher."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not role_at_least(getattr(g, "current_role", None), minimum_role):
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
