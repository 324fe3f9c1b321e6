from flask import request, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
)
from sitecms.auth.context import load_user_context
from sitecms.models.site import Site
from sitecms.models.user import User
from . import v1_bp


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    user = User.query.filter_by(email=email.strip().lower()).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "User account disabled"}), 403

    # Memberships are resolved per request, the token only names the user.
    access_token = create_access_token(identity=user.id)
    refresh_token = create_refresh_token(identity=user.id)

    return jsonify({
        "access_token": access_token,
        "refresh_token": refresh_token
    }), 200


@v1_bp.route("/auth/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    # Fails with SessionTerminated for disabled accounts.
    load_user_context(user_id=user_id, jti=get_jwt()["jti"])
    return jsonify({"access_token": create_access_token(identity=user_id)}), 200


@v1_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    context = load_user_context(user_id=get_jwt_identity(), jti=get_jwt()["jti"])

    sites = {
        site.id: site
        for site in Site.query.filter(Site.id.in_(list(context.memberships))).all()
    }

    return jsonify({
        "id": context.user.id,
        "email": context.user.email,
        "full_name": context.user.full_name,
        "memberships": [
            {
                "site_id": site_id,
                "site_slug": sites[site_id].slug,
                "site_name": sites[site_id].name,
                "role": role,
            }
            for site_id, role in context.memberships.items()
            if site_id in sites
        ],
    }), 200
