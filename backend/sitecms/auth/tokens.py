# sitecms/auth/tokens.py
from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from sitecms.extensions import db
from sitecms.models.revoked_token import RevokedToken


def is_token_revoked(jti: str) -> bool:
    return RevokedToken.query.filter_by(jti=jti).first() is not None


def revoke_token(*, jti: str, user_id: str | None, reason: str) -> bool:
    """
    Blocklist a token id. Returns False when the blocklist write itself
    fails; the caller still ends the session for this request.
    """
    if is_token_revoked(jti):
        return True

    entry = RevokedToken()
    entry.jti = jti
    entry.user_id = user_id
    entry.reason = reason

    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error("Could not revoke token %s: %s", jti, exc)
        return False

    current_app.logger.info("Revoked token %s for user %s (%s)", jti, user_id, reason)
    return True


def register_jwt_callbacks(jwt):
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return is_token_revoked(jwt_payload["jti"])

    @jwt.revoked_token_loader
    def revoked_token_response(jwt_header, jwt_payload):
        return jsonify({
            "error": "SessionTerminated",
            "message": "Session has been terminated, sign in again",
        }), 401

    @jwt.expired_token_loader
    def expired_token_response(jwt_header, jwt_payload):
        return jsonify({
            "error": "TokenExpired",
            "message": "Token has expired",
        }), 401

    @jwt.unauthorized_loader
    def missing_token_response(reason):
        return jsonify({
            "error": "Unauthorized",
            "message": reason,
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_response(reason):
        return jsonify({
            "error": "InvalidToken",
            "message": reason,
        }), 401
