from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.domain.exceptions import NotFound, ValidationError
from sitecms.media import registry
from sitecms.normalizers.media import normalize_media_asset
from sitecms.storage.registry import get_storage
from sitecms.utils.decorators import site_required
from . import v1_bp


@v1_bp.route("/media", methods=["GET"])
@jwt_required()
@site_required
def find_media_asset():
    path = request.args.get("path")
    if not path:
        raise ValidationError("Query parameter 'path' is required")

    asset = registry.find_by_path(path, site_id=g.current_site.id)
    if asset is None:
        raise NotFound("Media asset not found")

    return jsonify(normalize_media_asset(asset))


@v1_bp.route("/media/url", methods=["GET"])
@jwt_required()
@site_required
def media_public_url():
    path = request.args.get("path")
    if not path:
        raise ValidationError("Query parameter 'path' is required")

    return jsonify({"path": path, "url": get_storage().public_url(path)})
