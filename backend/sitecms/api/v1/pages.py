# sitecms/api/v1/pages.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.application.cms.create_page import create_page as create_page_use_case
from sitecms.application.cms.delete_page import delete_page as delete_page_use_case
from sitecms.application.cms.queries import (
    get_navigation,
    get_page,
    get_page_with_blocks,
    list_pages as list_pages_query,
)
from sitecms.application.cms.render_page import render_page as render_page_use_case
from sitecms.application.cms.reorder_pages import reorder_pages as reorder_pages_use_case
from sitecms.application.cms.update_page import (
    update_page as update_page_use_case,
    update_page_navigation,
)
from sitecms.normalizers.page import normalize_page, normalize_rendered_page
from sitecms.utils.decorators import site_required, roles_required
from sitecms.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["GET"])
@jwt_required()
@site_required
def list_pages():
    pages = list_pages_query(site_id=g.current_site.id)
    return jsonify({"items": [normalize_page(page, admin=True) for page in pages]})


@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def create_page():
    data = request.get_json(silent=True) or {}
    page = create_page_use_case(site_id=g.current_site.id, data=data)

    return jsonify(normalize_page(page, admin=True)), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@site_required
def get_page_detail(page_id):
    page, blocks = get_page_with_blocks(site_id=g.current_site.id, page_id=page_id)
    return jsonify(normalize_page(page, admin=True, blocks=blocks))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def update_page(page_id):
    page = get_page(site_id=g.current_site.id, page_id=page_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    data = request.get_json(silent=True) or {}
    page = update_page_use_case(site_id=g.current_site.id, page_id=page_id, data=data)

    return jsonify(normalize_page(page, admin=True)), 200


@v1_bp.route("/pages/<page_id>/navigation", methods=["PATCH"])
@jwt_required()
@site_required
@roles_required("editor")
def update_navigation(page_id):
    data = request.get_json(silent=True) or {}
    page = update_page_navigation(site_id=g.current_site.id, page_id=page_id, data=data)

    return jsonify(normalize_page(page, admin=True)), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("editor")
def delete_page(page_id):
    delete_page_use_case(site_id=g.current_site.id, page_id=page_id)
    return jsonify({"message": "Page deleted"}), 200


@v1_bp.route("/pages/reorder", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def reorder_pages():
    data = request.get_json(silent=True) or {}
    result = reorder_pages_use_case(site_id=g.current_site.id, items=data.get("items"))

    return jsonify(result.to_dict()), 200


@v1_bp.route("/navigation", methods=["GET"])
@jwt_required()
@site_required
def navigation():
    return jsonify({"items": get_navigation(site_id=g.current_site.id)})


# ------------------------
# Rendering
# ------------------------

@v1_bp.route("/pages/<page_id>/render", methods=["GET"])
@jwt_required()
@site_required
def render_page(page_id):
    rendered = render_page_use_case(site_id=g.current_site.id, page_id=page_id)
    return jsonify(normalize_rendered_page(rendered))


@v1_bp.route("/render/<slug>", methods=["GET"])
@jwt_required()
@site_required
def render_page_by_slug(slug):
    rendered = render_page_use_case(site_id=g.current_site.id, slug=slug, public_only=True)
    return jsonify(normalize_rendered_page(rendered))
