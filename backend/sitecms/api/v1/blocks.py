# sitecms/api/v1/blocks.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.application.cms.create_block import create_block as create_block_use_case
from sitecms.application.cms.delete_block import delete_block as delete_block_use_case
from sitecms.application.cms.queries import get_block, get_block_types
from sitecms.application.cms.reorder_blocks import reorder_blocks as reorder_blocks_use_case
from sitecms.application.cms.update_block import (
    update_block as update_block_use_case,
    update_block_data,
)
from sitecms.normalizers.block import normalize_block
from sitecms.utils.decorators import site_required, roles_required
from sitecms.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


@v1_bp.route("/block-types", methods=["GET"])
@jwt_required()
@site_required
def block_types():
    return jsonify({"items": get_block_types()})


@v1_bp.route("/pages/<page_id>/blocks", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def create_block(page_id):
    data = request.get_json(silent=True) or {}
    block = create_block_use_case(site_id=g.current_site.id, page_id=page_id, data=data)

    return jsonify(normalize_block(block, admin=True)), 201


@v1_bp.route("/blocks/<block_id>", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def update_block(block_id):
    block = get_block(site_id=g.current_site.id, block_id=block_id)
    enforce_optimistic_lock(block)

    data = request.get_json(silent=True) or {}
    block = update_block_use_case(site_id=g.current_site.id, block_id=block_id, data=data)

    return jsonify(normalize_block(block, admin=True)), 200


@v1_bp.route("/blocks/<block_id>/data", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def replace_block_data(block_id):
    block = get_block(site_id=g.current_site.id, block_id=block_id)
    enforce_optimistic_lock(block)

    data = request.get_json(silent=True)
    block = update_block_data(site_id=g.current_site.id, block_id=block_id, data=data)

    return jsonify(normalize_block(block, admin=True)), 200


@v1_bp.route("/blocks/<block_id>", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("editor")
def delete_block(block_id):
    delete_block_use_case(site_id=g.current_site.id, block_id=block_id)
    return jsonify({"message": "Block deleted"}), 200


@v1_bp.route("/blocks/reorder", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def reorder_blocks():
    data = request.get_json(silent=True) or {}
    result = reorder_blocks_use_case(site_id=g.current_site.id, items=data.get("items"))

    return jsonify(result.to_dict()), 200
