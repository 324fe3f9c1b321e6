# sitecms/api/v1/collections.py
import json

from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from sitecms.application.collections import images as item_images
from sitecms.application.collections.specs import COLLECTIONS
from sitecms.application.collections.store import CollectionStore
from sitecms.domain.exceptions import ValidationError
from sitecms.domain.filters import parse_collection_filter
from sitecms.domain.images import ExistingImage, PendingImage
from sitecms.normalizers.collection import normalize_item
from sitecms.normalizers.pagination import normalize_pagination
from sitecms.utils.decorators import site_required, roles_required
from . import v1_bp


TRUE_VALUES = {"1", "true", "yes", "on"}


def _flag(name):
    return str(request.args.get(name, "")).strip().lower() in TRUE_VALUES


def _pending(file_storage, alt=None):
    if file_storage is None or not file_storage.filename:
        raise ValidationError("Uploaded file is missing")
    return PendingImage(
        data=file_storage.read(),
        filename=file_storage.filename,
        content_type=file_storage.mimetype,
        alt=alt,
    )


def _image_slots():
    """
    Parse the multipart image list: form field `order` holds a JSON list
    whose entries are either {"path": ...} (already stored) or
    {"file": <form field name>} (new upload).
    """
    try:
        order = json.loads(request.form.get("order") or "[]")
    except ValueError as exc:
        raise ValidationError("Field 'order' must be a JSON list") from exc

    if not isinstance(order, list):
        raise ValidationError("Field 'order' must be a JSON list")

    slots = []
    for entry in order:
        if isinstance(entry, dict) and entry.get("path"):
            slots.append(ExistingImage(path=entry["path"]))
        elif isinstance(entry, dict) and entry.get("file"):
            slots.append(_pending(request.files.get(entry["file"]), alt=entry.get("alt")))
        else:
            raise ValidationError("Each image entry needs 'path' or 'file'")
    return slots


# ------------------------
# Listing
# ------------------------

@v1_bp.route("/collections", methods=["GET"])
@jwt_required()
@site_required
def list_collections():
    site_id = g.current_site.id
    return jsonify({
        "items": [
            {
                "name": spec.name,
                "has_images": spec.has_images,
                "has_gallery": spec.gallery_field is not None,
                "featured": spec.featured_field is not None,
                "ordered": spec.order_field is not None,
                "count": CollectionStore(spec).count(site_id),
            }
            for spec in COLLECTIONS.values()
        ]
    })


@v1_bp.route("/collections/<name>/items", methods=["GET"])
@jwt_required()
@site_required
def list_items(name):
    store = CollectionStore(name)
    site_id = g.current_site.id
    include_deleted = _flag("includeDeleted")

    filters = parse_collection_filter(request.args.to_dict())
    items = store.list(site_id, filters, include_deleted=include_deleted)

    return jsonify(normalize_pagination(
        items,
        normalize_item,
        limit=filters.limit,
        offset=filters.offset,
        total=store.count(site_id, filters, include_deleted=include_deleted),
    ))


@v1_bp.route("/collections/<name>/facets/<field>", methods=["GET"])
@jwt_required()
@site_required
def list_facet_values(name, field):
    store = CollectionStore(name)
    return jsonify({"items": store.distinct_values(g.current_site.id, field)})


# ------------------------
# Item CRUD
# ------------------------

@v1_bp.route("/collections/<name>/items", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def create_item(name):
    data = request.get_json(silent=True) or {}
    item = CollectionStore(name).create(g.current_site.id, data)
    return jsonify(normalize_item(item)), 201


@v1_bp.route("/collections/<name>/items/<item_id>", methods=["GET"])
@jwt_required()
@site_required
def get_item(name, item_id):
    item = CollectionStore(name).get(item_id, g.current_site.id)
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>", methods=["PATCH"])
@jwt_required()
@site_required
@roles_required("editor")
def update_item(name, item_id):
    data = request.get_json(silent=True) or {}
    item = CollectionStore(name).update(item_id, data, g.current_site.id)
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/featured", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def set_item_featured(name, item_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data.get("featured"), bool):
        raise ValidationError("Field 'featured' must be a boolean")

    item = CollectionStore(name).set_featured(item_id, data["featured"], g.current_site.id)
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("editor")
def archive_item(name, item_id):
    item = CollectionStore(name).soft_delete(item_id, g.current_site.id)
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/restore", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def restore_item(name, item_id):
    item = CollectionStore(name).restore(item_id, g.current_site.id)
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/permanent", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("admin")
def purge_item(name, item_id):
    CollectionStore(name).permanent_delete(item_id, g.current_site.id)
    return jsonify({"message": "Item permanently deleted"}), 200


@v1_bp.route("/collections/<name>/reorder", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def reorder_items(name):
    data = request.get_json(silent=True) or {}
    result = CollectionStore(name).reorder(g.current_site.id, data.get("items"))
    return jsonify(result.to_dict()), 200


# ------------------------
# Images
# ------------------------

@v1_bp.route("/collections/<name>/items/<item_id>/images", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def save_images(name, item_id):
    item = item_images.save_item_images(
        CollectionStore(name),
        site_id=g.current_site.id,
        item_id=item_id,
        slots=_image_slots(),
    )
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/main-image", methods=["PUT"])
@jwt_required()
@site_required
@roles_required("editor")
def replace_main_image(name, item_id):
    item = item_images.set_main_image(
        CollectionStore(name),
        site_id=g.current_site.id,
        item_id=item_id,
        upload=_pending(request.files.get("file"), alt=request.form.get("alt")),
    )
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/main-image", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("editor")
def clear_main_image(name, item_id):
    item = item_images.clear_main_image(
        CollectionStore(name), site_id=g.current_site.id, item_id=item_id
    )
    return jsonify(normalize_item(item))


@v1_bp.route("/collections/<name>/items/<item_id>/gallery", methods=["POST"])
@jwt_required()
@site_required
@roles_required("editor")
def append_gallery_image(name, item_id):
    item = item_images.add_gallery_image(
        CollectionStore(name),
        site_id=g.current_site.id,
        item_id=item_id,
        upload=_pending(request.files.get("file"), alt=request.form.get("alt")),
    )
    return jsonify(normalize_item(item)), 201


@v1_bp.route("/collections/<name>/items/<item_id>/images", methods=["DELETE"])
@jwt_required()
@site_required
@roles_required("editor")
def delete_image(name, item_id):
    data = request.get_json(silent=True) or {}
    path = data.get("path") or request.args.get("path")
    if not path:
        raise ValidationError("Image path is required")

    item = item_images.remove_image(
        CollectionStore(name), site_id=g.current_site.id, item_id=item_id, path=path
    )
    return jsonify(normalize_item(item))
