# sitecms/normalizers/collection.py
from datetime import date, datetime
from typing import Any, Dict

from sqlalchemy import inspect

from sitecms.application.collections.specs import COLLECTIONS
from sitecms.storage.registry import get_storage


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def normalize_item(item) -> Dict[str, Any]:
    """
    Column-driven serialisation of any collection item, plus public URLs
    for its image paths.
    """
    data = {
        attr.key: _serialize(getattr(item, attr.key))
        for attr in inspect(item).mapper.column_attrs
    }

    spec = next((spec for spec in COLLECTIONS.values() if isinstance(item, spec.model)), None)
    if spec is not None and spec.has_images:
        storage = get_storage()
        main = getattr(item, spec.main_image_field)
        data["image_url"] = storage.public_url(main) if main else None
        if spec.gallery_field:
            data["image_urls"] = [
                storage.public_url(path) for path in getattr(item, spec.gallery_field) or []
            ]

    return data
