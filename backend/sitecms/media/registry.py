# sitecms/media/registry.py
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import current_app

from sitecms.extensions import db
from sitecms.models.media_asset import MediaAsset


def _bucket(bucket: Optional[str] = None) -> str:
    return bucket or current_app.config["STORAGE_BUCKET"]


def find_by_path(
    path: str,
    *,
    site_id: Optional[str] = None,
    bucket: Optional[str] = None,
) -> Optional[MediaAsset]:
    query = MediaAsset.query.filter_by(bucket=_bucket(bucket), path=path)
    if site_id is not None:
        query = query.filter_by(site_id=site_id)
    return query.order_by(MediaAsset.created_at.desc()).first()


def register(
    *,
    site_id: str,
    path: str,
    alt: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    bucket: Optional[str] = None,
) -> str:
    """
    Record that `path` belongs to `site_id`. Re-registering a path that is
    overwritten in place (main images) refreshes the existing row.

    Does not commit; callers own the transaction.
    """
    asset = find_by_path(path, site_id=site_id, bucket=bucket)
    if asset is None:
        asset = MediaAsset()
        asset.site_id = site_id
        asset.bucket = _bucket(bucket)
        asset.path = path
        db.session.add(asset)

    asset.alt = alt or ""
    asset.meta = dict(metadata or {})
    db.session.flush()

    return asset.id


def delete_by_path(
    path: str,
    *,
    site_id: Optional[str] = None,
    bucket: Optional[str] = None,
) -> int:
    query = MediaAsset.query.filter_by(bucket=_bucket(bucket), path=path)
    if site_id is not None:
        query = query.filter_by(site_id=site_id)
    return query.delete(synchronize_session=False)


def delete_by_prefix(*, site_id: str, prefix: str, bucket: Optional[str] = None) -> int:
    """Purge every asset of `site_id` stored under the folder `prefix`."""
    folder = prefix.rstrip("/") + "/"
    return (
        MediaAsset.query
        .filter(
            MediaAsset.site_id == site_id,
            MediaAsset.bucket == _bucket(bucket),
            MediaAsset.path.startswith(folder, autoescape=True),
        )
        .delete(synchronize_session=False)
    )
