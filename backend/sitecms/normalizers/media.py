from sitecms.storage.registry import get_storage


def normalize_media_asset(asset):
    return {
        "id": asset.id,
        "bucket": asset.bucket,
        "path": asset.path,
        "url": get_storage().public_url(asset.path),
        "alt": asset.alt,
        "metadata": asset.meta or {},
        "created_at": asset.created_at.isoformat() if asset.created_at else None,
    }
