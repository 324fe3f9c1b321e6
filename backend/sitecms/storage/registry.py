from flask import current_app

from .local import LocalStorage
from .s3 import S3Storage

EXTENSION_KEY = "sitecms.storage"


def build_storage(config):
    provider = str(config.get("STORAGE_PROVIDER") or "local").strip().lower()
    bucket = config.get("STORAGE_BUCKET")

    if provider == "s3":
        return S3Storage(
            bucket=bucket,
            region=config.get("STORAGE_S3_REGION"),
            public_base_url=config.get("STORAGE_PUBLIC_BASE_URL"),
            timeout_seconds=config.get("STORAGE_TIMEOUT_SECONDS", 30),
        )

    if provider == "local":
        return LocalStorage(
            base_path=config.get("STORAGE_LOCAL_PATH"),
            bucket=bucket,
            public_base_url=config.get("STORAGE_PUBLIC_BASE_URL") or "/media",
        )

    raise RuntimeError(f"Unknown storage provider: {provider}")


def init_storage(app, storage=None):
    app.extensions[EXTENSION_KEY] = storage or build_storage(app.config)
    app.logger.info(
        "Storage provider: %s (bucket=%s)",
        app.extensions[EXTENSION_KEY].provider_type,
        app.config.get("STORAGE_BUCKET"),
    )


def get_storage():
    return current_app.extensions[EXTENSION_KEY]
