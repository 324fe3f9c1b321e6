from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin

class MediaAsset(BaseModel, SiteMixin):
    __tablename__ = "media_assets"

    bucket = db.Column(db.String(100), nullable=False)
    # Storage key; treated as the natural key within a bucket.
    path = db.Column(db.String(512), nullable=False)
    alt = db.Column(db.String(500), nullable=False, default="")
    # "metadata" is reserved on declarative models.
    meta = db.Column("metadata", db.JSON, nullable=False, default=dict)

    __table_args__ = (
        db.Index("ix_media_asset_bucket_path", "bucket", "path"),
        db.Index("ix_media_asset_site_path", "site_id", "path"),
    )
