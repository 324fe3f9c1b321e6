from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin
from .soft_delete_mixin import SoftDeleteMixin

class GalleryImage(BaseModel, SiteMixin, SoftDeleteMixin):
    __tablename__ = "gallery_images"

    category = db.Column(db.String(100), nullable=False, index=True)
    image_path = db.Column(db.String(512), nullable=True)
    alt_text = db.Column(db.String(500), nullable=True)
    display_order = db.Column(db.Integer, nullable=True)
