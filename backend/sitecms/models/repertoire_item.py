from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin
from .soft_delete_mixin import SoftDeleteMixin

class RepertoireItem(BaseModel, SiteMixin, SoftDeleteMixin):
    __tablename__ = "repertoire_items"

    program_title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=True)
    subtitle = db.Column(db.String(300), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    year = db.Column(db.String(20), nullable=True)
    venue = db.Column(db.String(200), nullable=True)
    display_order = db.Column(db.Integer, nullable=True)

    image_path = db.Column(db.String(512), nullable=True)
    gallery_paths = db.Column(db.JSON, nullable=False, default=list)
