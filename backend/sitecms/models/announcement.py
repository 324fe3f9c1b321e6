from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin
from .soft_delete_mixin import SoftDeleteMixin

class Announcement(BaseModel, SiteMixin, SoftDeleteMixin):
    __tablename__ = "announcements"

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    date = db.Column(db.Date, nullable=True, index=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    published = db.Column(db.Boolean, nullable=False, default=True)
    show_on_homepage = db.Column(db.Boolean, nullable=False, default=False, index=True)
