from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin
from .soft_delete_mixin import SoftDeleteMixin

PROGRAM_STATUSES = ("available", "sold-out", "info")

class ProgramEvent(BaseModel, SiteMixin, SoftDeleteMixin):
    __tablename__ = "program_events"

    slug = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    subtitle = db.Column(db.String(300), nullable=True)
    author = db.Column(db.String(200), nullable=True)
    event_date = db.Column(db.Date, nullable=True, index=True)
    day_name = db.Column(db.String(20), nullable=True)
    month = db.Column(db.String(20), nullable=True)
    time = db.Column(db.String(20), nullable=True)
    venue = db.Column(db.String(200), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="available")
    price = db.Column(db.String(50), nullable=True)
    description = db.Column(db.Text, nullable=True)
    published = db.Column(db.Boolean, nullable=False, default=True)
    display_order = db.Column(db.Integer, nullable=True)

    image_path = db.Column(db.String(512), nullable=True)
    gallery_paths = db.Column(db.JSON, nullable=False, default=list)

    __table_args__ = (
        db.UniqueConstraint("site_id", "slug", name="uq_program_event_slug_per_site"),
    )
