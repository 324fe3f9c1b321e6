from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin

class Page(BaseModel, SiteMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    show_in_nav = db.Column(db.Boolean, nullable=False, default=False)
    nav_label = db.Column(db.String(200), nullable=True)
    nav_order = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("site_id", "slug", name="uq_page_slug_per_site"),
    )

    # Relationship to Blocks (render order, cascade deletes)
    blocks = db.relationship(
        "Block",
        back_populates="page",
        order_by="(Block.order, Block.created_at, Block.id)",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
