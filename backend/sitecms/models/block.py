from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin

class Block(BaseModel, SiteMixin):
    __tablename__ = "blocks"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False
    )
    type = db.Column(db.String(100), nullable=False)  # hero, collection-list, text, image
    # Render sequence ascending; not unique, ties fall back to insertion order.
    order = db.Column(db.Integer, nullable=False, default=0)
    data = db.Column(db.JSON, nullable=False, default=dict)

    # Relationship to parent Page
    page = db.relationship("Page", back_populates="blocks")

    __table_args__ = (
        db.Index("idx_block_page_order", "page_id", "order"),
    )
