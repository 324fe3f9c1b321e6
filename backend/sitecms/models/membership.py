from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin

# Ordered from least to most privileged.
MEMBERSHIP_ROLES = ("viewer", "editor", "admin", "owner")

class SiteMembership(BaseModel, SiteMixin):
    __tablename__ = "site_memberships"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default="editor")

    user = db.relationship("User", back_populates="memberships")
    site = db.relationship("Site", back_populates="memberships")

    __table_args__ = (
        db.UniqueConstraint("user_id", "site_id", name="uq_membership_user_site"),
    )
