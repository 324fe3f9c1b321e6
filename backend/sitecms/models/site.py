from sitecms.extensions import db
from .base import BaseModel

class Site(BaseModel):
    __tablename__ = "sites"

    # Tenant root; the slug namespaces every storage path of the site.
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    domain = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    memberships = db.relationship(
        "SiteMembership",
        back_populates="site",
        cascade="all, delete-orphan"
    )
