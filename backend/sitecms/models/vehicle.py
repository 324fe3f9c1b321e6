from sitecms.extensions import db
from .base import BaseModel
from .site_mixin import SiteMixin
from .soft_delete_mixin import SoftDeleteMixin

class Vehicle(BaseModel, SiteMixin, SoftDeleteMixin):
    __tablename__ = "vehicles"

    brand = db.Column(db.String(100), nullable=False, index=True)
    model = db.Column(db.String(100), nullable=False)
    year = db.Column(db.Integer, nullable=True, index=True)
    month = db.Column(db.Integer, nullable=True)
    price = db.Column(db.Integer, nullable=True, index=True)
    price_without_vat = db.Column(db.Integer, nullable=True)
    vat_deductible = db.Column(db.Boolean, default=False)
    mileage = db.Column(db.Integer, nullable=True)
    fuel = db.Column(db.String(50), nullable=True, index=True)
    transmission = db.Column(db.String(50), nullable=True, index=True)
    body_type = db.Column(db.String(50), nullable=True, index=True)
    drivetrain = db.Column(db.String(50), nullable=True)
    engine = db.Column(db.String(100), nullable=True)
    power = db.Column(db.String(50), nullable=True)
    color = db.Column(db.String(50), nullable=True)
    doors = db.Column(db.String(10), nullable=True)
    vin = db.Column(db.String(50), nullable=True)
    description = db.Column(db.Text, nullable=True)
    features = db.Column(db.JSON, nullable=False, default=list)
    source = db.Column(db.String(20), nullable=True)  # xml | admin
    reserved = db.Column(db.Boolean, default=False)
    reserved_until = db.Column(db.Date, nullable=True)

    show_on_homepage = db.Column(db.Boolean, nullable=False, default=False, index=True)

    # Slot 0 of the editable image list lives in `image`, the rest in `images`.
    image = db.Column(db.String(512), nullable=True)
    images = db.Column(db.JSON, nullable=False, default=list)

    __table_args__ = (
        db.Index("ix_vehicle_site_featured", "site_id", "show_on_homepage"),
    )
