from sitecms.extensions import db
from .base import BaseModel

class RevokedToken(BaseModel):
    """JWT ids whose session was terminated server-side."""
    __tablename__ = "revoked_tokens"

    jti = db.Column(db.String(36), nullable=False, unique=True, index=True)
    user_id = db.Column(db.String(36), nullable=True)
    reason = db.Column(db.String(100), nullable=True)
