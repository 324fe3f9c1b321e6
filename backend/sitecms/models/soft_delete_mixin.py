# sitecms/models/soft_delete_mixin.py
from .base import utc_now
from sitecms.extensions import db

class SoftDeleteMixin:
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    def soft_delete(self):
        self.deleted_at = utc_now()

    def restore(self):
        self.deleted_at = None

    @property
    def is_deleted(self):
        return self.deleted_at is not None
