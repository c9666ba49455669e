from gym_backoffice import db
from datetime import datetime


class TimestampedBase(db.Model):
    """Abstract base class for back office entities with audit timestamps"""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def _iso(value):
        return value.isoformat() if value else None
