from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase


class Location(TimestampedBase):
    """Gym location - destination for stock and reorder requests"""
    __tablename__ = 'locations'

    name = db.Column(db.String(100), unique=True, nullable=False)
    capacity = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Location {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'capacity': self.capacity,
            'is_active': self.is_active,
            'created_at': self._iso(self.created_at)
        }
