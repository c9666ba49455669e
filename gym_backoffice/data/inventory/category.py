from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase


class InventoryCategory(TimestampedBase):
    """Product category - owns the SKU prefix for its products"""
    __tablename__ = 'inventory_categories'

    name = db.Column(db.String(100), unique=True, nullable=False)
    sku_prefix = db.Column(db.String(10), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    icon = db.Column(db.String(50), default='fa-box')

    products = db.relationship('Product', back_populates='category', lazy='dynamic')

    def __repr__(self):
        return f'<InventoryCategory {self.name} ({self.sku_prefix})>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'sku_prefix': self.sku_prefix,
            'description': self.description,
            'icon': self.icon
        }
