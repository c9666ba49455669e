from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase


class StockLevel(TimestampedBase):
    """Current on-hand quantity of one product at one location"""
    __tablename__ = 'inventory_stock'

    # Foreign Keys
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)
    last_restocked = db.Column(db.DateTime, nullable=True)

    # One row per product and location; quantity never negative
    __table_args__ = (
        db.UniqueConstraint('product_id', 'location_id', name='uix_product_location'),
        db.CheckConstraint('quantity >= 0', name='ck_stock_quantity_non_negative'),
    )

    # Relationships
    product = db.relationship('Product', back_populates='stock_levels')
    location = db.relationship('Location')

    def __repr__(self):
        return f'<StockLevel Product:{self.product_id} Location:{self.location_id} Qty:{self.quantity}>'

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'location_id': self.location_id,
            'location_name': self.location.name if self.location else None,
            'quantity': self.quantity,
            'last_restocked': self._iso(self.last_restocked),
            'updated_at': self._iso(self.updated_at)
        }
