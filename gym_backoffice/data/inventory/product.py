from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase


class Product(TimestampedBase):
    """Catalog product sold or used at the gyms"""
    __tablename__ = 'products'

    # Basic Fields
    sku = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Pricing
    unit_price = db.Column(db.Float, nullable=False, default=0.0)
    cost_price = db.Column(db.Float, nullable=False, default=0.0)

    # Restocking
    reorder_point = db.Column(db.Integer, nullable=False, default=10)
    reorder_quantity = db.Column(db.Integer, nullable=False, default=25)

    status = db.Column(db.String(20), nullable=False, default='active')  # active/inactive

    # Foreign Keys
    category_id = db.Column(db.Integer, db.ForeignKey('inventory_categories.id'), nullable=False)

    # Relationships
    category = db.relationship('InventoryCategory', back_populates='products')
    stock_levels = db.relationship('StockLevel', back_populates='product', lazy='dynamic')

    def __repr__(self):
        return f'<Product {self.sku}: {self.name}>'

    # Properties
    @property
    def is_active(self):
        """Check if status is active"""
        return self.status == 'active'

    @staticmethod
    def classify_stock(total_quantity, reorder_point):
        """in_stock, low_stock or out_of_stock relative to the reorder point"""
        if total_quantity == 0:
            return 'out_of_stock'
        if total_quantity <= reorder_point:
            return 'low_stock'
        return 'in_stock'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'sku': self.sku,
            'name': self.name,
            'description': self.description,
            'category_id': self.category_id,
            'category_name': self.category.name if self.category else None,
            'category_icon': self.category.icon if self.category else None,
            'unit_price': self.unit_price,
            'cost_price': self.cost_price,
            'reorder_point': self.reorder_point,
            'reorder_quantity': self.reorder_quantity,
            'status': self.status,
            'created_at': self._iso(self.created_at),
            'updated_at': self._iso(self.updated_at)
        }
