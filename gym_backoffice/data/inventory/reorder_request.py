from sqlalchemy.orm import synonym

from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase

REORDER_STATUS_PENDING = 'pending'
REORDER_STATUS_APPROVED = 'approved'
REORDER_STATUS_REJECTED = 'rejected'
REORDER_STATUS_RECEIVED = 'received'

REORDER_STATUSES = (
    REORDER_STATUS_PENDING,
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_RECEIVED,
    REORDER_STATUS_REJECTED,
)


class ReorderRequest(TimestampedBase):
    """
    Request to restock one product at one location.

    Financial and audit record: rows are never deleted, and the cost columns
    are written once at creation.
    """
    __tablename__ = 'reorder_requests'

    request_number = db.Column(db.String(20), unique=True, nullable=False)

    # Foreign Keys
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)
    vendor_id = db.Column(db.Integer, db.ForeignKey('vendors.id', ondelete='SET NULL'), nullable=True)

    # Quantities and cost snapshot
    quantity_requested = db.Column(db.Integer, nullable=False)
    quantity_received = db.Column(db.Integer, nullable=True)
    unit_cost = db.Column(db.Float, nullable=False, default=0.0)
    total_cost = db.Column(db.Float, nullable=False, default=0.0)

    # Lifecycle
    status = db.Column(db.String(20), nullable=False, default=REORDER_STATUS_PENDING, index=True)
    requested_by = db.Column(db.String(100), nullable=True)
    approved_by = db.Column(db.String(100), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    received_at = db.Column(db.DateTime, nullable=True)

    notes = db.Column(db.Text, nullable=True)

    requested_at = synonym('created_at')

    __table_args__ = (
        db.CheckConstraint('quantity_requested > 0', name='ck_reorder_quantity_positive'),
    )

    # Relationships
    product = db.relationship('Product')
    location = db.relationship('Location')
    vendor = db.relationship('Vendor', back_populates='reorder_requests')

    def __repr__(self):
        return f'<ReorderRequest {self.request_number}: {self.status}>'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'request_number': self.request_number,
            'product_id': self.product_id,
            'location_id': self.location_id,
            'vendor_id': self.vendor_id,
            'quantity_requested': self.quantity_requested,
            'quantity_received': self.quantity_received,
            'unit_cost': self.unit_cost,
            'total_cost': self.total_cost,
            'status': self.status,
            'requested_by': self.requested_by,
            'approved_by': self.approved_by,
            'approved_at': self._iso(self.approved_at),
            'received_at': self._iso(self.received_at),
            'notes': self.notes,
            'requested_at': self._iso(self.created_at),
            'updated_at': self._iso(self.updated_at)
        }
