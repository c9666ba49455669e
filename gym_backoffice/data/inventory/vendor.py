from gym_backoffice import db
from gym_backoffice.data.core.timestamped_base import TimestampedBase

VENDOR_CATEGORIES = ('Equipment', 'Supplies', 'Services', 'Other')
VENDOR_STATUSES = ('Active', 'Inactive')


class Vendor(TimestampedBase):
    """Supplier master data; soft-deleted by status only"""
    __tablename__ = 'vendors'

    vendor_name = db.Column(db.String(100), unique=True, nullable=False)
    category = db.Column(db.String(20), nullable=False, default='Supplies')

    # Contact
    contact_person = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(20), nullable=True)

    # Address
    address_street = db.Column(db.String(200), nullable=True)
    address_city = db.Column(db.String(100), nullable=True)
    address_province = db.Column(db.String(50), nullable=True)
    address_postal_code = db.Column(db.String(10), nullable=True)

    # Terms
    payment_terms = db.Column(db.String(50), nullable=True, default='Net 30')
    tax_id = db.Column(db.String(50), nullable=True)

    notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')

    reorder_requests = db.relationship('ReorderRequest', back_populates='vendor', lazy='dynamic')

    def __repr__(self):
        return f'<Vendor {self.vendor_name}>'

    @property
    def is_active(self):
        return self.status == 'Active'

    def to_dict(self):
        return {
            'id': self.id,
            'vendor_name': self.vendor_name,
            'category': self.category,
            'contact_person': self.contact_person,
            'email': self.email,
            'phone': self.phone,
            'address_street': self.address_street,
            'address_city': self.address_city,
            'address_province': self.address_province,
            'address_postal_code': self.address_postal_code,
            'payment_terms': self.payment_terms,
            'tax_id': self.tax_id,
            'notes': self.notes,
            'status': self.status,
            'created_at': self._iso(self.created_at),
            'updated_at': self._iso(self.updated_at)
        }
