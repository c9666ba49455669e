"""
VendorManager - Business logic for vendor master data

Vendors are soft-deleted: deactivation sets the status to Inactive and keeps
the row so reorder requests attributed to the vendor still resolve.
"""

import re

from sqlalchemy.exc import SQLAlchemyError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import NotFoundError, PersistenceError, ValidationError
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.buisness.inventory.shared.results import ActionResult
from gym_backoffice.data.inventory.vendor import VENDOR_CATEGORIES, VENDOR_STATUSES, Vendor
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.buisness.inventory.vendors")

NAME_PATTERN = r"[A-Za-z\s'-]+"
PHONE_PATTERN = r"\(\d{3}\) \d{3}-\d{4}"
EMAIL_PATTERN = r"[^@\s]+@[^@\s]+\.[^@\s]+"
POSTAL_CODE_PATTERN = r"[A-Za-z]\d[A-Za-z][ -]?\d[A-Za-z]\d"
TAX_ID_PATTERN = r"[A-Za-z0-9\s-]+"
VENDOR_NOTES_MAX_LENGTH = 1000


def normalize_postal_code(value):
    """'m5v2t6' -> 'M5V 2T6'"""
    cleaned = re.sub(r"[\s-]", "", value).upper()
    return f"{cleaned[:3]} {cleaned[3:]}"


class VendorManager:
    """Create, update and soft delete vendors"""

    @staticmethod
    def get_vendor(vendor_id):
        vendor = db.session.get(Vendor, vendor_id)
        if vendor is None:
            raise NotFoundError.for_entity('Vendor', vendor_id)
        return vendor

    @staticmethod
    def _validate(data, default_status=None):
        errors = FieldErrors()
        cleaned = {
            'vendor_name': errors.text('vendor_name', data.get('vendor_name'), 100,
                                       'Vendor name must be between 3 and 100 characters',
                                       min_length=3, required=True, required_message='Vendor name is required'),
            'category': errors.choice('category', data.get('category'), VENDOR_CATEGORIES,
                                      'Category must be Supplies, Equipment, Services, or Other', required=True),
            'contact_person': errors.text('contact_person', data.get('contact_person'), 100,
                                          'Contact person must be between 2 and 100 characters', min_length=2),
            'email': errors.pattern('email', data.get('email'), EMAIL_PATTERN, 'Invalid email format',
                                    max_length=100),
            'phone': errors.pattern('phone', data.get('phone'), PHONE_PATTERN,
                                    'Phone must be in format: (555) 123-4567', max_length=20),
            'address_street': errors.text('address_street', data.get('address_street'), 200,
                                          'Street address must be less than 200 characters'),
            'address_city': errors.text('address_city', data.get('address_city'), 100,
                                        'City must be between 2 and 100 characters', min_length=2),
            'address_province': errors.text('address_province', data.get('address_province'), 50,
                                            'Province must be between 2 and 50 characters', min_length=2),
            'address_postal_code': errors.pattern('address_postal_code', data.get('address_postal_code'),
                                                  POSTAL_CODE_PATTERN,
                                                  'Postal code must be in Canadian format: A1A 1A1', max_length=10),
            'payment_terms': errors.text('payment_terms', data.get('payment_terms'), 50,
                                         'Payment terms must be less than 50 characters'),
            'tax_id': errors.pattern('tax_id', data.get('tax_id'), TAX_ID_PATTERN,
                                     'Tax ID can only contain letters, digits, spaces and hyphens', max_length=50),
            'notes': errors.text('notes', data.get('notes'), VENDOR_NOTES_MAX_LENGTH,
                                 f"Notes must be less than {VENDOR_NOTES_MAX_LENGTH} characters"),
            'status': errors.choice('status', data.get('status'), VENDOR_STATUSES,
                                    'Status must be either Active or Inactive', default=default_status),
        }

        # Names of people and places
        for field in ('contact_person', 'address_city', 'address_province'):
            if cleaned[field] and not re.fullmatch(NAME_PATTERN, cleaned[field]):
                errors.add(field, f"{field.replace('_', ' ').capitalize()} can only contain letters, "
                                  f"spaces, hyphens, and apostrophes")
                cleaned[field] = None

        if cleaned['address_postal_code']:
            cleaned['address_postal_code'] = normalize_postal_code(cleaned['address_postal_code'])
        if cleaned['email']:
            cleaned['email'] = cleaned['email'].lower()
        cleaned['payment_terms'] = cleaned['payment_terms'] or 'Net 30'
        return errors, cleaned

    @staticmethod
    def _ensure_unique_name(vendor_name, exclude_id=None):
        query = Vendor.query.filter(db.func.lower(Vendor.vendor_name) == vendor_name.lower())
        if exclude_id is not None:
            query = query.filter(Vendor.id != exclude_id)
        if query.first() is not None:
            raise ValidationError.for_field('vendor_name', 'Vendor name already exists')

    @staticmethod
    def create_vendor(data):
        """
        Create a vendor

        Args:
            data: Mapping of vendor fields; vendor_name and category are required

        Returns:
            ActionResult wrapping the new Vendor
        """
        errors, cleaned = VendorManager._validate(data, default_status='Active')
        errors.raise_if_any()
        VendorManager._ensure_unique_name(cleaned['vendor_name'])

        try:
            vendor = Vendor(**cleaned)
            db.session.add(vendor)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create vendor {cleaned['vendor_name']}: {e}")
            raise PersistenceError("Failed to create vendor") from e

        logger.info(f"Vendor {vendor.vendor_name} created (id={vendor.id})")
        return ActionResult(vendor)

    @staticmethod
    def update_vendor(vendor_id, data):
        """Replace a vendor's fields; the name must stay unique among other vendors"""
        vendor = VendorManager.get_vendor(vendor_id)

        errors, cleaned = VendorManager._validate(data, default_status=vendor.status)
        errors.raise_if_any()
        VendorManager._ensure_unique_name(cleaned['vendor_name'], exclude_id=vendor.id)

        try:
            for field, value in cleaned.items():
                setattr(vendor, field, value)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to update vendor {vendor_id}: {e}")
            raise PersistenceError("Failed to update vendor") from e

        logger.info(f"Vendor {vendor.vendor_name} updated")
        return ActionResult(vendor)

    @staticmethod
    def deactivate_vendor(vendor_id):
        vendor = VendorManager.get_vendor(vendor_id)
        if not vendor.is_active:
            return ActionResult(vendor, ["Vendor is already inactive"])

        try:
            vendor.status = 'Inactive'
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to deactivate vendor {vendor_id}: {e}")
            raise PersistenceError("Failed to deactivate vendor") from e

        logger.info(f"Vendor {vendor.vendor_name} deactivated")
        return ActionResult(vendor)
