"""
Reorder Search Service
Builds the filtered, joined reorder request listing and single-request view.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import case

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import NotFoundError
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.data.core.location import Location
from gym_backoffice.data.inventory.category import InventoryCategory
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.reorder_request import REORDER_STATUSES, ReorderRequest
from gym_backoffice.data.inventory.vendor import Vendor

# Pending first, rejected last
STATUS_PRIORITY = {status: index for index, status in enumerate(REORDER_STATUSES, start=1)}


@dataclass
class ReorderFilters:
    status: Optional[str] = None
    location_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @classmethod
    def from_args(cls, args) -> "ReorderFilters":
        """
        Parse query-string filters. 'all' or an empty value means no filter.

        Raises ValidationError for an unknown status, a non-numeric location or
        a malformed date.
        """
        errors = FieldErrors()

        status = args.get('status')
        if status == 'all':
            status = None
        status = errors.choice('status', status, REORDER_STATUSES,
                               f"Status must be one of: {', '.join(REORDER_STATUSES)}, all")

        location_id = args.get('location_id')
        if location_id == 'all':
            location_id = None
        location_id = errors.integer('location_id', location_id, 1, 2**31 - 1, 'Invalid location',
                                     required=False)

        date_from = errors.iso_date('date_from', args.get('date_from'))
        date_to = errors.iso_date('date_to', args.get('date_to'))
        errors.raise_if_any()

        return cls(status=status, location_id=location_id, date_from=date_from, date_to=date_to)


class ReorderSearchService:
    """Read-side views of reorder requests joined with product, category, location and vendor"""

    @staticmethod
    def _base_query():
        return (
            db.session.query(
                ReorderRequest,
                Product.name.label('product_name'),
                Product.sku.label('product_sku'),
                Product.unit_price.label('unit_price'),
                InventoryCategory.name.label('category_name'),
                Location.name.label('location_name'),
                Vendor.vendor_name.label('vendor_name'),
            )
            .join(Product, ReorderRequest.product_id == Product.id)
            .join(InventoryCategory, Product.category_id == InventoryCategory.id)
            .join(Location, ReorderRequest.location_id == Location.id)
            .outerjoin(Vendor, ReorderRequest.vendor_id == Vendor.id)
        )

    @staticmethod
    def _row_to_dict(row, include_unit_price=False) -> Dict[str, Any]:
        data = row.ReorderRequest.to_dict()
        data.update({
            'product_name': row.product_name,
            'product_sku': row.product_sku,
            'category_name': row.category_name,
            'location_name': row.location_name,
            'vendor_name': row.vendor_name,
        })
        if include_unit_price:
            data['unit_price'] = row.unit_price
        return data

    @staticmethod
    def list_requests(filters: Optional[ReorderFilters] = None) -> List[Dict[str, Any]]:
        """
        List reorder requests, pending first then approved, received, rejected;
        newest first within a status.

        Date bounds are inclusive calendar days on the request date.
        """
        filters = filters or ReorderFilters()
        query = ReorderSearchService._base_query()

        if filters.status:
            query = query.filter(ReorderRequest.status == filters.status)

        if filters.location_id:
            query = query.filter(ReorderRequest.location_id == filters.location_id)

        if filters.date_from:
            query = query.filter(ReorderRequest.created_at >= datetime.combine(filters.date_from, time.min))

        if filters.date_to:
            day_after = datetime.combine(filters.date_to + timedelta(days=1), time.min)
            query = query.filter(ReorderRequest.created_at < day_after)

        priority = case(STATUS_PRIORITY, value=ReorderRequest.status, else_=len(STATUS_PRIORITY) + 1)
        query = query.order_by(priority, ReorderRequest.created_at.desc(), ReorderRequest.id.desc())

        return [ReorderSearchService._row_to_dict(row) for row in query.all()]

    @staticmethod
    def get_request(request_id: int) -> Dict[str, Any]:
        """Single request with names and the product's current selling price"""
        row = ReorderSearchService._base_query().filter(ReorderRequest.id == request_id).first()
        if row is None:
            raise NotFoundError("Reorder request not found", details={'entity': 'ReorderRequest', 'id': request_id})
        return ReorderSearchService._row_to_dict(row, include_unit_price=True)
