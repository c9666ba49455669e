"""
Vendor View Service
Vendor listings with order aggregates, order history and vendor dashboard feeds.
"""

from datetime import date, datetime

from sqlalchemy import or_

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import NotFoundError
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.data.core.location import Location
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.reorder_request import (
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_PENDING,
    ReorderRequest,
)
from gym_backoffice.data.inventory.vendor import VENDOR_CATEGORIES, VENDOR_STATUSES, Vendor

TOP_VENDOR_LIMIT = 5
TREND_MONTHS = 6


def _month_start(day, months_back=0):
    """First day of the month ``months_back`` months before ``day``'s month"""
    month_index = day.year * 12 + (day.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


class VendorViewService:

    @staticmethod
    def _aggregate_query():
        return (
            db.session.query(
                Vendor,
                db.func.count(ReorderRequest.id).label('total_orders'),
                db.func.coalesce(db.func.sum(ReorderRequest.total_cost), 0).label('total_spent'),
                db.func.coalesce(db.func.avg(ReorderRequest.total_cost), 0).label('avg_order_value'),
                db.func.max(ReorderRequest.created_at).label('last_order_date'),
            )
            .outerjoin(ReorderRequest, ReorderRequest.vendor_id == Vendor.id)
            .group_by(Vendor.id)
        )

    @staticmethod
    def _row_to_dict(row, include_average=False):
        data = row.Vendor.to_dict()
        data['total_orders'] = row.total_orders
        data['total_spent'] = round(float(row.total_spent or 0), 2)
        data['last_order_date'] = Vendor._iso(row.last_order_date)
        if include_average:
            data['avg_order_value'] = round(float(row.avg_order_value or 0), 2)
        return data

    @staticmethod
    def list_vendors(args=None):
        """
        Vendors by name with total orders, total spent and last order date.

        Filters: category, status ('all' means no filter) and search over
        vendor name, contact person and email.
        """
        args = args or {}
        errors = FieldErrors()
        category = errors.choice('category', None if args.get('category') == 'all' else args.get('category'),
                                 VENDOR_CATEGORIES, 'Category must be Supplies, Equipment, Services, or Other')
        status = errors.choice('status', None if args.get('status') == 'all' else args.get('status'),
                               VENDOR_STATUSES, 'Status must be either Active or Inactive')
        errors.raise_if_any()

        query = VendorViewService._aggregate_query()
        if category:
            query = query.filter(Vendor.category == category)
        if status:
            query = query.filter(Vendor.status == status)
        search = (args.get('search') or '').strip()
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Vendor.vendor_name.ilike(pattern),
                Vendor.contact_person.ilike(pattern),
                Vendor.email.ilike(pattern),
            ))

        return [VendorViewService._row_to_dict(row) for row in query.order_by(Vendor.vendor_name).all()]

    @staticmethod
    def get_vendor(vendor_id):
        row = VendorViewService._aggregate_query().filter(Vendor.id == vendor_id).first()
        if row is None:
            raise NotFoundError.for_entity('Vendor', vendor_id)
        return VendorViewService._row_to_dict(row, include_average=True)

    @staticmethod
    def get_vendor_orders(vendor_id):
        """Order history for one vendor, newest first"""
        if db.session.get(Vendor, vendor_id) is None:
            raise NotFoundError.for_entity('Vendor', vendor_id)

        rows = (
            db.session.query(ReorderRequest, Product.name, Product.sku, Location.name)
            .join(Product, ReorderRequest.product_id == Product.id)
            .join(Location, ReorderRequest.location_id == Location.id)
            .filter(ReorderRequest.vendor_id == vendor_id)
            .order_by(ReorderRequest.created_at.desc(), ReorderRequest.id.desc())
            .all()
        )
        return [
            {
                'id': reorder.id,
                'request_number': reorder.request_number,
                'requested_at': reorder._iso(reorder.created_at),
                'quantity_requested': reorder.quantity_requested,
                'total_cost': round(float(reorder.total_cost or 0), 2),
                'status': reorder.status,
                'product_name': product_name,
                'product_sku': product_sku,
                'location_name': location_name,
            }
            for reorder, product_name, product_sku, location_name in rows
        ]

    @staticmethod
    def _spend_by_active_vendor():
        spent = db.func.coalesce(db.func.sum(ReorderRequest.total_cost), 0).label('spent')
        return (
            db.session.query(Vendor.vendor_name, spent)
            .outerjoin(ReorderRequest, ReorderRequest.vendor_id == Vendor.id)
            .filter(Vendor.status == 'Active')
            .group_by(Vendor.id, Vendor.vendor_name)
            .order_by(spent.desc(), Vendor.vendor_name)
        )

    @staticmethod
    def get_stats(now=None):
        """
        total_vendors (active), total_spent_month (current calendar month),
        active_orders (pending or approved with a vendor) and top_vendor by
        lifetime spend among active vendors.
        """
        now = now or datetime.utcnow()
        month_start = datetime.combine(_month_start(now.date()), datetime.min.time())

        spent_month = (
            db.session.query(db.func.coalesce(db.func.sum(ReorderRequest.total_cost), 0))
            .filter(ReorderRequest.vendor_id.isnot(None), ReorderRequest.created_at >= month_start)
            .scalar()
        )
        active_orders = ReorderRequest.query.filter(
            ReorderRequest.vendor_id.isnot(None),
            ReorderRequest.status.in_((REORDER_STATUS_PENDING, REORDER_STATUS_APPROVED)),
        ).count()
        top = VendorViewService._spend_by_active_vendor().first()

        return {
            'total_vendors': Vendor.query.filter_by(status='Active').count(),
            'total_spent_month': round(float(spent_month or 0), 2),
            'active_orders': active_orders,
            'top_vendor': top.vendor_name if top else None,
        }

    @staticmethod
    def get_spending_chart(limit=TOP_VENDOR_LIMIT):
        rows = VendorViewService._spend_by_active_vendor().limit(limit).all()
        return {
            'labels': [row.vendor_name for row in rows],
            'values': [round(float(row.spent or 0), 2) for row in rows],
        }

    @staticmethod
    def get_order_trends(now=None, months=TREND_MONTHS):
        """Vendor-attributed orders per month for the last ``months`` months, zero-filled"""
        today = (now or datetime.utcnow()).date()
        series = [_month_start(today, back) for back in range(months - 1, -1, -1)]
        start = datetime.combine(series[0], datetime.min.time())

        counts = {}
        created = (
            db.session.query(ReorderRequest.created_at)
            .filter(ReorderRequest.vendor_id.isnot(None), ReorderRequest.created_at >= start)
        )
        for (created_at,) in created:
            key = (created_at.year, created_at.month)
            counts[key] = counts.get(key, 0) + 1

        return {
            'labels': [f"{month:%b}" for month in series],
            'values': [counts.get((month.year, month.month), 0) for month in series],
        }
