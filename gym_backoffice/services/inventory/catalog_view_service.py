"""
Catalog View Service
Product listings with stock totals, reference data and inventory dashboard feeds.
"""

from typing import Any, Dict, List

from sqlalchemy import or_

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import NotFoundError
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.data.core.location import Location
from gym_backoffice.data.inventory.category import InventoryCategory
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.reorder_request import REORDER_STATUS_PENDING, ReorderRequest
from gym_backoffice.data.inventory.stock_level import StockLevel

STOCK_STATES = ('in_stock', 'low_stock', 'out_of_stock')
STOCK_HEALTH_LABELS = ['In Stock', 'Low Stock', 'Out of Stock']
STOCK_HEALTH_COLORS = ['#10b981', '#f59e0b', '#ef4444']


class CatalogViewService:
    """Read-only catalog queries"""

    @staticmethod
    def _stock_by_product(product_ids):
        """{product_id: [stock rows ordered by location name]}"""
        if not product_ids:
            return {}
        rows = (
            db.session.query(StockLevel, Location.name)
            .join(Location, StockLevel.location_id == Location.id)
            .filter(StockLevel.product_id.in_(product_ids))
            .order_by(StockLevel.product_id, Location.name)
            .all()
        )
        grouped = {}
        for level, location_name in rows:
            grouped.setdefault(level.product_id, []).append({
                'location_id': level.location_id,
                'location_name': location_name,
                'quantity': level.quantity,
                'last_restocked': level._iso(level.last_restocked),
            })
        return grouped

    @staticmethod
    def _product_dict(product, stock_rows):
        data = product.to_dict()
        total = sum(row['quantity'] for row in stock_rows)
        data['total_quantity'] = total
        data['stock_state'] = Product.classify_stock(total, product.reorder_point)
        data['stock_by_location'] = stock_rows
        return data

    @staticmethod
    def list_products(args=None) -> List[Dict[str, Any]]:
        """
        Products with total and per-location stock.

        Filters (query-string style, 'all' means no filter):
            category: category id
            status: active / inactive
            search: substring of name, SKU or description
            location: only products with a stock row at this location
            stock_status: in_stock / low / out
        """
        args = args or {}
        errors = FieldErrors()
        category_id = errors.integer('category', None if args.get('category') == 'all' else args.get('category'),
                                     1, 2**31 - 1, 'Invalid category', required=False)
        location_id = errors.integer('location', None if args.get('location') == 'all' else args.get('location'),
                                     1, 2**31 - 1, 'Invalid location', required=False)
        status = errors.choice('status', None if args.get('status') == 'all' else args.get('status'),
                               ('active', 'inactive'), 'Status must be active or inactive')
        stock_status = errors.choice('stock_status',
                                     None if args.get('stock_status') == 'all' else args.get('stock_status'),
                                     ('in_stock', 'low', 'out'),
                                     'Stock status must be in_stock, low or out')
        errors.raise_if_any()

        query = Product.query.join(InventoryCategory, Product.category_id == InventoryCategory.id)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if status:
            query = query.filter(Product.status == status)
        search = (args.get('search') or '').strip()
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Product.name.ilike(pattern),
                Product.sku.ilike(pattern),
                Product.description.ilike(pattern),
            ))
        if location_id:
            query = query.filter(
                db.session.query(StockLevel.id)
                .filter(StockLevel.product_id == Product.id, StockLevel.location_id == location_id)
                .exists()
            )

        products = query.order_by(InventoryCategory.name, Product.name).all()
        stock = CatalogViewService._stock_by_product([p.id for p in products])
        results = [CatalogViewService._product_dict(p, stock.get(p.id, [])) for p in products]

        if stock_status:
            wanted = {'in_stock': 'in_stock', 'low': 'low_stock', 'out': 'out_of_stock'}[stock_status]
            results = [p for p in results if p['stock_state'] == wanted]
        return results

    @staticmethod
    def get_product(product_id: int) -> Dict[str, Any]:
        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError.for_entity('Product', product_id)
        stock = CatalogViewService._stock_by_product([product.id])
        return CatalogViewService._product_dict(product, stock.get(product.id, []))

    @staticmethod
    def list_categories() -> List[Dict[str, Any]]:
        """Categories by name with their active product counts"""
        rows = (
            db.session.query(InventoryCategory, db.func.count(Product.id))
            .outerjoin(Product, db.and_(Product.category_id == InventoryCategory.id, Product.status == 'active'))
            .group_by(InventoryCategory.id)
            .order_by(InventoryCategory.name)
            .all()
        )
        results = []
        for category, product_count in rows:
            data = category.to_dict()
            data['product_count'] = product_count
            results.append(data)
        return results

    @staticmethod
    def list_locations(include_inactive: bool = False) -> List[Dict[str, Any]]:
        query = Location.query
        if not include_inactive:
            query = query.filter(Location.is_active.is_(True))
        return [location.to_dict() for location in query.order_by(Location.name).all()]

    @staticmethod
    def _active_stock_totals():
        """[(product, total_quantity)] for every active product"""
        totals = (
            db.session.query(StockLevel.product_id, db.func.sum(StockLevel.quantity).label('total'))
            .group_by(StockLevel.product_id)
            .subquery()
        )
        return (
            db.session.query(Product, db.func.coalesce(totals.c.total, 0))
            .outerjoin(totals, totals.c.product_id == Product.id)
            .filter(Product.status == 'active')
            .all()
        )

    @staticmethod
    def get_stats() -> Dict[str, Any]:
        """
        Inventory dashboard counters: active products, stock value at selling
        price, low-stock and out-of-stock product counts, pending reorders.
        """
        totals = CatalogViewService._active_stock_totals()
        states = [Product.classify_stock(total, product.reorder_point) for product, total in totals]

        stock_value = (
            db.session.query(db.func.coalesce(db.func.sum(StockLevel.quantity * Product.unit_price), 0))
            .join(Product, StockLevel.product_id == Product.id)
            .filter(Product.status == 'active')
            .scalar()
        )

        return {
            'total_products': len(totals),
            'total_stock_value': round(float(stock_value or 0), 2),
            'low_stock_count': states.count('low_stock'),
            'out_of_stock_count': states.count('out_of_stock'),
            'pending_reorders': ReorderRequest.query.filter_by(status=REORDER_STATUS_PENDING).count(),
        }

    @staticmethod
    def get_stock_health() -> Dict[str, Any]:
        states = [Product.classify_stock(total, product.reorder_point) for product, total in CatalogViewService._active_stock_totals()]
        return {
            'labels': STOCK_HEALTH_LABELS,
            'values': [states.count(state) for state in STOCK_STATES],
            'colors': STOCK_HEALTH_COLORS,
        }

    @staticmethod
    def get_stock_by_category() -> Dict[str, Any]:
        """Units on hand and active product count per category, largest first"""
        rows = (
            db.session.query(
                InventoryCategory.name,
                db.func.coalesce(db.func.sum(StockLevel.quantity), 0).label('total_quantity'),
                db.func.count(db.distinct(Product.id)).label('product_count'),
            )
            .outerjoin(Product, db.and_(Product.category_id == InventoryCategory.id, Product.status == 'active'))
            .outerjoin(StockLevel, StockLevel.product_id == Product.id)
            .group_by(InventoryCategory.id, InventoryCategory.name)
            .order_by(db.desc('total_quantity'), InventoryCategory.name)
            .all()
        )
        return {
            'labels': [row.name for row in rows],
            'values': [int(row.total_quantity or 0) for row in rows],
            'product_counts': [int(row.product_count or 0) for row in rows],
        }
