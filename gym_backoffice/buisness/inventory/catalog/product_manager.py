"""
ProductManager - Business logic for the product catalog

Products get a category-prefixed SKU on creation and a zero-quantity stock
row at every location. Products are never hard-deleted; deactivation flips
the status so historical reorder requests keep their reference.
"""

from sqlalchemy.exc import SQLAlchemyError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.buisness.inventory.shared.results import ActionResult
from gym_backoffice.buisness.inventory.stock.stock_manager import StockManager
from gym_backoffice.data.core.sequences import SkuNumberManager
from gym_backoffice.data.inventory.category import InventoryCategory
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.buisness.inventory.catalog")

PRODUCT_STATUSES = ('active', 'inactive')

PRICE_MIN = 0.01
PRICE_MAX = 10000
QUANTITY_RULE_MAX = 1000
DESCRIPTION_MAX_LENGTH = 500


class ProductManager:
    """Create, update and deactivate catalog products"""

    @staticmethod
    def get_product(product_id):
        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError.for_entity('Product', product_id)
        return product

    @staticmethod
    def _validate(data, reorder_point_min):
        errors = FieldErrors()
        cleaned = {
            'name': errors.text('name', data.get('name'), 100,
                                'Product name must be between 3 and 100 characters',
                                min_length=3, required=True, required_message='Product name is required'),
            'category_id': errors.integer('category_id', data.get('category_id'), 1, 2**31 - 1,
                                          'Invalid category', required_message='Category is required'),
            'unit_price': errors.decimal('unit_price', data.get('unit_price'), PRICE_MIN, PRICE_MAX,
                                         'Selling price must be between $0.01 and $10,000',
                                         required_message='Selling price is required'),
            'cost_price': errors.decimal('cost_price', data.get('cost_price'), PRICE_MIN, PRICE_MAX,
                                         'Cost price must be between $0.01 and $10,000',
                                         required_message='Cost price is required'),
            'reorder_point': errors.integer('reorder_point', data.get('reorder_point'),
                                            reorder_point_min, QUANTITY_RULE_MAX,
                                            f"Reorder point must be between {reorder_point_min} and 1,000 units",
                                            required_message='Reorder point is required'),
            'reorder_quantity': errors.integer('reorder_quantity', data.get('reorder_quantity'),
                                               1, QUANTITY_RULE_MAX,
                                               'Reorder quantity must be between 1 and 1,000 units',
                                               required_message='Reorder quantity is required'),
            'description': errors.text('description', data.get('description'), DESCRIPTION_MAX_LENGTH,
                                       'Description must be less than 500 characters'),
        }
        return errors, cleaned

    @staticmethod
    def _pricing_warnings(result, cleaned):
        if cleaned['cost_price'] > cleaned['unit_price']:
            result.warn("Cost price exceeds selling price - this will result in a loss")
        if cleaned['reorder_quantity'] <= cleaned['reorder_point']:
            result.warn("Reorder quantity should typically exceed reorder point")

    @staticmethod
    def _ensure_unique_name(name, exclude_id=None):
        query = Product.query.filter(db.func.lower(Product.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        if query.first() is not None:
            raise ValidationError.for_field('name', 'A product with this name already exists')

    @staticmethod
    def _get_category(category_id):
        category = db.session.get(InventoryCategory, category_id)
        if category is None:
            raise ValidationError.for_field('category_id', 'Category must be an existing inventory category')
        return category

    @staticmethod
    def create_product(data):
        """
        Create a product with a generated SKU

        Args:
            data: Mapping with name, category_id, unit_price, cost_price,
                reorder_point, reorder_quantity and optional description

        Returns:
            ActionResult wrapping the new Product
        """
        errors, cleaned = ProductManager._validate(data, reorder_point_min=1)
        errors.raise_if_any()

        category = ProductManager._get_category(cleaned['category_id'])
        ProductManager._ensure_unique_name(cleaned['name'])

        try:
            product = Product(
                sku=SkuNumberManager.get_next_sku(category.sku_prefix),
                status='active',
                **cleaned
            )
            db.session.add(product)
            db.session.flush()
            created = StockManager.ensure_rows_for_all_locations(product.id)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create product {cleaned['name']}: {e}")
            raise PersistenceError("Failed to create product") from e

        logger.info(f"Product {product.sku} ({product.name}) created with {created} stock rows")

        result = ActionResult(product)
        ProductManager._pricing_warnings(result, cleaned)
        return result

    @staticmethod
    def update_product(product_id, data):
        """
        Update a product's catalog fields. The SKU never changes.

        Returns:
            ActionResult wrapping the updated Product
        """
        product = ProductManager.get_product(product_id)

        errors, cleaned = ProductManager._validate(data, reorder_point_min=0)
        status = errors.choice('status', data.get('status'), PRODUCT_STATUSES,
                               'Status must be active or inactive', default=product.status)
        errors.raise_if_any()

        category = ProductManager._get_category(cleaned['category_id'])
        ProductManager._ensure_unique_name(cleaned['name'], exclude_id=product.id)

        # A category change leaves the SKU as issued
        try:
            for field, value in cleaned.items():
                setattr(product, field, value)
            product.category_id = category.id
            product.status = status
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to update product {product_id}: {e}")
            raise PersistenceError("Failed to update product") from e

        logger.info(f"Product {product.sku} updated")

        result = ActionResult(product)
        ProductManager._pricing_warnings(result, cleaned)
        return result

    @staticmethod
    def deactivate_product(product_id):
        """Soft delete: the product stays referenced by its reorder history"""
        product = ProductManager.get_product(product_id)
        if not product.is_active:
            return ActionResult(product, ["Product is already inactive"])

        try:
            product.status = 'inactive'
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to deactivate product {product_id}: {e}")
            raise PersistenceError("Failed to deactivate product") from e

        logger.info(f"Product {product.sku} deactivated")
        return ActionResult(product)
