from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import NotFoundError, PersistenceError, ValidationError
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.buisness.inventory.shared.results import ActionResult
from gym_backoffice.data.core.location import Location
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.stock_level import StockLevel
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.buisness.inventory.stock")

ADJUSTMENT_TYPES = ('set', 'add', 'subtract')


class StockManager:
    """
    Stock level operations.

    Responsibilities:
    - Keep exactly one StockLevel row per (product, location), created lazily
    - Apply receipts from the reorder workflow inside the caller's transaction
    - Apply direct admin adjustments in their own transaction
    """

    @staticmethod
    def _locked_stock_level(product_id: int, location_id: int) -> StockLevel | None:
        return (
            StockLevel.query
            .filter_by(product_id=product_id, location_id=location_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def get_or_create_stock_level(product_id: int, location_id: int) -> StockLevel:
        level = StockManager._locked_stock_level(product_id, location_id)
        if level is None:
            level = StockLevel(product_id=product_id, location_id=location_id, quantity=0)
            db.session.add(level)
            db.session.flush()
        return level

    @staticmethod
    def ensure_rows_for_all_locations(product_id: int) -> int:
        """
        Create zero-quantity rows for ``product_id`` at every location that lacks one.

        Returns the number of rows created. Does not commit.
        """
        existing = {
            level.location_id
            for level in StockLevel.query.filter_by(product_id=product_id).all()
        }
        created = 0
        for location in Location.query.order_by(Location.id).all():
            if location.id in existing:
                continue
            db.session.add(StockLevel(product_id=product_id, location_id=location.id, quantity=0))
            created += 1
        return created

    @staticmethod
    def increment_stock(product_id: int, location_id: int, delta: int) -> StockLevel:
        """
        Add ``delta`` units to the stock row, inserting the row if it is absent.

        The increment is evaluated by the database (quantity = quantity + delta).
        Does not commit; joins the caller's transaction.
        """
        if delta <= 0:
            raise ValueError("delta must be > 0")

        now = datetime.utcnow()
        level = StockManager._locked_stock_level(product_id, location_id)
        if level is None:
            level = StockLevel(
                product_id=product_id,
                location_id=location_id,
                quantity=delta,
                last_restocked=now,
            )
            db.session.add(level)
        else:
            level.quantity = StockLevel.quantity + delta
            level.last_restocked = now

        db.session.flush()
        return level

    @staticmethod
    def adjust_stock(product_id, location_id, quantity, adjustment_type='set', reason=None, adjusted_by=None) -> ActionResult:
        """
        Direct stock edit by an administrator.

        Args:
            product_id: Product ID
            location_id: Location ID
            quantity: Units to set, add or subtract
            adjustment_type: 'set', 'add' or 'subtract'
            reason: Free-text reason, logged with the change
            adjusted_by: Identity of the person adjusting

        Returns:
            ActionResult wrapping the StockLevel, with a warning when the
            resulting quantity is at or below the reorder point
        """
        max_quantity = current_app.config.get('STOCK_ADJUSTMENT_MAX_QUANTITY', 10000)
        notes_max = current_app.config.get('NOTES_MAX_LENGTH', 500)

        errors = FieldErrors()
        adjustment_type = errors.choice(
            'adjustment_type', adjustment_type, ADJUSTMENT_TYPES,
            'Adjustment type must be set, add, or subtract', default='set'
        )
        minimum = 0 if adjustment_type == 'set' else 1
        quantity = errors.integer(
            'quantity', quantity, minimum, max_quantity,
            f"Quantity must be between {minimum} and {max_quantity:,} units",
            required_message='Quantity is required'
        )
        reason = errors.text(
            'adjustment_reason', reason, notes_max,
            f"Adjustment reason must be less than {notes_max} characters"
        )
        errors.raise_if_any()

        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError.for_entity('Product', product_id)
        location = db.session.get(Location, location_id)
        if location is None:
            raise NotFoundError.for_entity('Location', location_id)

        try:
            level = StockManager.get_or_create_stock_level(product.id, location.id)
            before = level.quantity or 0

            if adjustment_type == 'set':
                level.quantity = quantity
            elif adjustment_type == 'add':
                level.quantity = StockLevel.quantity + quantity
            else:
                if quantity > before:
                    raise ValidationError.for_field(
                        'quantity',
                        f"Cannot subtract {quantity} units; only {before} on hand"
                    )
                level.quantity = StockLevel.quantity - quantity

            db.session.commit()
        except ValidationError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Stock adjustment failed for product {product_id} at location {location_id}: {e}")
            raise PersistenceError("Failed to update stock") from e

        logger.info(
            f"Stock for {product.sku} at {location.name} adjusted ({adjustment_type} {quantity}) "
            f"from {before} to {level.quantity} by {adjusted_by or 'Admin'}"
            + (f": {reason}" if reason else "")
        )

        result = ActionResult(level)
        if level.quantity <= product.reorder_point:
            result.warn(
                f"{product.name} at {location.name} is at or below its reorder point "
                f"({level.quantity} on hand, reorder point {product.reorder_point})"
            )
        return result
