"""
ReorderRequestManager - Business logic for reorder requests

Responsibilities:
- Create reorder requests with a cost snapshot taken from the product
- Approve or reject pending requests
- Receive approved requests and restock the destination location atomically
"""

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import (
    InventoryError,
    NotFoundError,
    PersistenceError,
    QuantityExceedsOrderError,
)
from gym_backoffice.buisness.inventory.shared.field_errors import FieldErrors
from gym_backoffice.buisness.inventory.shared.results import ActionResult
from gym_backoffice.buisness.inventory.shared.status_manager import ReorderStatusManager
from gym_backoffice.buisness.inventory.stock.stock_manager import StockManager
from gym_backoffice.data.core.location import Location
from gym_backoffice.data.core.sequences import ReorderNumberManager
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.reorder_request import (
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_PENDING,
    REORDER_STATUS_RECEIVED,
    REORDER_STATUS_REJECTED,
    ReorderRequest,
)
from gym_backoffice.data.inventory.vendor import Vendor
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.buisness.inventory.reorders")


class ReorderRequestManager:
    """Handles all reorder request business logic"""

    status_manager = ReorderStatusManager()

    @staticmethod
    def get_request(request_id):
        reorder = db.session.get(ReorderRequest, request_id)
        if reorder is None:
            raise NotFoundError("Reorder request not found", details={'entity': 'ReorderRequest', 'id': request_id})
        return reorder

    @staticmethod
    def create_request(product_id, location_id, quantity, notes=None, requested_by=None, vendor_id=None):
        """
        Create a pending reorder request

        Args:
            product_id: Product to restock
            location_id: Destination location
            quantity: Units requested (1 to REORDER_MAX_QUANTITY)
            notes: Optional free-text notes
            requested_by: Requester identity, 'System' when omitted
            vendor_id: Optional vendor attribution

        Returns:
            ActionResult wrapping the new ReorderRequest
        """
        max_quantity = current_app.config.get('REORDER_MAX_QUANTITY', 1000)
        notes_max = current_app.config.get('NOTES_MAX_LENGTH', 500)

        errors = FieldErrors()
        product_id = errors.integer('product_id', product_id, 1, 2**31 - 1, 'Invalid product',
                                    required_message='Product is required')
        location_id = errors.integer('location_id', location_id, 1, 2**31 - 1, 'Invalid destination location',
                                     required_message='Destination location is required')
        vendor_id = errors.integer('vendor_id', vendor_id, 1, 2**31 - 1, 'Invalid vendor', required=False)
        quantity = errors.integer('quantity', quantity, 1, max_quantity,
                                  f"Quantity must be between 1 and {max_quantity:,} units",
                                  required_message='Quantity is required')
        notes = errors.text('notes', notes, notes_max, f"Notes must be less than {notes_max} characters")
        requested_by = errors.text('requested_by', requested_by, 100,
                                   'Requested by must be less than 100 characters')
        errors.raise_if_any()

        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError.for_entity('Product', product_id)
        location = db.session.get(Location, location_id)
        if location is None:
            raise NotFoundError.for_entity('Location', location_id)
        if vendor_id is not None and db.session.get(Vendor, vendor_id) is None:
            raise NotFoundError.for_entity('Vendor', vendor_id)

        # Price-at-order-time: later catalog changes never touch this row
        unit_cost = float(product.cost_price or 0.0)

        try:
            reorder = ReorderRequest(
                request_number=ReorderNumberManager.get_next_request_number(),
                product_id=product.id,
                location_id=location.id,
                vendor_id=vendor_id,
                quantity_requested=quantity,
                unit_cost=unit_cost,
                total_cost=round(unit_cost * quantity, 2),
                status=REORDER_STATUS_PENDING,
                requested_by=requested_by or 'System',
                notes=notes,
            )
            db.session.add(reorder)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create reorder request: {e}")
            raise PersistenceError("Failed to create reorder request") from e

        logger.info(
            f"Reorder request {reorder.request_number} created by {reorder.requested_by}: "
            f"{quantity} x {product.sku} for {location.name} ({reorder.total_cost:.2f})"
        )
        return ActionResult(reorder)

    @staticmethod
    def approve_request(request_id, approved_by):
        """
        Approve a pending request

        Args:
            request_id: Reorder request ID
            approved_by: Approver identity (required)

        Returns:
            ActionResult wrapping the approved ReorderRequest
        """
        errors = FieldErrors()
        approved_by = errors.text('approved_by', approved_by, 100, 'Approved by must be less than 100 characters',
                                  required=True, required_message='approved_by is required')
        errors.raise_if_any()

        reorder = ReorderRequestManager.get_request(request_id)
        try:
            ReorderRequestManager.status_manager.transition(
                reorder,
                REORDER_STATUS_APPROVED,
                approved_by=approved_by,
                approved_at=datetime.utcnow(),
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to approve request: {e}")
            raise PersistenceError("Failed to approve request") from e
        except InventoryError:
            db.session.rollback()
            raise

        logger.info(f"Reorder request {reorder.request_number} approved by {approved_by}")
        return ActionResult(reorder)

    @staticmethod
    def reject_request(request_id, rejected_by=None, reason=None):
        """
        Reject a pending request, appending the rejection to the notes

        Args:
            request_id: Reorder request ID
            rejected_by: Identity rejecting the request, 'Admin' when omitted
            reason: Rejection reason, 'No reason provided' when omitted

        Returns:
            ActionResult wrapping the rejected ReorderRequest
        """
        notes_max = current_app.config.get('NOTES_MAX_LENGTH', 500)

        errors = FieldErrors()
        rejected_by = errors.text('rejected_by', rejected_by, 100, 'Rejected by must be less than 100 characters')
        reason = errors.text('rejection_reason', reason, notes_max,
                             f"Rejection reason must be less than {notes_max} characters")
        errors.raise_if_any()

        rejected_by = rejected_by or 'Admin'
        reason = reason or 'No reason provided'

        reorder = ReorderRequestManager.get_request(request_id)
        rejection_note = f"Rejected by: {rejected_by}\nReason: {reason}"
        notes = f"{reorder.notes}\n{rejection_note}" if reorder.notes else rejection_note

        try:
            ReorderRequestManager.status_manager.transition(reorder, REORDER_STATUS_REJECTED, notes=notes)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to reject request: {e}")
            raise PersistenceError("Failed to reject request") from e
        except InventoryError:
            db.session.rollback()
            raise

        logger.info(f"Reorder request {reorder.request_number} rejected by {rejected_by}: {reason}")
        return ActionResult(reorder)

    @staticmethod
    def receive_request(request_id, quantity_received):
        """
        Mark an approved request as received and add the units to stock

        The status change and the stock increment commit together or not at all.

        Args:
            request_id: Reorder request ID
            quantity_received: Units that physically arrived

        Returns:
            ActionResult wrapping the received ReorderRequest; carries a warning
            when less than REORDER_PARTIAL_RECEIPT_RATIO of the order arrived
        """
        max_quantity = current_app.config.get('STOCK_ADJUSTMENT_MAX_QUANTITY', 10000)
        partial_ratio = current_app.config.get('REORDER_PARTIAL_RECEIPT_RATIO', 0.5)

        errors = FieldErrors()
        quantity = errors.integer('quantity_received', quantity_received, 1, max_quantity,
                                  f"Quantity received must be between 1 and {max_quantity:,} units",
                                  required_message='Quantity received is required')
        errors.raise_if_any()

        reorder = ReorderRequestManager.get_request(request_id)
        ReorderRequestManager.status_manager.ensure_can_transition(reorder, REORDER_STATUS_RECEIVED)

        ordered = reorder.quantity_requested
        if quantity > ordered:
            raise QuantityExceedsOrderError(
                f"Quantity received ({quantity}) cannot exceed quantity ordered ({ordered})",
                details={'request_id': reorder.id, 'quantity_received': quantity, 'quantity_requested': ordered}
            )

        product_id = reorder.product_id
        location_id = reorder.location_id
        request_number = reorder.request_number

        result = ActionResult(reorder)
        if quantity < ordered * partial_ratio:
            result.warn(f"Warning: Received only {quantity} out of {ordered} ordered")

        try:
            ReorderRequestManager.status_manager.transition(
                reorder,
                REORDER_STATUS_RECEIVED,
                quantity_received=quantity,
                received_at=datetime.utcnow(),
            )
            StockManager.increment_stock(product_id, location_id, quantity)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Receipt of {request_number} rolled back: {e}")
            raise PersistenceError("Failed to receive reorder request") from e
        except InventoryError:
            db.session.rollback()
            raise

        logger.info(f"Reorder request {request_number} received: {quantity} of {ordered} units")
        if result.has_warnings:
            logger.warning(f"Partial receipt for {request_number}: {quantity} of {ordered} units")
        return result
