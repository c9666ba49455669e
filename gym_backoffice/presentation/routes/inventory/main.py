"""
Inventory API - blueprint, error translation and route registration
"""
from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import InventoryError, PersistenceError
from gym_backoffice.logger import get_logger

# Import route modules
from gym_backoffice.presentation.routes.inventory.reorders import register_reorder_routes
from gym_backoffice.presentation.routes.inventory.catalog import register_catalog_routes
from gym_backoffice.presentation.routes.inventory.stock import register_stock_routes
from gym_backoffice.presentation.routes.inventory.vendors import register_vendor_routes

logger = get_logger("gym_backoffice.routes.inventory")

# Create inventory blueprint
inventory_bp = Blueprint('inventory', __name__)


@inventory_bp.errorhandler(InventoryError)
def handle_inventory_error(error):
    """Translate business-layer failures to {error, code, details}"""
    if isinstance(error, PersistenceError):
        logger.error(f"Persistence failure: {error}")
    else:
        logger.info(f"Request rejected: {error}")
    return jsonify(error.to_dict()), error.status_code


@inventory_bp.errorhandler(SQLAlchemyError)
def handle_database_error(error):
    """Store failures outside a manager transaction (read views) get the same opaque 500"""
    db.session.rollback()
    logger.error(f"Database error while serving request: {error}")
    persistence_error = PersistenceError()
    return jsonify(persistence_error.to_dict()), persistence_error.status_code


# Register all route modules
try:
    register_reorder_routes(inventory_bp)
    logger.debug("Registered reorder routes")
except Exception as e:
    logger.error(f"Failed to register reorder routes: {e}", exc_info=True)
    raise

try:
    register_catalog_routes(inventory_bp)
    logger.debug("Registered catalog routes")
except Exception as e:
    logger.error(f"Failed to register catalog routes: {e}", exc_info=True)
    raise

try:
    register_stock_routes(inventory_bp)
    logger.debug("Registered stock routes")
except Exception as e:
    logger.error(f"Failed to register stock routes: {e}", exc_info=True)
    raise

try:
    register_vendor_routes(inventory_bp)
    logger.debug("Registered vendor routes")
except Exception as e:
    logger.error(f"Failed to register vendor routes: {e}", exc_info=True)
    raise
