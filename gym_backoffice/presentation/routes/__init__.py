"""
Routes package for the gym back office
JSON API blueprints, one per business area
"""

from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .inventory.main import inventory_bp
    app.register_blueprint(inventory_bp, url_prefix='/api/inventory')

    logger.info("All route blueprints registered successfully")
