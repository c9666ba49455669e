#!/usr/bin/env python3
"""
Build orchestrator for the gym back office
Creates tables and sequence counters, then inserts critical reference data
"""

from pathlib import Path
import json

from gym_backoffice import create_app, db
from gym_backoffice.logger import get_logger

logger = get_logger("gym_backoffice.build")

CRITICAL_DATA_FILE = Path(__file__).parent / 'data' / 'build_data_critical.json'


def verify_critical_data(critical_data):
    """
    Verify that every critical location and category is present

    Returns:
        bool: True if all critical data is present, False otherwise
    """
    from gym_backoffice.data.core.location import Location
    from gym_backoffice.data.inventory.category import InventoryCategory

    for location in critical_data['Core']['Locations'].values():
        if Location.query.filter_by(name=location['name']).first() is None:
            logger.warning(f"Location {location['name']} not found")
            return False

    for category in critical_data['Inventory']['Categories'].values():
        if InventoryCategory.query.filter_by(sku_prefix=category['sku_prefix']).first() is None:
            logger.warning(f"Category {category['name']} not found")
            return False

    return True


def insert_critical_data():
    """
    Insert locations and inventory categories that must always be present

    Idempotent: rows are looked up by name / SKU prefix and only missing ones
    are inserted.

    Raises:
        FileNotFoundError: If critical data file not found
        RuntimeError: If critical data insertion fails
    """
    from gym_backoffice.data.core.location import Location
    from gym_backoffice.data.inventory.category import InventoryCategory

    if not CRITICAL_DATA_FILE.exists():
        error_msg = f"Critical data file not found: {CRITICAL_DATA_FILE}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    with open(CRITICAL_DATA_FILE, 'r') as f:
        critical_data = json.load(f)

    if verify_critical_data(critical_data):
        logger.info("Critical data already present, skipping insertion")
        return

    logger.warning("Critical data missing, attempting insertion...")

    try:
        for location in critical_data['Core']['Locations'].values():
            if Location.query.filter_by(name=location['name']).first() is None:
                db.session.add(Location(**location))
                logger.info(f"Inserted location: {location['name']}")

        for category in critical_data['Inventory']['Categories'].values():
            if InventoryCategory.query.filter_by(sku_prefix=category['sku_prefix']).first() is None:
                db.session.add(InventoryCategory(**category))
                logger.info(f"Inserted inventory category: {category['name']}")

        db.session.commit()
    except Exception as e:
        db.session.rollback()
        error_msg = f"Critical data insertion failed: {e}"
        logger.error(error_msg)
        raise RuntimeError(error_msg) from e

    if not verify_critical_data(critical_data):
        error_msg = "Critical data insertion completed but verification failed"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    logger.info("Successfully inserted critical data")


def build_models():
    """Create all tables and the counter tables behind request numbers and SKUs"""
    from gym_backoffice.data.core.sequences import ReorderNumberManager, SkuNumberManager

    db.create_all()
    ReorderNumberManager.create_sequence_if_not_exists()
    SkuNumberManager.create_sequence_if_not_exists()
    logger.info("All database tables created")


def build_database(app=None):
    """
    Main build entry point

    Args:
        app: Flask app to build against; a new one from create_app() when omitted
    """
    app = app or create_app()

    with app.app_context():
        logger.info("Starting database build")
        build_models()

        # Critical data must be present for the application to function
        insert_critical_data()

        logger.info("Database build completed successfully")
