"""
Shared assertions and lookups for the test modules
"""


def stock_at(product_id, location_id):
    """Current on-hand quantity, 0 when no row exists"""
    from gym_backoffice.data.inventory.stock_level import StockLevel
    level = StockLevel.query.filter_by(product_id=product_id, location_id=location_id).first()
    return level.quantity if level else 0


def set_stock(product_id, location_id, quantity):
    """Set on-hand quantity directly through the stock manager"""
    from gym_backoffice.buisness.inventory.stock.stock_manager import StockManager
    return StockManager.adjust_stock(product_id, location_id, quantity, adjustment_type='set').entity
