from gym_backoffice.data.inventory.category import InventoryCategory
from gym_backoffice.data.inventory.product import Product
from gym_backoffice.data.inventory.stock_level import StockLevel
from gym_backoffice.data.inventory.vendor import Vendor
from gym_backoffice.data.inventory.reorder_request import ReorderRequest

__all__ = [
    'InventoryCategory',
    'Product',
    'StockLevel',
    'Vendor',
    'ReorderRequest',
]
