"""
Sequence ID Managers
Manages counter tables for display numbers
"""

from gym_backoffice.data.core.sequences.reorder_number_manager import ReorderNumberManager
from gym_backoffice.data.core.sequences.sku_number_manager import SkuNumberManager

__all__ = [
    'ReorderNumberManager',
    'SkuNumberManager',
]
