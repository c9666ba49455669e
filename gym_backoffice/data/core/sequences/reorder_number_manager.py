"""
Reorder Number Manager
Manages the request number sequence for ReorderRequest rows (RO-0001, RO-0002, ...)
"""

from flask import current_app

from gym_backoffice import db
from gym_backoffice.data.core.virtual_sequence_generator import VirtualSequenceGenerator


class ReorderNumberManager(VirtualSequenceGenerator):
    """
    Issues unique, strictly increasing reorder request numbers
    """

    @classmethod
    def get_sequence_table_name(cls):
        return "_sequence_reorder_request_number"

    @classmethod
    def get_seed_value(cls, key):
        from gym_backoffice.data.inventory.reorder_request import ReorderRequest

        numbers = db.session.execute(
            db.select(ReorderRequest.request_number).where(ReorderRequest.request_number.like(f"{key}-%"))
        ).scalars().all()
        return cls.highest_suffix(numbers, key)

    @classmethod
    def format_request_number(cls, value, prefix=None, width=None):
        prefix = prefix or current_app.config.get('REORDER_NUMBER_PREFIX', 'RO')
        width = width or current_app.config.get('REORDER_NUMBER_WIDTH', 4)
        return f"{prefix}-{value:0{width}d}"

    @classmethod
    def get_next_request_number(cls):
        """
        Reserve the next request number inside the current transaction
        """
        prefix = current_app.config.get('REORDER_NUMBER_PREFIX', 'RO')
        return cls.format_request_number(cls.get_next_id(prefix), prefix=prefix)
