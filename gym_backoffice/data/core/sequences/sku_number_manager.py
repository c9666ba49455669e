"""
SKU Number Manager
Manages one SKU sequence per category prefix (SUPP-001, BEV-001, ...)
"""

from flask import current_app

from gym_backoffice import db
from gym_backoffice.data.core.virtual_sequence_generator import VirtualSequenceGenerator


class SkuNumberManager(VirtualSequenceGenerator):

    @classmethod
    def get_sequence_table_name(cls):
        return "_sequence_product_sku"

    @classmethod
    def get_seed_value(cls, key):
        from gym_backoffice.data.inventory.product import Product

        skus = db.session.execute(
            db.select(Product.sku).where(Product.sku.like(f"{key}-%"))
        ).scalars().all()
        return cls.highest_suffix(skus, key)

    @classmethod
    def get_next_sku(cls, prefix):
        width = current_app.config.get('SKU_NUMBER_WIDTH', 3)
        return f"{prefix}-{cls.get_next_id(prefix):0{width}d}"
