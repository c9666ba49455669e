"""
Pytest configuration and fixtures for the gym back office
"""
import os
import tempfile
from pathlib import Path

# Keep test runs out of the project's logs/ directory
os.environ.setdefault('LOG_DIR', str(Path(tempfile.gettempdir()) / 'gym_backoffice_test_logs'))

import pytest

from gym_backoffice import create_app
from gym_backoffice import db as _db
from gym_backoffice.build import build_database


@pytest.fixture(scope='function')
def app():
    """Flask application on a fresh in-memory database with critical data"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'RATELIMIT_ENABLED': False,
    })
    build_database(app)

    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def locations(app):
    """The seeded locations keyed by name"""
    from gym_backoffice.data.core.location import Location
    return {location.name: location for location in Location.query.all()}


@pytest.fixture
def categories(app):
    """The seeded inventory categories keyed by name"""
    from gym_backoffice.data.inventory.category import InventoryCategory
    return {category.name: category for category in InventoryCategory.query.all()}


@pytest.fixture
def make_product(app, categories):
    """Factory creating products through ProductManager"""
    from gym_backoffice.buisness.inventory.catalog.product_manager import ProductManager

    counter = {'n': 0}

    def _make(name=None, category='Supplements', unit_price=20.00, cost_price=10.00,
              reorder_point=10, reorder_quantity=25, **extra):
        counter['n'] += 1
        data = {
            'name': name or f"Test Product {counter['n']}",
            'category_id': categories[category].id,
            'unit_price': unit_price,
            'cost_price': cost_price,
            'reorder_point': reorder_point,
            'reorder_quantity': reorder_quantity,
        }
        data.update(extra)
        return ProductManager.create_product(data).entity

    return _make


@pytest.fixture
def make_vendor(app):
    """Factory creating vendors through VendorManager"""
    from gym_backoffice.buisness.inventory.vendors.vendor_manager import VendorManager

    counter = {'n': 0}

    def _make(vendor_name=None, category='Supplies', **extra):
        counter['n'] += 1
        data = {'vendor_name': vendor_name or f"Vendor Number {counter['n']}", 'category': category}
        data.update(extra)
        return VendorManager.create_vendor(data).entity

    return _make


@pytest.fixture
def make_reorder(app, locations):
    """Factory creating pending reorder requests"""
    from gym_backoffice.buisness.inventory.reorders.reorder_request_manager import ReorderRequestManager

    def _make(product, quantity=20, location='Downtown', **extra):
        return ReorderRequestManager.create_request(
            product_id=product.id,
            location_id=locations[location].id,
            quantity=quantity,
            **extra
        ).entity

    return _make
