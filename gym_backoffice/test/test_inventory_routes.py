"""
HTTP surface of the inventory API: status codes and JSON bodies.
"""
import pytest
from sqlalchemy.exc import OperationalError

from gym_backoffice import create_app
from gym_backoffice import db as _db
from gym_backoffice.build import build_database
from gym_backoffice.services.inventory.reorder_search_service import ReorderSearchService
from gym_backoffice.test.helpers import stock_at

API = '/api/inventory'


@pytest.fixture
def product(make_product):
    return make_product(name='Electrolyte Drink 500ml', category='Beverages', cost_price=10.00, unit_price=3.00)


def _create_reorder(client, product, location, quantity=20, **extra):
    body = {'product_id': product.id, 'location_id': location.id, 'quantity': quantity}
    body.update(extra)
    return client.post(f'{API}/reorders', json=body)


def test_health(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_reorder_happy_path(client, product, locations):
    downtown = locations['Downtown']

    response = _create_reorder(client, product, downtown, requested_by='front desk')
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    assert body['request']['status'] == 'pending'
    assert body['request']['total_cost'] == 200.00
    request_id = body['request']['id']

    response = client.put(f'{API}/reorders/{request_id}/approve', json={'approved_by': 'admin'})
    assert response.status_code == 200
    assert response.get_json()['request']['approved_by'] == 'admin'

    response = client.put(f'{API}/reorders/{request_id}/receive', json={'quantity_received': 5})
    assert response.status_code == 200
    body = response.get_json()
    assert body['request']['status'] == 'received'
    assert body['warnings'] == ["Warning: Received only 5 out of 20 ordered"]
    assert stock_at(product.id, downtown.id) == 5


def test_receive_without_warning_omits_warnings(client, product, locations):
    request_id = _create_reorder(client, product, locations['Midtown']).get_json()['request']['id']
    client.put(f'{API}/reorders/{request_id}/approve', json={'approved_by': 'admin'})

    body = client.put(f'{API}/reorders/{request_id}/receive', json={'quantity_received': 20}).get_json()
    assert 'warnings' not in body


def test_create_validation_error_body(client, product, locations):
    response = _create_reorder(client, product, locations['Downtown'], quantity=5000)

    assert response.status_code == 400
    body = response.get_json()
    assert body['code'] == 'VALIDATION_FAILED'
    assert body['details'] == [{'field': 'quantity', 'message': 'Quantity must be between 1 and 1,000 units'}]


def test_non_object_body_is_rejected(client):
    response = client.post(f'{API}/reorders', json=[1, 2, 3])
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Request body must be a JSON object'


def test_create_unknown_product_is_404(client, locations):
    response = client.post(f'{API}/reorders', json={'product_id': 999, 'location_id': locations['Downtown'].id,
                                                     'quantity': 1})
    assert response.status_code == 404
    assert response.get_json() == {
        'error': 'Product not found',
        'code': 'NOT_FOUND',
        'details': {'entity': 'Product', 'id': 999},
    }


def test_invalid_transition_is_400(client, product, locations):
    request_id = _create_reorder(client, product, locations['Downtown']).get_json()['request']['id']

    response = client.put(f'{API}/reorders/{request_id}/receive', json={'quantity_received': 5})

    assert response.status_code == 400
    body = response.get_json()
    assert body['code'] == 'INVALID_TRANSITION'
    assert body['error'] == 'Only approved requests can be marked as received'


def test_over_receipt_is_400(client, product, locations):
    request_id = _create_reorder(client, product, locations['Downtown']).get_json()['request']['id']
    client.put(f'{API}/reorders/{request_id}/approve', json={'approved_by': 'admin'})

    response = client.put(f'{API}/reorders/{request_id}/receive', json={'quantity_received': 25})

    assert response.status_code == 400
    assert response.get_json()['code'] == 'QUANTITY_EXCEEDS_ORDER'


def test_reject_and_then_approve(client, product, locations):
    request_id = _create_reorder(client, product, locations['Downtown']).get_json()['request']['id']

    response = client.put(f'{API}/reorders/{request_id}/reject',
                          json={'rejected_by': 'owner', 'rejection_reason': 'Budget frozen'})
    assert response.status_code == 200
    assert response.get_json()['request']['notes'].endswith('Reason: Budget frozen')

    response = client.put(f'{API}/reorders/{request_id}/approve', json={'approved_by': 'admin'})
    assert response.status_code == 400


def test_list_orders_by_status_priority_and_filters(client, product, locations):
    ids = [_create_reorder(client, product, locations['Downtown']).get_json()['request']['id'] for _ in range(3)]
    other = _create_reorder(client, product, locations['Eastside']).get_json()['request']['id']
    client.put(f'{API}/reorders/{ids[0]}/reject', json={})
    client.put(f'{API}/reorders/{ids[1]}/approve', json={'approved_by': 'admin'})

    listed = client.get(f'{API}/reorders').get_json()['requests']
    assert [row['status'] for row in listed] == ['pending', 'pending', 'approved', 'rejected']
    assert listed[0]['product_name'] == 'Electrolyte Drink 500ml'
    assert listed[0]['category_name'] == 'Beverages'

    pending = client.get(f'{API}/reorders', query_string={'status': 'pending'}).get_json()['requests']
    assert {row['id'] for row in pending} == {ids[2], other}

    everything = client.get(f'{API}/reorders', query_string={'status': 'all'}).get_json()['requests']
    assert len(everything) == 4

    eastside = client.get(f'{API}/reorders', query_string={'location_id': locations['Eastside'].id}).get_json()
    assert [row['id'] for row in eastside['requests']] == [other]


def test_list_rejects_bad_filters(client):
    response = client.get(f'{API}/reorders', query_string={'status': 'lost', 'date_from': '03/01/2026'})
    assert response.status_code == 400
    fields = {detail['field'] for detail in response.get_json()['details']}
    assert fields == {'status', 'date_from'}


def test_list_date_range_is_inclusive(client, product, locations):
    _create_reorder(client, product, locations['Downtown'])
    today = client.get(f'{API}/reorders').get_json()['requests'][0]['requested_at'][:10]

    same_day = client.get(f'{API}/reorders', query_string={'date_from': today, 'date_to': today}).get_json()
    assert len(same_day['requests']) == 1


def test_get_reorder(client, product, locations):
    request_id = _create_reorder(client, product, locations['Downtown']).get_json()['request']['id']

    body = client.get(f'{API}/reorders/{request_id}').get_json()
    assert body['request_number'] == 'RO-0001'
    assert body['unit_price'] == 3.00
    assert body['location_name'] == 'Downtown'

    assert client.get(f'{API}/reorders/999').status_code == 404


def test_reorder_stats_endpoints(client, product, locations):
    _create_reorder(client, product, locations['Downtown'])
    assert client.get(f'{API}/reorders/stats').get_json()['pending_count'] == 1
    assert client.get(f'{API}/reorders/chart/status-breakdown').get_json()['labels'] == ['Pending']
    assert len(client.get(f'{API}/reorders/chart/trends').get_json()['values']) == 7


def test_product_endpoints(client, categories, locations):
    response = client.post(f'{API}/products', json={
        'name': 'Yoga Mat 6mm',
        'category_id': categories['Equipment'].id,
        'unit_price': '29.99',
        'cost_price': '35.00',
        'reorder_point': 5,
        'reorder_quantity': 15,
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body['product']['sku'] == 'EQUIP-001'
    assert body['warnings'] == ["Cost price exceeds selling price - this will result in a loss"]
    product_id = body['product']['id']

    detail = client.get(f'{API}/products/{product_id}').get_json()
    assert detail['total_quantity'] == 0
    assert detail['stock_state'] == 'out_of_stock'
    assert len(detail['stock_by_location']) == len(locations)

    response = client.put(f'{API}/stock/{product_id}/{locations["Midtown"].id}',
                          json={'quantity': 12, 'adjustment_type': 'add', 'adjustment_reason': 'Opening count'})
    assert response.status_code == 200
    assert response.get_json()['stock']['quantity'] == 12

    listed = client.get(f'{API}/products', query_string={'stock_status': 'in_stock'}).get_json()['products']
    assert [p['id'] for p in listed] == [product_id]

    unfiltered = client.get(f'{API}/products', query_string={
        'stock_status': 'all', 'status': 'all', 'category': 'all', 'location': 'all',
    })
    assert unfiltered.status_code == 200
    assert [p['id'] for p in unfiltered.get_json()['products']] == [product_id]

    searched = client.get(f'{API}/products', query_string={'search': 'yoga'}).get_json()['products']
    assert len(searched) == 1

    response = client.delete(f'{API}/products/{product_id}')
    assert response.get_json()['product']['status'] == 'inactive'
    inactive = client.get(f'{API}/products', query_string={'status': 'active'}).get_json()['products']
    assert inactive == []


def test_reference_data(client):
    categories = client.get(f'{API}/categories').get_json()
    assert [c['name'] for c in categories] == ['Beverages', 'Equipment', 'Merchandise', 'Supplements', 'Supplies']
    assert all(c['product_count'] == 0 for c in categories)

    locations = client.get(f'{API}/locations').get_json()
    assert [loc['name'] for loc in locations] == ['Downtown', 'Eastside', 'Midtown']


def test_inventory_dashboard_endpoints(client, product):
    assert client.get(f'{API}/stats').get_json()['total_products'] == 1
    assert client.get(f'{API}/chart/stock-health').get_json()['values'] == [0, 0, 1]
    assert 'product_counts' in client.get(f'{API}/chart/stock-by-category').get_json()


def test_stock_adjustment_errors(client, product, locations):
    response = client.put(f'{API}/stock/{product.id}/{locations["Downtown"].id}',
                          json={'quantity': 3, 'adjustment_type': 'subtract'})
    assert response.status_code == 400

    response = client.put(f'{API}/stock/999/{locations["Downtown"].id}', json={'quantity': 3})
    assert response.status_code == 404


def test_vendor_endpoints(client, product, locations):
    response = client.post(f'{API}/vendors', json={
        'vendor_name': 'Hydration Partners',
        'category': 'Supplies',
        'email': 'sales@hydration.example',
        'phone': '(905) 555-1212',
    })
    assert response.status_code == 201
    vendor_id = response.get_json()['vendor']['id']

    duplicate = client.post(f'{API}/vendors', json={'vendor_name': 'Hydration Partners', 'category': 'Supplies'})
    assert duplicate.status_code == 400

    _create_reorder(client, product, locations['Downtown'], quantity=10, vendor_id=vendor_id)

    detail = client.get(f'{API}/vendors/{vendor_id}').get_json()
    assert detail['total_orders'] == 1
    assert detail['total_spent'] == 100.00
    assert detail['avg_order_value'] == 100.00

    orders = client.get(f'{API}/vendors/{vendor_id}/orders').get_json()['orders']
    assert orders[0]['product_sku'] == product.sku

    listed = client.get(f'{API}/vendors', query_string={'search': 'hydration'}).get_json()['vendors']
    assert [v['id'] for v in listed] == [vendor_id]

    response = client.put(f'{API}/vendors/{vendor_id}', json={
        'vendor_name': 'Hydration Partners Ltd',
        'category': 'Supplies',
    })
    assert response.get_json()['vendor']['vendor_name'] == 'Hydration Partners Ltd'

    assert client.delete(f'{API}/vendors/{vendor_id}').get_json()['vendor']['status'] == 'Inactive'
    assert client.get(f'{API}/vendors/stats').get_json()['total_vendors'] == 0
    assert client.get(f'{API}/vendors/chart/spending').get_json()['labels'] == []
    assert len(client.get(f'{API}/vendors/chart/trends').get_json()['labels']) == 6

    assert client.get(f'{API}/vendors/4040').status_code == 404
    assert client.get(f'{API}/vendors/4040/orders').status_code == 404


def test_read_endpoint_database_failure_is_json_500(client, monkeypatch):
    def failing_list(filters=None):
        raise OperationalError("SELECT reorder_requests", {}, Exception("database is locked"))

    monkeypatch.setattr(ReorderSearchService, 'list_requests', staticmethod(failing_list))

    response = client.get(f'{API}/reorders')
    assert response.status_code == 500
    assert response.is_json
    body = response.get_json()
    assert body['code'] == 'PERSISTENCE_FAILURE'
    assert body['error'] == "The operation could not be saved"
    assert 'database is locked' not in response.get_data(as_text=True)


def test_rate_limit_returns_json_429():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'RATELIMIT_ENABLED': True,
        'RATELIMIT_DEFAULT': '2 per minute',
    })
    build_database(app)
    client = app.test_client()

    try:
        assert client.get(f'{API}/categories').status_code == 200
        assert client.get(f'{API}/categories').status_code == 200

        response = client.get(f'{API}/categories')
        assert response.status_code == 429
        body = response.get_json()
        assert body['code'] == 'RATE_LIMITED'
        assert body['error'] == 'Too many requests'
    finally:
        with app.app_context():
            _db.session.remove()
            _db.drop_all()
