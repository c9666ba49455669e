"""
Reorder request lifecycle: create, approve, reject and receive.
"""
import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    QuantityExceedsOrderError,
    ValidationError,
)
from gym_backoffice.buisness.inventory.reorders.reorder_request_manager import ReorderRequestManager
from gym_backoffice.buisness.inventory.shared.status_manager import ReorderStatusManager
from gym_backoffice.buisness.inventory.stock.stock_manager import StockManager
from gym_backoffice.data.inventory.reorder_request import ReorderRequest
from gym_backoffice.test.helpers import stock_at


@pytest.fixture
def product(make_product):
    return make_product(name="Whey Protein 2lb", cost_price=10.00, unit_price=24.99)


def test_create_snapshots_cost_and_starts_pending(product, locations):
    """$10.00 x 20 units totals 200.00 and starts pending with the first number"""
    result = ReorderRequestManager.create_request(product.id, locations['Downtown'].id, 20, requested_by='front desk')
    reorder = result.entity

    assert reorder.status == 'pending'
    assert reorder.unit_cost == 10.00
    assert reorder.total_cost == 200.00
    assert reorder.request_number == 'RO-0001'
    assert reorder.requested_by == 'front desk'
    assert reorder.quantity_received is None
    assert result.warnings == []


def test_create_defaults_requester_to_system(product, make_reorder):
    reorder = make_reorder(product)
    assert reorder.requested_by == 'System'


def test_cost_snapshot_ignores_later_price_changes(product, make_reorder):
    reorder = make_reorder(product, quantity=3)
    product.cost_price = 99.0
    db.session.commit()

    refreshed = db.session.get(ReorderRequest, reorder.id)
    assert refreshed.unit_cost == 10.00
    assert refreshed.total_cost == 30.00


def test_create_rounds_total_to_cents(make_product, make_reorder):
    product = make_product(cost_price=3.33)
    reorder = make_reorder(product, quantity=3)
    assert reorder.total_cost == 9.99


@pytest.mark.parametrize('quantity', [0, -1, 1001, 'ten', 2.5, True, None])
def test_create_rejects_bad_quantity(product, locations, quantity):
    with pytest.raises(ValidationError) as exc_info:
        ReorderRequestManager.create_request(product.id, locations['Downtown'].id, quantity)

    fields = [detail['field'] for detail in exc_info.value.details]
    assert fields == ['quantity']
    assert ReorderRequest.query.count() == 0


def test_create_accepts_quantity_bounds(product, make_reorder):
    assert make_reorder(product, quantity=1).quantity_requested == 1
    assert make_reorder(product, quantity=1000).quantity_requested == 1000


def test_create_reports_every_invalid_field(locations):
    with pytest.raises(ValidationError) as exc_info:
        ReorderRequestManager.create_request(None, None, None)

    fields = {detail['field'] for detail in exc_info.value.details}
    assert fields == {'product_id', 'location_id', 'quantity'}


def test_create_unknown_references(product, locations):
    with pytest.raises(NotFoundError):
        ReorderRequestManager.create_request(9999, locations['Downtown'].id, 5)
    with pytest.raises(NotFoundError):
        ReorderRequestManager.create_request(product.id, 9999, 5)
    with pytest.raises(NotFoundError):
        ReorderRequestManager.create_request(product.id, locations['Downtown'].id, 5, vendor_id=9999)


def test_create_with_vendor(product, make_reorder, make_vendor):
    vendor = make_vendor("Northern Nutrition")
    reorder = make_reorder(product, vendor_id=vendor.id)
    assert reorder.vendor_id == vendor.id


def test_create_rejects_long_notes(product, locations):
    with pytest.raises(ValidationError):
        ReorderRequestManager.create_request(product.id, locations['Downtown'].id, 5, notes='x' * 501)


def test_request_numbers_strictly_increase(product, make_reorder):
    numbers = [make_reorder(product, quantity=1).request_number for _ in range(12)]

    assert len(set(numbers)) == len(numbers)
    suffixes = [int(number.split('-')[1]) for number in numbers]
    assert suffixes == sorted(suffixes)
    assert numbers[0] == 'RO-0001'
    assert numbers[-1] == 'RO-0012'


def test_request_numbers_continue_after_existing_rows(product, locations, make_reorder):
    """A counter seeded on first use never collides with numbers already stored"""
    db.session.add(ReorderRequest(
        request_number='RO-0041',
        product_id=product.id,
        location_id=locations['Downtown'].id,
        quantity_requested=1,
        unit_cost=1.0,
        total_cost=1.0,
    ))
    db.session.commit()

    assert make_reorder(product).request_number == 'RO-0042'


def test_approve_then_receive(product, locations, make_reorder):
    reorder = make_reorder(product, quantity=20)
    downtown = locations['Downtown'].id
    before = stock_at(product.id, downtown)

    approved = ReorderRequestManager.approve_request(reorder.id, 'admin').entity
    assert approved.status == 'approved'
    assert approved.approved_by == 'admin'
    assert approved.approved_at is not None

    result = ReorderRequestManager.receive_request(reorder.id, 15)
    received = result.entity
    assert received.status == 'received'
    assert received.quantity_received == 15
    assert received.received_at is not None
    assert stock_at(product.id, downtown) == before + 15
    assert result.warnings == [], "15 of 20 is above the partial receipt threshold"


def test_partial_receipt_warns_but_succeeds(product, locations, make_reorder):
    reorder = make_reorder(product, quantity=20)
    ReorderRequestManager.approve_request(reorder.id, 'admin')

    result = ReorderRequestManager.receive_request(reorder.id, 5)

    assert result.entity.status == 'received'
    assert result.warnings == ["Warning: Received only 5 out of 20 ordered"]
    assert stock_at(product.id, locations['Downtown'].id) == 5


def test_receipt_at_half_does_not_warn(product, make_reorder):
    reorder = make_reorder(product, quantity=20)
    ReorderRequestManager.approve_request(reorder.id, 'admin')
    assert ReorderRequestManager.receive_request(reorder.id, 10).warnings == []


def test_partial_receipt_ratio_is_configurable(app, product, make_reorder):
    app.config['REORDER_PARTIAL_RECEIPT_RATIO'] = 0.9
    reorder = make_reorder(product, quantity=20)
    ReorderRequestManager.approve_request(reorder.id, 'admin')
    assert ReorderRequestManager.receive_request(reorder.id, 15).has_warnings


def test_approve_requires_approver(product, make_reorder):
    reorder = make_reorder(product)
    with pytest.raises(ValidationError):
        ReorderRequestManager.approve_request(reorder.id, '  ')
    assert db.session.get(ReorderRequest, reorder.id).status == 'pending'


def test_double_approve_keeps_first_approval(product, make_reorder):
    reorder = make_reorder(product)
    first = ReorderRequestManager.approve_request(reorder.id, 'first manager').entity
    approved_at = first.approved_at

    with pytest.raises(InvalidTransitionError) as exc_info:
        ReorderRequestManager.approve_request(reorder.id, 'second manager')

    assert str(exc_info.value.message) == "Only pending requests can be approved"
    assert exc_info.value.details['current_status'] == 'approved'
    stored = db.session.get(ReorderRequest, reorder.id)
    assert stored.approved_by == 'first manager'
    assert stored.approved_at == approved_at


def test_receive_before_approve_fails(product, locations, make_reorder):
    reorder = make_reorder(product)

    with pytest.raises(InvalidTransitionError) as exc_info:
        ReorderRequestManager.receive_request(reorder.id, 5)

    assert exc_info.value.message == "Only approved requests can be marked as received"
    assert db.session.get(ReorderRequest, reorder.id).status == 'pending'
    assert stock_at(product.id, locations['Downtown'].id) == 0


def test_over_receipt_has_no_effect(product, locations, make_reorder):
    reorder = make_reorder(product, quantity=20)
    ReorderRequestManager.approve_request(reorder.id, 'admin')

    with pytest.raises(QuantityExceedsOrderError) as exc_info:
        ReorderRequestManager.receive_request(reorder.id, 21)

    assert exc_info.value.message == "Quantity received (21) cannot exceed quantity ordered (20)"
    stored = db.session.get(ReorderRequest, reorder.id)
    assert stored.status == 'approved'
    assert stored.quantity_received is None
    assert stock_at(product.id, locations['Downtown'].id) == 0


def test_receive_rejects_zero_quantity(product, make_reorder):
    reorder = make_reorder(product)
    ReorderRequestManager.approve_request(reorder.id, 'admin')
    with pytest.raises(ValidationError):
        ReorderRequestManager.receive_request(reorder.id, 0)


def test_received_is_terminal(product, make_reorder):
    reorder = make_reorder(product, quantity=4)
    ReorderRequestManager.approve_request(reorder.id, 'admin')
    ReorderRequestManager.receive_request(reorder.id, 4)

    with pytest.raises(InvalidTransitionError):
        ReorderRequestManager.receive_request(reorder.id, 4)
    with pytest.raises(InvalidTransitionError):
        ReorderRequestManager.reject_request(reorder.id, 'admin', 'late')


def test_reject_appends_reason_to_notes(product, make_reorder):
    reorder = make_reorder(product, notes='Running low before the weekend')

    rejected = ReorderRequestManager.reject_request(reorder.id, 'owner', 'Budget frozen').entity

    assert rejected.status == 'rejected'
    assert rejected.notes == "Running low before the weekend\nRejected by: owner\nReason: Budget frozen"


def test_reject_defaults(product, make_reorder):
    reorder = make_reorder(product)
    rejected = ReorderRequestManager.reject_request(reorder.id).entity
    assert rejected.notes == "Rejected by: Admin\nReason: No reason provided"


def test_rejected_cannot_be_approved(product, make_reorder):
    reorder = make_reorder(product)
    ReorderRequestManager.reject_request(reorder.id, 'owner', 'Budget frozen')

    with pytest.raises(InvalidTransitionError) as exc_info:
        ReorderRequestManager.approve_request(reorder.id, 'admin')

    assert exc_info.value.details['current_status'] == 'rejected'
    assert db.session.get(ReorderRequest, reorder.id).approved_by is None


def test_approved_cannot_be_rejected(product, make_reorder):
    reorder = make_reorder(product)
    ReorderRequestManager.approve_request(reorder.id, 'admin')
    with pytest.raises(InvalidTransitionError) as exc_info:
        ReorderRequestManager.reject_request(reorder.id, 'owner', 'changed my mind')
    assert exc_info.value.message == "Only pending requests can be rejected"


def test_unknown_request(app):
    with pytest.raises(NotFoundError):
        ReorderRequestManager.approve_request(12345, 'admin')
    with pytest.raises(NotFoundError):
        ReorderRequestManager.reject_request(12345)
    with pytest.raises(NotFoundError):
        ReorderRequestManager.receive_request(12345, 1)


def test_receive_rolls_back_when_stock_update_fails(product, locations, make_reorder, monkeypatch):
    """Status change and stock increment commit together or not at all"""
    reorder = make_reorder(product, quantity=20)
    ReorderRequestManager.approve_request(reorder.id, 'admin')

    def failing_increment(product_id, location_id, delta):
        raise OperationalError("UPDATE inventory_stock", {}, Exception("database is locked"))

    monkeypatch.setattr(StockManager, 'increment_stock', staticmethod(failing_increment))

    with pytest.raises(PersistenceError):
        ReorderRequestManager.receive_request(reorder.id, 20)

    stored = db.session.get(ReorderRequest, reorder.id)
    assert stored.status == 'approved'
    assert stored.quantity_received is None
    assert stored.received_at is None
    assert stock_at(product.id, locations['Downtown'].id) == 0


def test_stale_status_loses_to_concurrent_change(product, make_reorder):
    """A caller holding an outdated copy cannot overwrite a decision made meanwhile"""
    reorder = make_reorder(product)
    stale = db.session.get(ReorderRequest, reorder.id)
    assert stale.status == 'pending'

    db.session.execute(
        update(ReorderRequest)
        .where(ReorderRequest.id == reorder.id)
        .values(status='rejected')
        .execution_options(synchronize_session=False)
    )

    with pytest.raises(InvalidTransitionError) as exc_info:
        ReorderStatusManager().transition(stale, 'approved', approved_by='late manager')

    assert exc_info.value.details['current_status'] == 'rejected'
    db.session.commit()
    db.session.expire_all()
    assert db.session.get(ReorderRequest, reorder.id).approved_by is None
