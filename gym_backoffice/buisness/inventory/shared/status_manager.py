from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import update

from gym_backoffice import db
from gym_backoffice.buisness.inventory.exceptions import InvalidTransitionError
from gym_backoffice.buisness.inventory.shared.status_validator import ReorderStatusValidator
from gym_backoffice.data.inventory.reorder_request import (
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_RECEIVED,
    REORDER_STATUS_REJECTED,
    ReorderRequest,
)


@dataclass(frozen=True)
class StatusChange:
    entity_type: str
    entity_id: int
    from_status: str | None
    to_status: str


class ReorderStatusManager:
    """
    Reorder-request status manager.

    This class is responsible for:
    - validating transitions against ReorderStatusValidator
    - writing the new status with a conditional update, so only one of several
      concurrent callers can move a request out of a given status

    It never commits; callers own the transaction.
    """

    ACTION_LABELS = {
        REORDER_STATUS_APPROVED: "approved",
        REORDER_STATUS_REJECTED: "rejected",
        REORDER_STATUS_RECEIVED: "marked as received",
    }

    def _transition_error(self, reorder: ReorderRequest, current_status: str | None, new_status: str) -> InvalidTransitionError:
        expected = ReorderStatusValidator.required_source(new_status)
        action = self.ACTION_LABELS.get(new_status, new_status)
        return InvalidTransitionError(
            f"Only {expected} requests can be {action}",
            details={
                'request_id': reorder.id,
                'request_number': reorder.request_number,
                'current_status': current_status,
                'attempted_status': new_status,
                'expected_status': expected,
            }
        )

    def ensure_can_transition(self, reorder: ReorderRequest, new_status: str) -> None:
        if not ReorderStatusValidator.can_transition(reorder.status, new_status):
            raise self._transition_error(reorder, reorder.status, new_status)

    def transition(self, reorder: ReorderRequest, new_status: str, **values) -> StatusChange:
        """
        Move ``reorder`` to ``new_status`` and write ``values`` in the same statement.

        Raises InvalidTransitionError when the stored status does not allow the
        move, including when another caller changed it after ``reorder`` was read.
        """
        old_status = reorder.status
        reorder_id = reorder.id
        self.ensure_can_transition(reorder, new_status)

        result = db.session.execute(
            update(ReorderRequest)
            .where(ReorderRequest.id == reorder_id, ReorderRequest.status == old_status)
            .values(status=new_status, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = db.session.execute(
                db.select(ReorderRequest.status).where(ReorderRequest.id == reorder_id)
            ).scalar()
            raise self._transition_error(reorder, current, new_status)

        db.session.expire(reorder)
        return StatusChange("reorder_request", reorder_id, old_status, new_status)
