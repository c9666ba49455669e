from __future__ import annotations

from gym_backoffice.data.inventory.reorder_request import (
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_PENDING,
    REORDER_STATUS_RECEIVED,
    REORDER_STATUS_REJECTED,
)


class ReorderStatusValidator:
    """Allowed reorder request transitions: pending -> approved -> received, pending -> rejected."""

    TRANSITIONS: dict[str, frozenset[str]] = {
        REORDER_STATUS_PENDING: frozenset({REORDER_STATUS_APPROVED, REORDER_STATUS_REJECTED}),
        REORDER_STATUS_APPROVED: frozenset({REORDER_STATUS_RECEIVED}),
        REORDER_STATUS_REJECTED: frozenset(),
        REORDER_STATUS_RECEIVED: frozenset(),
    }

    @classmethod
    def can_transition(cls, from_status: str | None, to_status: str) -> bool:
        return to_status in cls.TRANSITIONS.get(from_status, frozenset())

    @classmethod
    def required_source(cls, to_status: str) -> str:
        """The single status a request must be in to move to ``to_status``."""
        sources = [status for status, targets in cls.TRANSITIONS.items() if to_status in targets]
        if len(sources) != 1:
            raise ValueError(f"No unique source status for {to_status}")
        return sources[0]
