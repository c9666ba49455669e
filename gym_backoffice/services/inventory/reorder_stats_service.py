"""
Reorder Stats Service
Dashboard counters and chart feeds for the reorder ledger, recomputed on every call.
"""

from datetime import datetime, timedelta

from gym_backoffice import db
from gym_backoffice.data.inventory.reorder_request import (
    REORDER_STATUS_APPROVED,
    REORDER_STATUS_PENDING,
    REORDER_STATUS_RECEIVED,
    REORDER_STATUS_REJECTED,
    REORDER_STATUSES,
    ReorderRequest,
)

STATUS_COLORS = {
    REORDER_STATUS_PENDING: '#f59e0b',
    REORDER_STATUS_APPROVED: '#10b981',
    REORDER_STATUS_RECEIVED: '#3b82f6',
    REORDER_STATUS_REJECTED: '#ef4444',
}
FALLBACK_COLOR = '#6b7280'
TREND_DAYS = 7


class ReorderStatsService:

    @staticmethod
    def get_stats(now=None):
        """
        pending_count, pending_value, completed_this_week and total_requests.

        completed_this_week counts approved or received requests whose request
        date falls in the trailing seven days.
        """
        now = now or datetime.utcnow()
        week_ago = now - timedelta(days=TREND_DAYS)

        pending_count, pending_value = db.session.query(
            db.func.count(ReorderRequest.id),
            db.func.coalesce(db.func.sum(ReorderRequest.total_cost), 0),
        ).filter(ReorderRequest.status == REORDER_STATUS_PENDING).one()

        completed_this_week = ReorderRequest.query.filter(
            ReorderRequest.status.in_((REORDER_STATUS_APPROVED, REORDER_STATUS_RECEIVED)),
            ReorderRequest.created_at >= week_ago,
        ).count()

        return {
            'pending_count': pending_count,
            'pending_value': round(float(pending_value or 0), 2),
            'completed_this_week': completed_this_week,
            'total_requests': ReorderRequest.query.count(),
        }

    @staticmethod
    def get_status_breakdown():
        """Doughnut chart feed: one entry per status that has requests"""
        counts = dict(
            db.session.query(ReorderRequest.status, db.func.count(ReorderRequest.id))
            .group_by(ReorderRequest.status)
            .all()
        )

        ordered = [status for status in REORDER_STATUSES if status in counts]
        ordered += sorted(status for status in counts if status not in REORDER_STATUSES)

        return {
            'labels': [status.capitalize() for status in ordered],
            'values': [counts[status] for status in ordered],
            'colors': [STATUS_COLORS.get(status, FALLBACK_COLOR) for status in ordered],
        }

    @staticmethod
    def get_trends(now=None, days=TREND_DAYS):
        """Requests per day for the last ``days`` days, today included, zero-filled"""
        today = (now or datetime.utcnow()).date()
        first_day = today - timedelta(days=days - 1)
        start = datetime.combine(first_day, datetime.min.time())

        counts = {}
        for (created_at,) in db.session.query(ReorderRequest.created_at).filter(ReorderRequest.created_at >= start):
            day = created_at.date()
            counts[day] = counts.get(day, 0) + 1

        series = [first_day + timedelta(days=offset) for offset in range(days)]
        return {
            'labels': [f"{day:%b} {day.day}" for day in series],
            'values': [counts.get(day, 0) for day in series],
        }
