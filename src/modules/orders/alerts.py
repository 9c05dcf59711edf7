"""Delivery alert classification for purchase orders.

Every order shown in the list carries a derived alert color and label.
Both are recomputed on each read from the manual status, the creation
timestamp and the expected delivery date; nothing here is persisted.

Rules are evaluated top to bottom and the first match wins:

1. ``cancelado`` / ``devolvido``  -> ``standby``
2. ``recebido``                   -> ``sem_cor``
3. no delivery schedule           -> ``sem_cor``
4. delivery date already passed   -> ``atrasado``
5. delivery within the awaiting window (0..2 days by default)
                                  -> ``aguardando``
6. ``enviado_fornecedor``         -> ``em_transito`` from day 2 after
                                     creation, ``enviado`` before that
7. day 3 after creation, or ``em_transito`` -> ``em_transito``
8. otherwise                      -> ``emitido``

Day counts compare calendar days: all dates are truncated to midnight
before subtracting, so the result does not depend on the time of day
the list is rendered.  ``today`` is always passed in by the caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Optional, Union

from modules.orders.constants import (
    AUTO_TRANSIT_DAYS,
    DEFAULT_AWAITING_DELIVERY_DAYS,
    SENT_TO_SUPPLIER_TRANSIT_DAYS,
    STANDBY_STATES,
    AlertColor,
    OrderStatus,
)

if TYPE_CHECKING:
    from modules.orders.dtos import OrderScheduleDTO

DateLike = Union[date, datetime]

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class OrderAlert:
    alert_color: str
    status_display: str
    days_remaining: Optional[int]


def normalize_to_midnight(value: DateLike) -> datetime:
    """Drop the time of day, keeping the calendar date."""
    if isinstance(value, datetime):
        return datetime.combine(value.date(), time.min)
    return datetime.combine(value, time.min)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (normalize_to_midnight(end) - normalize_to_midnight(start)).days


def days_remaining(expected: DateLike, today: DateLike) -> int:
    """Days left until ``expected``, rounded up; negative once overdue.

    Unlike ``days_between`` this keeps the time of day, so a delivery
    due later today still counts as one day remaining.
    """
    delta = _as_datetime(expected) - _as_datetime(today)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def status_label(status: str) -> str:
    if status in OrderStatus.values:
        return OrderStatus(status).label
    return status


def classify(
    schedule: OrderScheduleDTO,
    today: DateLike,
    awaiting_days: int = DEFAULT_AWAITING_DELIVERY_DAYS,
) -> OrderAlert:
    """Compute the alert color, status label and days remaining of one order.

    Raises:
        TypeError: ``schedule`` is ``None``.
    """
    if schedule is None:
        raise TypeError("classify() requires an order schedule, got None.")

    status = schedule.manual_status
    expected = schedule.expected_delivery_date
    remaining = days_remaining(expected, today) if expected is not None else None

    def alert(color: AlertColor, label: Optional[str] = None) -> OrderAlert:
        return OrderAlert(color, label or color.label, remaining)

    if status in STANDBY_STATES:
        return alert(AlertColor.STANDBY, status_label(status))
    if status == OrderStatus.RECEBIDO:
        return alert(AlertColor.SEM_COR, OrderStatus.RECEBIDO.label)
    if (
        schedule.delivery_deadline_days is None
        or expected is None
        or schedule.created_at is None
    ):
        return alert(AlertColor.SEM_COR, status_label(status))

    since_creation = days_between(schedule.created_at, today)
    until_delivery = days_between(today, expected)

    if until_delivery < 0:
        return alert(AlertColor.ATRASADO)
    if until_delivery <= awaiting_days:
        return alert(AlertColor.AGUARDANDO)
    if status == OrderStatus.ENVIADO_FORNECEDOR:
        if since_creation >= SENT_TO_SUPPLIER_TRANSIT_DAYS:
            return alert(AlertColor.EM_TRANSITO)
        return alert(AlertColor.ENVIADO)
    if since_creation >= AUTO_TRANSIT_DAYS or status == OrderStatus.EM_TRANSITO:
        return alert(AlertColor.EM_TRANSITO)
    return alert(AlertColor.EMITIDO)


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)
