"""Order list assembly: classify, filter, then sort by alert priority.

Operates on an already-loaded batch of orders and never touches the
database.  The incoming order (creation time, newest first) is kept as
the tie-break between orders with the same alert priority.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Union

import structlog

from modules.orders.alerts import OrderAlert, classify, status_label
from modules.orders.constants import (
    ALERT_PRIORITY,
    DEFAULT_AWAITING_DELIVERY_DAYS,
    DISPLAY_DATE_FORMAT,
    AlertColor,
)
from modules.orders.dtos import OrderListFiltersDTO, OrderScheduleDTO

if TYPE_CHECKING:
    from modules.orders.models import Order

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClassifiedOrder:
    order: Order
    alert: OrderAlert
    schedule: Optional[OrderScheduleDTO] = None

    @property
    def priority(self) -> int:
        return ALERT_PRIORITY.get(self.alert.alert_color, ALERT_PRIORITY[AlertColor.SEM_COR])

    @property
    def display_date(self) -> str:
        if self.schedule is None or self.schedule.created_at is None:
            return ""
        return self.schedule.created_at.strftime(DISPLAY_DATE_FORMAT)


def classify_order(
    order: Any,
    today: Union[date, datetime],
    awaiting_days: int = DEFAULT_AWAITING_DELIVERY_DAYS,
) -> ClassifiedOrder:
    """Classify one order, degrading to ``sem_cor`` when its fields are unusable."""
    try:
        schedule = OrderScheduleDTO.from_entity(order)
        alert = classify(schedule, today, awaiting_days)
    except (AttributeError, TypeError, ValueError) as exc:
        logger.warning(
            "order.classification_degraded",
            order_id=str(getattr(order, "id", "")),
            error=str(exc),
        )
        status = str(getattr(order, "status", "") or "")
        label = status_label(status) or AlertColor.SEM_COR.label
        return ClassifiedOrder(order, OrderAlert(AlertColor.SEM_COR, label, None))
    return ClassifiedOrder(order, alert, schedule)


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def matches(item: ClassifiedOrder, filters: OrderListFiltersDTO) -> bool:
    """True when every supplied filter matches ``item``."""
    if filters.code and not _contains(str(getattr(item.order, "code", "") or ""), filters.code):
        return False
    if filters.date and not _contains(item.display_date, filters.date):
        return False
    if filters.status:
        labels = (
            item.alert.status_display,
            status_label(str(getattr(item.order, "status", "") or "")),
        )
        if not any(_contains(label, filters.status) for label in labels):
            return False
    return True


def assemble(
    orders: Iterable[Any],
    filters: Optional[OrderListFiltersDTO],
    today: Union[date, datetime],
    awaiting_days: int = DEFAULT_AWAITING_DELIVERY_DAYS,
) -> List[ClassifiedOrder]:
    """Classify ``orders`` against one ``today``, filter, and sort by priority.

    ``sorted`` is stable, so orders with equal priority keep their
    incoming relative order.
    """
    classified = [classify_order(order, today, awaiting_days) for order in orders]
    if filters is not None and not filters.is_empty:
        classified = [item for item in classified if matches(item, filters)]
    return sorted(classified, key=lambda item: item.priority)
