"""CSV export of order line items.

Fields are joined with bare commas: values containing commas are not
quoted, so such rows shift columns when re-read.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Tuple

from modules.orders.constants import CSV_HEADER


def iter_rows(orders: Iterable[Any]) -> Iterator[Tuple[str, ...]]:
    """Yield one row per item: order code, product code, name, color, quantity."""
    for order in orders:
        for item in order.items.all():
            product = item.product
            yield (
                str(order.code),
                str(product.code),
                str(product.name),
                str(product.color or ""),
                str(item.quantity),
            )


def export_csv(orders: Iterable[Any]) -> str:
    lines = [",".join(CSV_HEADER)]
    lines.extend(",".join(row) for row in iter_rows(orders))
    return "\n".join(lines) + "\n"
