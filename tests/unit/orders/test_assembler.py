"""Unit tests for order list assembly (classify, filter, sort)."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from modules.orders.assembler import assemble, classify_order, matches
from modules.orders.constants import AlertColor, OrderStatus
from modules.orders.dtos import OrderListFiltersDTO

pytestmark = pytest.mark.unit

TODAY = date(2024, 1, 20)


def make_order(code, status=OrderStatus.EMITIDO, created_at=None, deadline=None):
    created_at = created_at or datetime(2024, 1, 19, 10, 0)
    expected = created_at + timedelta(days=deadline) if deadline else None
    return SimpleNamespace(
        id=f"id-{code}",
        code=code,
        status=status,
        created_at=created_at,
        delivery_deadline_days=deadline,
        expected_delivery_date=expected,
    )


@pytest.fixture()
def orders():
    """One order per alert color, in newest-first load order."""
    return [
        make_order("05", deadline=None),  # sem_cor
        make_order("04", created_at=datetime(2024, 1, 1), deadline=10),  # atrasado
        make_order("03", deadline=30),  # emitido
        make_order("02", created_at=datetime(2024, 1, 12), deadline=9),  # aguardando
    ]


class TestSorting:
    def test_sorted_by_alert_priority(self, orders):
        result = assemble(orders, None, TODAY)
        assert [item.alert.alert_color for item in result] == [
            AlertColor.ATRASADO,
            AlertColor.AGUARDANDO,
            AlertColor.EMITIDO,
            AlertColor.SEM_COR,
        ]

    def test_full_priority_table(self):
        batch = [
            make_order("01", status=OrderStatus.RECEBIDO, deadline=30),
            make_order("02", status=OrderStatus.CANCELADO, deadline=30),
            make_order("03", deadline=30),
            make_order("04", status=OrderStatus.ENVIADO_FORNECEDOR, deadline=30),
            make_order("05", status=OrderStatus.EM_TRANSITO, deadline=30),
            make_order("06", created_at=datetime(2024, 1, 12), deadline=9),
            make_order("07", created_at=datetime(2024, 1, 1), deadline=5),
        ]
        result = assemble(batch, None, TODAY)
        assert [item.order.code for item in result] == [
            "07", "06", "05", "04", "03", "02", "01"
        ]
        assert [item.priority for item in result] == [1, 2, 3, 4, 5, 6, 7]

    def test_ties_keep_load_order(self):
        batch = [
            make_order("09", deadline=30),
            make_order("03", deadline=30),
            make_order("07", deadline=30),
        ]
        result = assemble(batch, None, TODAY)
        assert [item.order.code for item in result] == ["09", "03", "07"]

    def test_days_remaining_counts_from_today(self):
        result = assemble([make_order("01", deadline=30)], None, datetime(2024, 1, 19))
        assert result[0].alert.days_remaining == 31

    def test_empty_batch(self):
        assert assemble([], None, TODAY) == []


class TestFiltering:
    def test_code_filter_is_substring(self, orders):
        result = assemble(orders, OrderListFiltersDTO(code="0"), TODAY)
        assert len(result) == 4
        result = assemble(orders, OrderListFiltersDTO(code="04"), TODAY)
        assert [item.order.code for item in result] == ["04"]

    def test_date_filter_matches_formatted_creation_date(self, orders):
        result = assemble(orders, OrderListFiltersDTO(date="12/01"), TODAY)
        assert [item.order.code for item in result] == ["02"]

    def test_date_filter_partial_year(self, orders):
        result = assemble(orders, OrderListFiltersDTO(date="/2024"), TODAY)
        assert len(result) == 4

    def test_status_filter_is_case_insensitive(self, orders):
        result = assemble(orders, OrderListFiltersDTO(status="ATRAS"), TODAY)
        assert [item.order.code for item in result] == ["04"]

    def test_status_filter_matches_manual_status_label(self):
        batch = [
            make_order(
                "01",
                status=OrderStatus.ENVIADO_FORNECEDOR,
                created_at=datetime(2024, 1, 15),
                deadline=30,
            ),
            make_order("02", deadline=30),
        ]
        result = assemble(batch, OrderListFiltersDTO(status="enviado ao"), TODAY)
        assert [item.order.code for item in result] == ["01"]
        assert result[0].alert.alert_color == AlertColor.EM_TRANSITO

    def test_filters_are_combined(self, orders):
        filters = OrderListFiltersDTO(code="0", status="emitido", date="19/01/2024")
        result = assemble(orders, filters, TODAY)
        assert [item.order.code for item in result] == ["03", "05"]

    def test_no_match(self, orders):
        assert assemble(orders, OrderListFiltersDTO(code="99"), TODAY) == []

    def test_blank_filters_are_ignored(self, orders):
        filters = OrderListFiltersDTO(code="  ", date="", status=None)
        assert filters.is_empty
        assert len(assemble(orders, filters, TODAY)) == 4

    def test_matches_requires_every_filter(self, orders):
        item = classify_order(orders[1], TODAY)
        assert matches(item, OrderListFiltersDTO(code="04", status="atrasado"))
        assert not matches(item, OrderListFiltersDTO(code="04", status="aguardando"))


class TestDegradation:
    def test_order_missing_fields_gets_no_color(self):
        broken = SimpleNamespace(id="x", code="10", status=OrderStatus.EMITIDO)
        item = classify_order(broken, TODAY)
        assert item.alert.alert_color == AlertColor.SEM_COR
        assert item.alert.status_display == "Emitido"
        assert item.display_date == ""

    def test_malformed_deadline_gets_no_color(self):
        broken = make_order("11", deadline=None)
        broken.delivery_deadline_days = "ten"
        item = classify_order(broken, TODAY)
        assert item.alert.alert_color == AlertColor.SEM_COR

    def test_broken_order_does_not_break_the_list(self, orders):
        broken = SimpleNamespace(id="x", code="10", status="emitido")
        result = assemble([broken, *orders], None, TODAY)
        assert len(result) == 5
        assert [item.order.code for item in result][-2:] == ["10", "05"]

    def test_display_date_format(self):
        item = classify_order(make_order("01", created_at=datetime(2024, 1, 5, 8, 0)), TODAY)
        assert item.display_date == "05/01/2024"
