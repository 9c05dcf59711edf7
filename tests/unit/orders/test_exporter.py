from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.orders.exporter import export_csv, iter_rows

pytestmark = pytest.mark.unit


class _Items(list):
    def all(self):
        return self


def make_item(code, name, color, quantity):
    return SimpleNamespace(
        product=SimpleNamespace(code=code, name=name, color=color),
        quantity=quantity,
    )


def make_order(code, *items):
    return SimpleNamespace(code=code, items=_Items(items))


class TestExportCsv:
    def test_header_only_for_no_orders(self):
        assert export_csv([]) == "Pedido,Código,Nome,Cor,Quantidade\n"

    def test_one_row_per_item_in_order(self):
        orders = [
            make_order(
                "02",
                make_item("TEC-001", "Tricoline", "Azul", 120),
                make_item("AVI-002", "Zíper", "Preto", 40),
            ),
            make_order("01", make_item("TEC-003", "Malha", "Cinza", 5)),
        ]
        assert export_csv(orders).splitlines() == [
            "Pedido,Código,Nome,Cor,Quantidade",
            "02,TEC-001,Tricoline,Azul,120",
            "02,AVI-002,Zíper,Preto,40",
            "01,TEC-003,Malha,Cinza,5",
        ]

    def test_order_without_items_adds_no_rows(self):
        assert export_csv([make_order("03")]).count("\n") == 1

    def test_missing_color_is_empty(self):
        rows = list(iter_rows([make_order("01", make_item("EMB-001", "Caixa", None, 3))]))
        assert rows == [("01", "EMB-001", "Caixa", "", "3")]

    def test_commas_are_not_quoted(self):
        content = export_csv([make_order("01", make_item("X", "Botão, 12mm", "", 1))])
        assert content.splitlines()[1] == "01,X,Botão, 12mm,,1"
