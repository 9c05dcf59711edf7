"""Integration tests for the Order API.

Covers:
- Authentication enforcement.
- Creation (201), validation errors (400) and unknown products (404).
- Classified list: priority order, filters, pagination.
- Detail, manual status change and its history.
- Item replacement inside/outside the edit window (409).
- Delete rule (204 / 409).
- CSV export.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.orders.constants import AlertColor, OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def detail_url(order_id) -> str:
    return f"{URL}{order_id}/"


@pytest.fixture()
def tricoline():
    return Product.objects.create(code="TEC-001", name="Tricoline", color="Azul")


@pytest.fixture()
def malha():
    return Product.objects.create(code="TEC-002", name="Malha", color="Preto")


def create_order(client, product, quantity=10, **extra):
    payload = {"items": [{"product_id": str(product.id), "quantity": quantity}]}
    payload.update(extra)
    response = client.post(URL, payload, format="json")
    assert response.status_code == 201, response.content
    return response.json()


def age_order(order_id, days_ago: int) -> None:
    """Move an order's creation (and its expected delivery) into the past."""
    order = Order.objects.get(id=order_id)
    created_at = timezone.now() - timedelta(days=days_ago)
    expected = (
        created_at + timedelta(days=order.delivery_deadline_days)
        if order.delivery_deadline_days
        else None
    )
    Order.objects.filter(id=order_id).update(
        created_at=created_at, expected_delivery_date=expected
    )


# ===========================================================================
# Authentication
# ===========================================================================


class TestOrderAPIAuth:
    def test_list_requires_auth(self, api_client):
        assert api_client.get(URL).status_code == 401

    def test_create_requires_auth(self, api_client, tricoline):
        response = api_client.post(
            URL, {"items": [{"product_id": str(tricoline.id), "quantity": 1}]}, format="json"
        )
        assert response.status_code == 401

    def test_export_requires_auth(self, api_client):
        assert api_client.get(f"{URL}export/").status_code == 401


# ===========================================================================
# Create
# ===========================================================================


class TestCreateOrder:
    def test_create_returns_classified_order(self, auth_client, tricoline, malha):
        response = auth_client.post(
            URL,
            {
                "items": [
                    {"product_id": str(tricoline.id), "quantity": 120},
                    {"product_id": str(malha.id), "quantity": 40},
                ],
                "delivery_deadline_days": 10,
                "supplier_name": "Têxtil Paulista",
                "supplier_contact": "compras@textil.example",
            },
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "01"
        assert data["status"] == OrderStatus.EMITIDO
        assert data["alert_color"] == AlertColor.EMITIDO
        assert data["status_display"] == "Emitido"
        assert data["days_remaining"] == 10
        assert data["supplier_contact"] == "compras@textil.example"
        assert {i["product_code"] for i in data["items"]} == {"TEC-001", "TEC-002"}
        assert data["status_history"][0]["new_status"] == OrderStatus.EMITIDO

    def test_codes_increment(self, auth_client, tricoline):
        create_order(auth_client, tricoline)
        assert create_order(auth_client, tricoline)["code"] == "02"

    def test_create_records_author(self, auth_client, tricoline, user):
        data = create_order(auth_client, tricoline)
        assert Order.objects.get(id=data["id"]).created_by == user

    def test_without_deadline_has_no_color(self, auth_client, tricoline):
        data = create_order(auth_client, tricoline)
        assert data["alert_color"] == AlertColor.SEM_COR
        assert data["expected_delivery_date"] is None
        assert data["days_remaining"] is None

    def test_empty_items_rejected(self, auth_client):
        response = auth_client.post(URL, {"items": []}, format="json")
        assert response.status_code == 400

    def test_zero_quantity_rejected(self, auth_client, tricoline):
        response = auth_client.post(
            URL,
            {"items": [{"product_id": str(tricoline.id), "quantity": 0}]},
            format="json",
        )
        assert response.status_code == 400

    def test_zero_deadline_rejected(self, auth_client, tricoline):
        response = auth_client.post(
            URL,
            {
                "items": [{"product_id": str(tricoline.id), "quantity": 1}],
                "delivery_deadline_days": 0,
            },
            format="json",
        )
        assert response.status_code == 400

    def test_duplicate_products_rejected(self, auth_client, tricoline):
        item = {"product_id": str(tricoline.id), "quantity": 1}
        response = auth_client.post(URL, {"items": [item, item]}, format="json")
        assert response.status_code == 400
        assert "Duplicate" in response.json()["detail"]
        assert not Order.objects.exists()

    def test_unknown_product_returns_404(self, auth_client):
        response = auth_client.post(
            URL, {"items": [{"product_id": str(uuid4()), "quantity": 1}]}, format="json"
        )
        assert response.status_code == 404
        assert not Order.objects.exists()


# ===========================================================================
# List
# ===========================================================================


class TestListOrders:
    @pytest.fixture()
    def mixed_orders(self, auth_client, tricoline):
        """One order per alert color, keyed by the expected color."""
        orders = {
            AlertColor.SEM_COR: create_order(auth_client, tricoline),
            AlertColor.ATRASADO: create_order(
                auth_client, tricoline, delivery_deadline_days=10
            ),
            AlertColor.EMITIDO: create_order(
                auth_client, tricoline, delivery_deadline_days=30
            ),
            AlertColor.AGUARDANDO: create_order(
                auth_client, tricoline, delivery_deadline_days=10
            ),
            AlertColor.STANDBY: create_order(
                auth_client, tricoline, delivery_deadline_days=30
            ),
        }
        age_order(orders[AlertColor.ATRASADO]["id"], days_ago=20)
        age_order(orders[AlertColor.AGUARDANDO]["id"], days_ago=9)
        Order.objects.filter(id=orders[AlertColor.STANDBY]["id"]).update(
            status=OrderStatus.CANCELADO
        )
        return orders

    def test_sorted_by_alert_priority(self, auth_client, mixed_orders):
        response = auth_client.get(URL)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 5
        assert [row["alert_color"] for row in data["results"]] == [
            AlertColor.ATRASADO,
            AlertColor.AGUARDANDO,
            AlertColor.EMITIDO,
            AlertColor.STANDBY,
            AlertColor.SEM_COR,
        ]

    def test_filter_by_status_label(self, auth_client, mixed_orders):
        response = auth_client.get(URL, {"status": "atrasado"})
        rows = response.json()["results"]
        assert [row["id"] for row in rows] == [mixed_orders[AlertColor.ATRASADO]["id"]]

    def test_filter_by_code(self, auth_client, mixed_orders):
        response = auth_client.get(URL, {"code": "03"})
        assert [row["code"] for row in response.json()["results"]] == ["03"]

    def test_filter_by_creation_date(self, auth_client, mixed_orders):
        today = timezone.localtime().strftime("%d/%m/%Y")
        response = auth_client.get(URL, {"date": today})
        codes = sorted(row["code"] for row in response.json()["results"])
        assert codes == ["01", "03", "05"]

    def test_blank_filters_ignored(self, auth_client, mixed_orders):
        response = auth_client.get(URL, {"code": "", "status": ""})
        assert response.json()["count"] == 5

    def test_pagination(self, auth_client, mixed_orders):
        response = auth_client.get(URL, {"page_size": 2})
        data = response.json()
        assert data["count"] == 5
        assert len(data["results"]) == 2
        assert data["next"] is not None

    def test_empty_list(self, auth_client):
        response = auth_client.get(URL)
        assert response.status_code == 200
        assert response.json()["results"] == []


# ===========================================================================
# Retrieve / Status
# ===========================================================================


class TestRetrieveAndStatus:
    def test_retrieve(self, auth_client, tricoline):
        created = create_order(auth_client, tricoline, quantity=7)
        response = auth_client.get(detail_url(created["id"]))
        assert response.status_code == 200
        item = response.json()["items"][0]
        assert item["product_name"] == "Tricoline"
        assert item["product_color"] == "Azul"
        assert item["quantity"] == 7

    def test_retrieve_missing(self, auth_client):
        response = auth_client.get(detail_url(uuid4()))
        assert response.status_code == 404

    def test_status_change_is_recorded(self, auth_client, tricoline, user):
        created = create_order(auth_client, tricoline, delivery_deadline_days=10)
        response = auth_client.patch(
            detail_url(created["id"]),
            {"status": OrderStatus.CANCELADO, "notes": "Fornecedor sem estoque"},
            format="json",
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == OrderStatus.CANCELADO
        assert data["alert_color"] == AlertColor.STANDBY
        assert data["status_display"] == "Cancelado"
        entry = OrderStatusHistory.objects.filter(
            order_id=created["id"], old_status=OrderStatus.EMITIDO
        ).get()
        assert entry.new_status == OrderStatus.CANCELADO
        assert entry.user == user

    def test_jump_straight_to_received(self, auth_client, tricoline):
        created = create_order(auth_client, tricoline, delivery_deadline_days=10)
        response = auth_client.patch(
            detail_url(created["id"]), {"status": OrderStatus.RECEBIDO}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["alert_color"] == AlertColor.SEM_COR

    def test_unknown_status_rejected(self, auth_client, tricoline):
        created = create_order(auth_client, tricoline)
        response = auth_client.patch(
            detail_url(created["id"]), {"status": "pendente"}, format="json"
        )
        assert response.status_code == 400

    def test_status_on_missing_order(self, auth_client):
        response = auth_client.patch(
            detail_url(uuid4()), {"status": OrderStatus.RECEBIDO}, format="json"
        )
        assert response.status_code == 404


# ===========================================================================
# Items
# ===========================================================================


class TestReplaceItems:
    def test_replace_inside_window(self, auth_client, tricoline, malha):
        created = create_order(auth_client, tricoline)
        response = auth_client.put(
            f"{detail_url(created['id'])}items/",
            {"items": [{"product_id": str(malha.id), "quantity": 3}]},
            format="json",
        )
        assert response.status_code == 200
        items = response.json()["items"]
        assert [(i["product_code"], i["quantity"]) for i in items] == [("TEC-002", 3)]

    def test_replace_after_window_conflicts(self, auth_client, tricoline, malha):
        with freeze_time("2024-01-01 12:00:00"):
            created = create_order(auth_client, tricoline)
        with freeze_time("2024-01-02 12:00:01"):
            response = auth_client.put(
                f"{detail_url(created['id'])}items/",
                {"items": [{"product_id": str(malha.id), "quantity": 3}]},
                format="json",
            )
        assert response.status_code == 409
        assert OrderItem.objects.get(order_id=created["id"]).product_id == tricoline.id

    def test_replace_on_cancelled_order_conflicts(self, auth_client, tricoline, malha):
        created = create_order(auth_client, tricoline)
        Order.objects.filter(id=created["id"]).update(status=OrderStatus.CANCELADO)
        response = auth_client.put(
            f"{detail_url(created['id'])}items/",
            {"items": [{"product_id": str(malha.id), "quantity": 3}]},
            format="json",
        )
        assert response.status_code == 409

    def test_replace_with_unknown_product(self, auth_client, tricoline):
        created = create_order(auth_client, tricoline)
        response = auth_client.put(
            f"{detail_url(created['id'])}items/",
            {"items": [{"product_id": str(uuid4()), "quantity": 3}]},
            format="json",
        )
        assert response.status_code == 404
        assert OrderItem.objects.filter(order_id=created["id"]).count() == 1


# ===========================================================================
# Delete
# ===========================================================================


class TestDeleteOrder:
    def test_delete_inside_window(self, auth_client, tricoline):
        created = create_order(auth_client, tricoline)
        response = auth_client.delete(detail_url(created["id"]))
        assert response.status_code == 204
        assert not Order.objects.filter(id=created["id"]).exists()

    def test_open_order_after_window_conflicts(self, auth_client, tricoline):
        with freeze_time("2024-01-01 12:00:00"):
            created = create_order(auth_client, tricoline)
        with freeze_time("2024-01-05 12:00:00"):
            response = auth_client.delete(detail_url(created["id"]))
        assert response.status_code == 409
        assert Order.objects.filter(id=created["id"]).exists()

    def test_closed_order_after_window_deleted(self, auth_client, tricoline):
        with freeze_time("2024-01-01 12:00:00"):
            created = create_order(auth_client, tricoline)
        Order.objects.filter(id=created["id"]).update(status=OrderStatus.RECEBIDO)
        with freeze_time("2024-03-01 12:00:00"):
            response = auth_client.delete(detail_url(created["id"]))
        assert response.status_code == 204

    def test_delete_missing(self, auth_client):
        assert auth_client.delete(detail_url(uuid4())).status_code == 404


# ===========================================================================
# Export
# ===========================================================================


class TestExport:
    def test_csv_export(self, auth_client, tricoline, malha):
        first = create_order(auth_client, tricoline, quantity=5)
        auth_client.put(
            f"{detail_url(first['id'])}items/",
            {
                "items": [
                    {"product_id": str(tricoline.id), "quantity": 5},
                    {"product_id": str(malha.id), "quantity": 8},
                ]
            },
            format="json",
        )

        response = auth_client.get(f"{URL}export/")

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/csv")
        assert "pedidos.csv" in response["Content-Disposition"]
        lines = response.content.decode("utf-8").splitlines()
        assert lines[0] == "Pedido,Código,Nome,Cor,Quantidade"
        assert sorted(lines[1:]) == ["01,TEC-001,Tricoline,Azul,5", "01,TEC-002,Malha,Preto,8"]

    def test_export_respects_filters(self, auth_client, tricoline):
        create_order(auth_client, tricoline)
        create_order(auth_client, tricoline)
        response = auth_client.get(f"{URL}export/", {"code": "02"})
        lines = response.content.decode("utf-8").splitlines()
        assert lines[1:] == ["02,TEC-001,Tricoline,Azul,10"]
