"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderListFiltersDTO,
    ReplaceItemsDTO,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderNotDeletable,
    OrderNotEditable,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListQuerySerializer,
    OrderListSerializer,
    OrderSerializer,
    ReplaceItemsSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

NOT_FOUND = {"detail": "Order not found."}


def _item_dtos(items) -> list[CreateOrderItemDTO]:
    return [
        CreateOrderItemDTO(product_id=item["product_id"], quantity=item["quantity"])
        for item in items
    ]


def _acting_user(request: Request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).  The list is
    classified and sorted in memory, so filtering and ordering do not go
    through queryset filter backends.
    """

    pagination_class = StandardResultsSetPagination
    filter_backends: list = []

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Define escopos de throttling por ação."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "export"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _filters(self, request: Request) -> OrderListFiltersDTO:
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return OrderListFiltersDTO(**query.validated_data)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateOrderDTO(
                items=_item_dtos(data["items"]),
                delivery_deadline_days=data.get("delivery_deadline_days"),
                supplier_name=data.get("supplier_name", ""),
                supplier_contact=data.get("supplier_contact", ""),
            )
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.create_order(dto, user=_acting_user(request))
        except ProductNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        out = OrderSerializer(self._service.classify(order))
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve / Export
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Query params ``code``, ``date`` (dd/mm/aaaa) and ``status`` are
        case-insensitive substring filters.  Results are sorted by alert
        priority (overdue first) and paginated.
        """
        classified = self._service.list_orders(self._filters(request))
        page = self.paginate_queryset(classified)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(self._service.classify(order)).data)

    @action(detail=False, methods=["get"])
    def export(self, request: Request) -> HttpResponse:
        """GET /api/v1/orders/export/

        CSV of the filtered order list, in list order.
        """
        content = self._service.export_orders(self._filters(request))
        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = 'attachment; filename="pedidos.csv"'
        return response

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Sets the manual status.  Any status may follow any other.
        """
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=serializer.validated_data["status"],
                notes=serializer.validated_data["notes"],
                user=_acting_user(request),
            )
        except OrderNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(self._service.classify(order)).data)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"])
    def items(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/items/

        Replaces every item of the order.  Only allowed within 24 hours
        of creation and never on cancelled or returned orders.
        """
        serializer = ReplaceItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = ReplaceItemsDTO(items=_item_dtos(serializer.validated_data["items"]))
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.replace_items(pk, dto)
        except OrderNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ProductNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except OrderNotEditable as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(OrderSerializer(self._service.classify(order)).data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk)
        except OrderNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderNotDeletable as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)
