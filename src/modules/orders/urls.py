"""Order URL configuration.

``export/`` and ``{id}/items/`` are extra actions on the same router
entry as the list and detail routes.
"""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

app_name = "orders"

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
