"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderStatus(Exception):
    """The requested status is not one of the known order statuses."""


class OrderNotEditable(Exception):
    """The order's items can no longer be changed (edit window closed or standby)."""


class OrderNotDeletable(Exception):
    """The order is still open and past its edit window."""


class ProductNotFound(Exception):
    """A product referenced by an order item does not exist."""
