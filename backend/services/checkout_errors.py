"""Checkout exceptions.

Raised by the service layer; the API routers translate them into HTTP
responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from schemas import Order


class CheckoutError(Exception):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ValidationError(CheckoutError):
    """The submitted order is structurally invalid."""


class ExternalServiceError(CheckoutError):
    """A remote collaborator failed or reported a non-success outcome."""


class PaymentRedirectError(ExternalServiceError):
    """The payment link could not be delivered after the order was persisted."""

    def __init__(self, reason: str, order: Optional["Order"] = None) -> None:
        super().__init__(reason)
        self.order = order
