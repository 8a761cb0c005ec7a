import logging

from fastapi import APIRouter, Depends, HTTPException, status

from schemas import CheckoutResponse, OrderCreate
from services.checkout_errors import (
    ExternalServiceError,
    PaymentRedirectError,
    ValidationError,
)
from services.order_service import OrderService
from services.payment_service import PaymentRedirector

logger = logging.getLogger("checkout")

router = APIRouter(prefix="/api/orders", tags=["orders"])

_redirector = PaymentRedirector()
_order_service = OrderService(payment_initiator=_redirector)


def get_order_service() -> OrderService:
    return _order_service


def get_payment_redirector() -> PaymentRedirector:
    return _redirector


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    payload: OrderCreate,
    service: OrderService = Depends(get_order_service),
    redirector: PaymentRedirector = Depends(get_payment_redirector),
) -> CheckoutResponse:
    try:
        order = await service.process(payload)
    except PaymentRedirectError as exc:
        logger.warning("Returning order=%s without redirect: %s", exc.order.id, exc.reason)
        order = exc.order
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.reason) from exc
    except ExternalServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.reason) from exc
    return CheckoutResponse(order=order, payment_url=redirector.build_payment_url(order.id))
