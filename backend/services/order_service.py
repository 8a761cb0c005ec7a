import logging
import math
from typing import Any, Dict, List, Optional, Protocol

from repositories.order_repository import OrderRepository
from schemas import Coupon, Order, OrderCreate, OrderItem
from services.checkout_errors import PaymentRedirectError, ValidationError
from services.coupon_service import CouponService
from services.payment_service import (
    PaymentRedirector,
    build_payment_methods,
    serialize_payment_methods,
)

logger = logging.getLogger("checkout")


class CouponLookup(Protocol):
    async def resolve(self, coupon_id: str) -> Optional[Coupon]:
        ...

    def apply_discount(self, price: float, coupon: Coupon) -> float:
        ...


class OrderStore(Protocol):
    async def create(self, payload: Dict[str, Any]) -> Order:
        ...


class PaymentInitiator(Protocol):
    async def initiate(self, order: Order) -> None:
        ...


def calculate_total_price(items: List[OrderItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def _is_valid_item(item: OrderItem) -> bool:
    if not math.isfinite(item.price):
        return False
    return item.price > 0 and item.quantity > 0


def validate_order(order: OrderCreate) -> List[OrderItem]:
    items = order.items
    if not items:
        raise ValidationError("items required")
    if not all(_is_valid_item(item) for item in items):
        raise ValidationError("items invalid")
    if calculate_total_price(items) <= 0:
        raise ValidationError("total must be positive")
    return items


class OrderService:
    """Runs checkout for a single order.

    Steps are awaited in sequence: validate, total, coupon, payment methods,
    persist, redirect. Instances keep no per-order state, so one service can
    process many orders concurrently.
    """

    def __init__(
        self,
        order_store: Optional[OrderStore] = None,
        coupon_lookup: Optional[CouponLookup] = None,
        payment_initiator: Optional[PaymentInitiator] = None,
    ) -> None:
        self.order_store = order_store or OrderRepository()
        self.coupon_lookup = coupon_lookup or CouponService()
        self.payment_initiator = payment_initiator or PaymentRedirector()

    async def process(self, order: OrderCreate) -> Order:
        items = validate_order(order)
        total_price = calculate_total_price(items)

        if order.coupon_id:
            total_price = await self._apply_discount(total_price, order.coupon_id)

        payment_method = serialize_payment_methods(build_payment_methods(total_price))
        payload = {
            "items": [item.model_dump(by_alias=True) for item in items],
            "couponId": order.coupon_id,
            "totalPrice": total_price,
            "paymentMethod": payment_method,
        }

        created = await self.order_store.create(payload)
        logger.info(
            "Order persisted order=%s total=%s methods=%s",
            created.id,
            total_price,
            payment_method,
        )

        try:
            await self.payment_initiator.initiate(created)
        except PaymentRedirectError as exc:
            if exc.order is None:
                exc.order = created
            raise
        return created

    async def _apply_discount(self, total_price: float, coupon_id: str) -> float:
        coupon = await self.coupon_lookup.resolve(coupon_id)
        if coupon is None or not math.isfinite(coupon.discount):
            raise ValidationError("invalid coupon")
        return self.coupon_lookup.apply_discount(total_price, coupon)
