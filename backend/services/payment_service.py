import asyncio
import logging
import os
import sys
import webbrowser
from typing import Dict, Iterable, List, Optional

from config import settings
from schemas import Order, PaymentMethod
from services.checkout_errors import PaymentRedirectError

logger = logging.getLogger("checkout")

PAYMENT_METHODS = (
    PaymentMethod.CREDIT,
    PaymentMethod.PAYPAY,
    PaymentMethod.AUPAY,
)

PAYPAY_MAX_AMOUNT = 500000
AUPAY_MAX_AMOUNT = 300000

MAX_AMOUNTS: Dict[PaymentMethod, Optional[float]] = {
    PaymentMethod.CREDIT: None,
    PaymentMethod.PAYPAY: PAYPAY_MAX_AMOUNT,
    PaymentMethod.AUPAY: AUPAY_MAX_AMOUNT,
}


def _is_eligible(method: PaymentMethod, total_price: float) -> bool:
    cap = MAX_AMOUNTS.get(method)
    if cap is None:
        return True
    return total_price <= cap


def build_payment_methods(total_price: float) -> List[PaymentMethod]:
    return [method for method in PAYMENT_METHODS if _is_eligible(method, total_price)]


def serialize_payment_methods(methods: Iterable[PaymentMethod]) -> str:
    seen: List[str] = []
    for method in methods:
        value = PaymentMethod(method).value
        if value not in seen:
            seen.append(value)
    return ",".join(seen)


def payment_method_caps() -> Dict[PaymentMethod, Optional[float]]:
    return {method: MAX_AMOUNTS[method] for method in PAYMENT_METHODS}


def _has_display() -> bool:
    if sys.platform in ("win32", "darwin"):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def _is_console_browser(browser: webbrowser.BaseBrowser) -> bool:
    # GenericBrowser runs in the foreground and waits for the process to exit
    return isinstance(browser, webbrowser.GenericBrowser) and not isinstance(
        browser, webbrowser.BackgroundBrowser
    )


class PaymentRedirector:
    """Opens the payment provider page for a persisted order.

    On hosts without a usable browser the redirect is skipped; the client is
    expected to follow the payment URL returned by the API instead.
    """

    def __init__(
        self,
        payment_url: Optional[str] = None,
        *,
        enabled: Optional[bool] = None,
    ) -> None:
        self.payment_url = payment_url or settings.payment_url
        self.enabled = settings.open_payment_link if enabled is None else enabled

    def build_payment_url(self, order_id: str) -> str:
        return f"{self.payment_url}?orderId={order_id}"

    def _browser(self) -> Optional[webbrowser.BaseBrowser]:
        if not self.enabled or not _has_display():
            return None
        try:
            browser = webbrowser.get()
        except webbrowser.Error:
            return None
        if _is_console_browser(browser):
            return None
        return browser

    async def initiate(self, order: Order) -> None:
        url = self.build_payment_url(order.id)
        browser = self._browser()
        if browser is None:
            logger.debug("payment redirect skipped order=%s: no display context", order.id)
            return
        try:
            opened = await asyncio.to_thread(browser.open, url, 2)
        except webbrowser.Error as exc:
            logger.error("payment redirect failed order=%s err=%s", order.id, exc)
            raise PaymentRedirectError("payment redirect failed", order=order) from exc
        if not opened:
            logger.error("payment redirect failed order=%s url=%s", order.id, url)
            raise PaymentRedirectError("payment redirect failed", order=order)
        logger.info("payment redirect opened order=%s", order.id)
