import code
from typing import Any, Dict

from dotenv import load_dotenv

from schemas import OrderCreate, OrderItem
from services.order_service import OrderService
from services.payment_service import build_payment_methods


def build_namespace() -> Dict[str, Any]:
    return {
        "service": OrderService(),
        "OrderCreate": OrderCreate,
        "OrderItem": OrderItem,
        "build_payment_methods": build_payment_methods,
    }


def main() -> None:
    load_dotenv()
    namespace = build_namespace()

    banner = (
        "Checkout shell\n"
        "Variable 'service' is available. Example:\n"
        ">>> import asyncio\n"
        ">>> order = OrderCreate(items=[OrderItem(id='1', productId='p1', price=100, quantity=2)])\n"
        ">>> asyncio.run(service.process(order))\n"
    )
    code.interact(banner=banner, local=namespace)


if __name__ == "__main__":
    main()
