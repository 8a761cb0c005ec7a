from config import settings
from schemas import ApiInfoResponse, PaymentMethodCap
from services.payment_service import payment_method_caps


async def get_api_info() -> ApiInfoResponse:
    return ApiInfoResponse(
        coupon_api_url=settings.coupon_api_url,
        order_api_url=settings.order_api_url,
        payment_url=settings.payment_url,
        payment_methods=[
            PaymentMethodCap(method=method, max_amount=cap)
            for method, cap in payment_method_caps().items()
        ],
        redirect={"open_payment_link": settings.open_payment_link},
    )
