from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentMethod(str, Enum):
    CREDIT = "credit"
    PAYPAY = "paypay"
    AUPAY = "aupay"


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    product_id: str = Field(..., alias="productId")
    price: float
    quantity: int


class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: Optional[List[OrderItem]] = Field(
        default=None, description="Line items; validated by the order service"
    )
    coupon_id: Optional[str] = Field(default=None, alias="couponId")


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    id: str
    items: List[OrderItem] = []
    coupon_id: Optional[str] = Field(default=None, alias="couponId")
    total_price: Optional[float] = Field(default=None, alias="totalPrice")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")


class Coupon(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    code: str
    discount: float


class CheckoutResponse(BaseModel):
    order: Order
    payment_url: str


class PaymentMethodCap(BaseModel):
    method: PaymentMethod
    max_amount: Optional[float]


class ApiInfoResponse(BaseModel):
    coupon_api_url: str
    order_api_url: str
    payment_url: str
    payment_methods: List[PaymentMethodCap]
    redirect: Dict[str, bool]
