import contextlib
import logging
import math
from typing import AsyncIterator, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from config import settings
from schemas import Coupon
from services.checkout_errors import ExternalServiceError

logger = logging.getLogger("checkout")


class CouponService:
    def __init__(
        self,
        api_base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_base_url = (api_base_url or settings.coupon_api_url).rstrip("/")
        self.timeout = settings.http_timeout_seconds if timeout is None else timeout
        self._client = client

    @contextlib.asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def resolve(self, coupon_id: str) -> Optional[Coupon]:
        url = f"{self.api_base_url}/{coupon_id}"
        try:
            async with self._http() as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Coupon lookup failed coupon=%s err=%s", coupon_id, exc)
            raise ExternalServiceError("invalid coupon") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            logger.warning(
                "Coupon lookup failed coupon=%s status=%s", coupon_id, response.status_code
            )
            raise ExternalServiceError("invalid coupon")

        try:
            data = response.json()
            if data is None:
                return None
            return Coupon.model_validate(data)
        except (ValueError, SchemaValidationError) as exc:
            logger.warning("Coupon lookup returned bad payload coupon=%s err=%s", coupon_id, exc)
            raise ExternalServiceError("invalid coupon") from exc

    @staticmethod
    def apply_discount(price: float, coupon: Coupon) -> float:
        discounted = price - coupon.discount
        if math.isnan(discounted):
            return discounted
        return max(0, discounted)
