import contextlib
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from config import settings
from schemas import Order
from services.checkout_errors import ExternalServiceError

logger = logging.getLogger("checkout")


class OrderRepository:
    def __init__(
        self,
        api_base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_base_url = api_base_url or settings.order_api_url
        self.timeout = settings.http_timeout_seconds if timeout is None else timeout
        self._client = client

    @contextlib.asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def create(self, payload: Dict[str, Any]) -> Order:
        try:
            async with self._http() as client:
                response = await client.post(self.api_base_url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Order creation failed err=%s", exc)
            raise ExternalServiceError("order creation failed") from exc

        if not response.is_success:
            logger.warning("Order creation failed status=%s", response.status_code)
            raise ExternalServiceError("order creation failed")

        try:
            return Order.model_validate(response.json())
        except (ValueError, SchemaValidationError) as exc:
            logger.warning("Order creation returned bad payload err=%s", exc)
            raise ExternalServiceError("order creation failed") from exc
