"""
Stock Service Client

Async HTTP client for the catalog/stock API:
- GET /products/{id} -> Product
- GET /stock/{id}    -> Stock

Read-only: the cart never writes to this service. No retries and no caching
happen here; every call goes to the network.
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from storecart import config
from storecart.errors import StockServiceError
from storecart.logging import get_logger, sanitize_id_for_logging
from storecart.services.models import Product, Stock

logger = get_logger(__name__)

NO_RESPONSE_BODY = "No response body"


class StockClient:
    """Client for the catalog/stock API."""

    def __init__(
        self,
        base_url: str = config.STOCK_SERVICE_URL,
        timeout: float = config.STOCK_SERVICE_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize stock client.

        Args:
            base_url: Base URL of the catalog/stock API
            timeout: Request timeout in seconds (ignored when http_client is given)
            http_client: Pre-built client, mainly for tests and shared pools
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "StockClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, path: str) -> Any:
        """GET a JSON document, converting every failure to StockServiceError."""
        url = f"{self.base_url}{path}"
        try:
            response = await self._http_client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning(f"Stock service unreachable ({url}): {e}")
            raise StockServiceError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            error_text = response.text[:200] if response.text else NO_RESPONSE_BODY
            logger.error(f"Request failed: {response.status_code} - {error_text}")
            raise StockServiceError(
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise StockServiceError(f"GET {path} returned invalid JSON") from e

    async def get_product(self, product_id: int) -> Product:
        """Get product details"""
        data = await self._get(f"/products/{product_id}")
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed product record for {sanitize_id_for_logging(product_id)}: {e}")
            raise StockServiceError(f"Malformed product record for {product_id}") from e

    async def get_stock(self, product_id: int) -> Stock:
        """Get current availability for a product"""
        data = await self._get(f"/stock/{product_id}")
        try:
            return Stock.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed stock record for {sanitize_id_for_logging(product_id)}: {e}")
            raise StockServiceError(f"Malformed stock record for {product_id}") from e
