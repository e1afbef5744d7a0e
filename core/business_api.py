# core/business_api.py
"""
Client for the business REST API (product catalog, sales/purchase ledger and
stock projections).
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx

from core.config import get_settings
from core.errors import UpstreamError
from core.logger import get_logger

logger = get_logger("business_api")


@dataclass
class Product:
    id: int
    name: str
    sell_price: float = 0.0
    stock: float = 0.0
    unit: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Optional["Product"]:
        """Map a catalog record; records without a usable id are skipped (None)."""
        try:
            product_id = int(record["id_producto"])
        except (KeyError, TypeError, ValueError):
            return None
        return cls(
            id=product_id,
            name=str(record.get("nombre") or ""),
            sell_price=_to_float(record.get("precio_venta")),
            stock=_to_float(record.get("stock")),
            unit=str(record.get("unidad_medida") or ""),
        )


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class BusinessApiClient:
    def __init__(self, base_url: str, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def fetch_products(self) -> List[Product]:
        """
        Current catalog. Accepts a bare list or a ``{"data": [...]}`` envelope;
        anything else, including a failed request, is an empty catalog.
        """
        try:
            response = self.client.get("/api/productos")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching products: {e}")
            return []

        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            payload = payload["data"]
        if not isinstance(payload, list):
            logger.warning(f"Products response is not a list: {type(payload).__name__}")
            return []

        products = [p for p in (Product.from_record(r) for r in payload if isinstance(r, dict)) if p]
        logger.info(f"Fetched {len(products)} products")
        return products

    def post_sale(self, sale: Dict[str, Any]) -> Any:
        return self._post("/api/ventas", sale)

    def post_purchase(self, purchase: Dict[str, Any]) -> Any:
        return self._post("/api/compras", purchase)

    def fetch_stock_projection(self) -> Any:
        try:
            response = self.client.get("/api/productos/stock-proyeccion")
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"stock projection request failed: {e}") from e

    def _post(self, path: str, body: Dict[str, Any]) -> Any:
        logger.debug(f"POST {path}: {body}")
        try:
            response = self.client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamError(f"POST {path} failed: {e}") from e
        try:
            return response.json()
        except ValueError:
            return response.text

    def close(self) -> None:
        self.client.close()


@lru_cache(maxsize=1)
def get_business_client() -> BusinessApiClient:
    settings = get_settings()
    return BusinessApiClient(settings.business_api_url, timeout=settings.business_api_timeout)
