# core/actions.py
"""
Business actions triggered once an answer is accepted.

Each question slot maps to one action in ``ACTIONS``. Actions receive the
accepted answer and a fresh catalog snapshot and may return a message that
replaces the generic acknowledgment. ``dispatch`` is best-effort: whatever
goes wrong is logged and the interview moves on.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.business_api import BusinessApiClient, Product, get_business_client
from core.config import get_settings
from core.errors import DecodeError
from core.logger import get_logger
from core.parsing import decode_json_object
from llm.llm_providers import complete

logger = get_logger("actions")

EXTRACT_SYS = "Eres un experto en extraer información estructurada de texto. Responde SOLO en formato JSON válido."

EXTRACT_PROMPT = """Extrae la información de ventas del siguiente texto del usuario.

Productos disponibles:
{catalog}

Respuesta del usuario: "{answer}"

Identifica qué productos mencionó el usuario y en qué cantidades. Responde SOLO en formato JSON válido:
{{
  "productos": [
    {{
      "id_producto": número,
      "nombre": "nombre del producto",
      "cantidad": número,
      "precio_unitario": número (del catálogo),
      "subtotal": número (cantidad * precio_unitario)
    }}
  ]
}}

Si no se mencionan cantidades específicas, asume 1 unidad."""

INVENTORY_SYS = "Eres un asistente que compara inventarios y genera mensajes claros sobre diferencias."

INVENTORY_PROMPT = """El usuario mencionó su conteo de inventario. Compara con el stock actual del sistema.

Stock actual en sistema:
{stock}

Respuesta del usuario: "{answer}"

Genera un mensaje breve en español informando sobre las diferencias encontradas o confirmando que coincide. Sé conciso y profesional."""


class ExtractedProduct(BaseModel):
    # prices and subtotals from the model are ignored; the catalog is authoritative
    id_producto: int
    nombre: Any = None
    cantidad: Optional[float] = None

    @field_validator("cantidad", mode="before")
    @classmethod
    def _positive_or_none(cls, value):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None


class ExtractionPayload(BaseModel):
    productos: List[Any] = Field(default_factory=list)


@dataclass
class LineItem:
    product_id: int
    name: str
    quantity: float
    unit_price: float
    subtotal: float


def _number(value: float):
    # the ledger expects integers where the value is whole
    return int(value) if float(value).is_integer() else value


def extract_line_items(answer: str, catalog: List[Product]) -> List[LineItem]:
    """
    Turn a free-text answer into line items for products in ``catalog``.

    Unit prices come from the catalog and subtotals are recomputed, so the
    model only has to pick products and quantities. Malformed items and
    unknown product ids are dropped; a missing or non-positive quantity
    counts as 1. Raises DecodeError when no JSON object can be decoded.
    """
    listing = "\n".join(f"ID: {p.id}, Nombre: {p.name}, Precio Venta: {p.sell_price}" for p in catalog)
    raw = complete(EXTRACT_SYS, EXTRACT_PROMPT.format(catalog=listing, answer=answer), temperature=0.3)

    decoded = decode_json_object(raw, ExtractionPayload)
    if not decoded.ok:
        raise DecodeError(f"could not extract line items: {decoded.error}")

    by_id = {p.id: p for p in catalog}
    items = []
    for record in decoded.value.productos:
        try:
            extracted = ExtractedProduct.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping extracted item %r: %d validation error(s)", record, exc.error_count())
            continue
        product = by_id.get(extracted.id_producto)
        if product is None:
            logger.warning("Extraction mentioned unknown product id %s", extracted.id_producto)
            continue
        quantity = extracted.cantidad or 1
        unit_price = product.sell_price
        items.append(LineItem(
            product_id=product.id,
            name=product.name or str(extracted.nombre or ""),
            quantity=quantity,
            unit_price=unit_price,
            subtotal=round(quantity * unit_price, 2),
        ))
    logger.info("Extracted %d line item(s)", len(items))
    return items


def build_sale(items: List[LineItem], today: Optional[date] = None) -> Dict[str, object]:
    today = today or date.today()
    return {
        "id_empleado": get_settings().ledger_employee_id,
        "fecha": today.isoformat(),
        "total": _number(round(sum(item.subtotal for item in items), 2)),
        "detalles": [
            {
                "id_producto": item.product_id,
                "nombre": item.name,
                "cantidad": _number(item.quantity),
                "precio_unitario": _number(item.unit_price),
                "subtotal": _number(item.subtotal),
            }
            for item in items
        ],
    }


def build_purchase(items: List[LineItem], today: Optional[date] = None) -> Dict[str, object]:
    settings = get_settings()
    today = today or date.today()
    detalles = [
        {
            "id_producto": item.product_id,
            "cantidad_paquetes": 1,  # package count is not asked in the interview
            "cantidad_total_producto": _number(item.quantity),
            "costo_unitario": _number(item.unit_price),
            "subtotal": _number(item.subtotal),
            "descripcion": item.name or "Producto recibido",
        }
        for item in items
    ]
    return {
        "id_proveedor": settings.ledger_supplier_id,
        "id_orden": settings.ledger_order_id,
        "fecha": today.isoformat(),
        "total": _number(round(sum(item.subtotal for item in items), 2)),
        "detalles": detalles,
    }


class Action:
    """Side effect tied to one question slot."""

    def apply(self, answer: str, catalog: List[Product], api: BusinessApiClient) -> Optional[str]:
        raise NotImplementedError


class NoAction(Action):
    def apply(self, answer, catalog, api):
        return None


class RecordSale(Action):
    def apply(self, answer, catalog, api):
        items = extract_line_items(answer, catalog)
        if items:
            sale = build_sale(items)
            api.post_sale(sale)
            logger.info("Sale posted: total=%s items=%d", sale["total"], len(items))
        return None


class RecordPurchase(Action):
    def apply(self, answer, catalog, api):
        items = extract_line_items(answer, catalog)
        if items:
            purchase = build_purchase(items)
            api.post_purchase(purchase)
            logger.info("Purchase posted: total=%s items=%d", purchase["total"], len(items))
        return None


class ReconcileInventory(Action):
    def apply(self, answer, catalog, api):
        stock = "\n".join(f"{p.name}: Stock actual {_number(p.stock)} {p.unit}".rstrip() for p in catalog)
        message = complete(INVENTORY_SYS, INVENTORY_PROMPT.format(stock=stock, answer=answer), temperature=0.5)
        message = message.strip()
        return message or None


# question index -> action
ACTIONS: Dict[int, Action] = {
    0: RecordSale(),
    1: RecordPurchase(),
    2: ReconcileInventory(),
    3: NoAction(),
    4: NoAction(),
}


def dispatch(
    question_index: int,
    answer: str,
    client_factory: Callable[[], BusinessApiClient] = None,
) -> Optional[str]:
    """
    Run the action for ``question_index``. Returns a user-facing message or
    None. Never raises: a failed side effect must not block the interview.
    """
    action = ACTIONS.get(question_index, NoAction())
    if isinstance(action, NoAction):
        logger.info("No business action for question %d", question_index)
        return None

    try:
        api = (client_factory or get_business_client)()
        catalog = api.fetch_products()
        if not catalog:
            logger.warning("No products available; skipping %s", type(action).__name__)
            return None
        return action.apply(answer, catalog, api)
    except Exception as exc:
        logger.error("Business action %s failed: %s", type(action).__name__, exc)
        return None
