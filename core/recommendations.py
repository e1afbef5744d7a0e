# core/recommendations.py
"""Purchase recommendations for next week, derived from the stock projection report."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.business_api import BusinessApiClient, get_business_client
from core.errors import DecodeError, UpstreamError
from core.logger import get_logger
from core.parsing import decode_json_object
from llm.llm_providers import complete

logger = get_logger("recommendations")

RECOMMEND_SYS = (
    "Eres un experto en análisis de inventarios y gestión de compras. "
    "Generas recomendaciones precisas basadas en datos. Responde SOLO en formato JSON válido."
)

RECOMMEND_PROMPT = """Eres un experto en gestión de inventarios. Analiza los siguientes productos y genera recomendaciones de compra para la próxima semana.

DATOS DE INVENTARIO:
{products}

INSTRUCCIONES:
Para cada producto, analiza:
1. La tendencia de ventas vs compras
2. El stock actual vs proyectado
3. Si el stock proyectado será suficiente para la próxima semana

Genera recomendaciones siguiendo EXACTAMENTE este formato JSON (sin texto adicional):
{{
  "recomendaciones": [
    {{
      "producto_nombre": "nombre del producto",
      "orden_actual": número (compras de la última semana del producto),
      "cambio_de_compra": 1, 2 o 3 (1=comprar menos, 2=mantener compras, 3=comprar más),
      "compra_sugerida": número entero de unidades a comprar para la próxima semana,
      "justificacion": "explicación breve y clara de la recomendación"
    }}
  ]
}}

IMPORTANTE:
- El campo "orden_actual" DEBE ser el valor exacto de "Compras última semana" del producto.
- El campo "compra_sugerida" es tu recomendación para la próxima semana.

CRITERIOS:
- cambio_de_compra = 1 (comprar menos): Si el stock proyectado es alto y las ventas son bajas
- cambio_de_compra = 2 (mantener): Si el balance entre ventas y stock es estable
- cambio_de_compra = 3 (comprar más): Si el stock proyectado es bajo o las ventas superan las compras

La compra_sugerida debe ser un número realista basado en el promedio de ventas diario multiplicado por 7 días, ajustado según el stock actual."""

NO_PRODUCTS_MESSAGE = "No hay productos para analizar"


class Recommendation(BaseModel):
    producto_nombre: str
    orden_actual: float = 0
    cambio_de_compra: int = Field(ge=1, le=3)
    compra_sugerida: int = Field(ge=0)
    justificacion: str = ""

    @field_validator("compra_sugerida", mode="before")
    @classmethod
    def _whole_units(cls, value):
        # purchases are made in whole units
        if isinstance(value, (float, str)):
            try:
                return round(float(value))
            except (ValueError, OverflowError):
                return value
        return value


class RecommendationPayload(BaseModel):
    recomendaciones: List[Recommendation] = Field(default_factory=list)


def _describe(product: Dict[str, Any]) -> str:
    return (
        f"Producto: {product.get('producto')}\n"
        f"- Stock actual: {product.get('stock_actual')}\n"
        f"- Ventas última semana: {product.get('ventas_ultima_semana')}\n"
        f"- Compras última semana: {product.get('compras_ultima_semana')}\n"
        f"- Stock proyectado: {product.get('stock_proyectado')}\n"
        f"- Promedio ventas diario: {product.get('promedio_ventas_diario')}\n"
        f"- Promedio compras diario: {product.get('promedio_compras_diario')}"
    )


def generate_inventory_recommendations(api: Optional[BusinessApiClient] = None) -> Dict[str, Any]:
    """
    Fetch the stock projection and ask the model for one recommendation per product.

    Raises UpstreamError for a failed or malformed projection and DecodeError
    when the model's answer does not match the recommendation schema.
    """
    api = api or get_business_client()
    stock_data = api.fetch_stock_projection()

    if not isinstance(stock_data, dict) or not stock_data.get("success"):
        raise UpstreamError("Invalid stock projection data structure")
    data = stock_data.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("productos"), list):
        raise UpstreamError("Invalid stock projection data structure")

    productos = data["productos"]
    if not productos:
        return {"success": True, "periodo": data.get("periodo"), "recommendations": [], "message": NO_PRODUCTS_MESSAGE}

    prompt = RECOMMEND_PROMPT.format(products="\n\n".join(_describe(p) for p in productos))
    raw = complete(RECOMMEND_SYS, prompt, temperature=0.3)

    decoded = decode_json_object(raw, RecommendationPayload)
    if not decoded.ok:
        logger.error("Could not parse recommendations (%s): %r", decoded.error, raw)
        raise DecodeError(f"could not parse recommendations: {decoded.error}")

    recommendations = [r.model_dump() for r in decoded.value.recomendaciones]
    logger.info("Generated %d inventory recommendation(s)", len(recommendations))
    return {
        "success": True,
        "periodo": data.get("periodo"),
        "recommendations": recommendations,
        "raw_data": productos,
    }
