"""Shared fixtures: a scripted completion service and a fake business API."""
import json

import httpx
import pytest

from core.business_api import BusinessApiClient
from core.config import get_settings

COMPLETION_MODULES = (
    "core.evaluator",
    "core.followup",
    "core.actions",
    "core.final_summary",
    "core.recommendations",
)


class ScriptedCompletions:
    """Stands in for llm.llm_providers.complete; replies are consumed in order."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)
        return self

    def __call__(self, system_prompt, user_prompt, prior_turns=None, **sampling):
        self.calls.append({"system": system_prompt, "user": user_prompt, "sampling": sampling})
        if not self.replies:
            raise AssertionError("unexpected completion call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("BUSINESS_API_URL", "LEDGER_EMPLOYEE_ID", "LEDGER_SUPPLIER_ID", "LEDGER_ORDER_ID"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def llm(monkeypatch):
    scripted = ScriptedCompletions()
    for module in COMPLETION_MODULES:
        monkeypatch.setattr(f"{module}.complete", scripted)
    return scripted


class FakeBusinessApi:
    """In-memory business API served through httpx.MockTransport."""

    def __init__(self, products=None, status=200):
        self.products = products if products is not None else []
        self.status = status
        self.projection = {"success": True, "data": {"periodo": "semana", "productos": []}}
        self.sales = []
        self.purchases = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.status >= 400:
            return httpx.Response(self.status, json={"error": "boom"})
        path = request.url.path
        if request.method == "GET" and path == "/api/productos":
            return httpx.Response(200, json=self.products)
        if request.method == "GET" and path == "/api/productos/stock-proyeccion":
            return httpx.Response(200, json=self.projection)
        if request.method == "POST" and path == "/api/ventas":
            self.sales.append(json.loads(request.content))
            return httpx.Response(201, json={"ok": True})
        if request.method == "POST" and path == "/api/compras":
            self.purchases.append(json.loads(request.content))
            return httpx.Response(201, json={"ok": True})
        return httpx.Response(404)

    def client(self) -> BusinessApiClient:
        return BusinessApiClient("http://business.test", transport=httpx.MockTransport(self.handler))


BREAD = {"id_producto": 1, "nombre": "Pan", "precio_venta": 2, "stock": 40, "unidad_medida": "piezas"}
MILK = {"id_producto": 2, "nombre": "Leche", "precio_venta": 25.5, "stock": 12, "unidad_medida": "litros"}


@pytest.fixture
def business_api():
    return FakeBusinessApi(products=[BREAD, MILK])
