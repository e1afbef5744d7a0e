import pytest
from fastapi.testclient import TestClient

from app import server
from core import controller
from core.controller import ACKNOWLEDGMENT
from core.errors import DecodeError, UpstreamError
from core.sessions import SessionStore
from core.state import BUSINESS_QUESTIONS, INTRO_MESSAGE, ValidationVerdict


@pytest.fixture
def store(monkeypatch):
    fresh = SessionStore()
    monkeypatch.setattr(server, "store", fresh)
    return fresh


@pytest.fixture
def client(store):
    return TestClient(server.app)


@pytest.fixture
def verdicts(monkeypatch):
    queue = []
    monkeypatch.setattr(controller, "validate_answer", lambda q, a: queue.pop(0))
    monkeypatch.setattr(controller, "dispatch", lambda i, a: None)
    monkeypatch.setattr(controller, "generate_followup", lambda q, a: "¿Cuántos panes?")
    return queue


def test_start_interview(client):
    body = client.get("/api/start-interview").json()

    assert body == {
        "message": INTRO_MESSAGE,
        "question": BUSINESS_QUESTIONS[0],
        "questionIndex": 0,
        "totalQuestions": len(BUSINESS_QUESTIONS),
        "session_id": "default",
    }


def test_chat_accepted_answer(client, verdicts):
    verdicts.append(ValidationVerdict(True, 0.9, "claro"))

    body = client.post("/api/chat", json={"message": "Vendí 3 panes"}).json()

    assert body["response"] == ACKNOWLEDGMENT
    assert body["nextQuestion"] == BUSINESS_QUESTIONS[1]
    assert body["questionIndex"] == 1
    assert body["isNewQuestion"] is True
    assert body["requiresFollowUp"] is False
    assert body["done"] is False
    assert body["validation"] == {"isAnswered": True, "confidence": 0.9, "reason": "claro"}


def test_chat_follow_up(client, verdicts):
    verdicts.append(ValidationVerdict(False, 0.3, "vago"))

    body = client.post("/api/chat", json={"message": "pan"}).json()

    assert body["response"] == "¿Cuántos panes?"
    assert body["nextQuestion"] == BUSINESS_QUESTIONS[0]
    assert body["questionIndex"] == 0
    assert body["requiresFollowUp"] is True
    assert body["isNewQuestion"] is False


def test_chat_last_answer_is_done(client, store, verdicts):
    verdicts.extend([ValidationVerdict(True, 0.9)] * len(BUSINESS_QUESTIONS))
    for i in range(len(BUSINESS_QUESTIONS) - 1):
        client.post("/api/chat", json={"message": f"respuesta {i}"})

    body = client.post("/api/chat", json={"message": "último"}).json()

    assert body["done"] is True
    assert body["nextQuestion"] is None


@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}])
def test_chat_requires_message(client, payload):
    response = client.post("/api/chat", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


def test_chat_after_finish_is_rejected(client, verdicts):
    verdicts.extend([ValidationVerdict(True, 0.9)] * len(BUSINESS_QUESTIONS))
    for i in range(len(BUSINESS_QUESTIONS)):
        client.post("/api/chat", json={"message": f"respuesta {i}"})

    assert client.post("/api/chat", json={"message": "otra"}).status_code == 400


def test_sessions_are_keyed_by_id(client, verdicts):
    verdicts.append(ValidationVerdict(True, 0.9))
    client.post("/api/chat", json={"message": "Vendí 3 panes", "session_id": "s1"})

    assert len(client.get("/api/conversation-history", params={"session_id": "s1"}).json()["history"]) == 2
    assert client.get("/api/conversation-history").json() == {"history": []}


def test_summarize_empty_conversation_is_client_error(client):
    response = client.post("/api/summarize", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "No conversation to summarize"}


def test_summarize(client, verdicts, llm):
    verdicts.append(ValidationVerdict(True, 0.9))
    client.post("/api/chat", json={"message": "Vendí 3 panes"})
    llm.queue("Se vendieron 3 panes.")

    assert client.post("/api/summarize", json={}).json() == {"summary": "Se vendieron 3 panes."}


def test_summarize_upstream_failure_is_500(client, verdicts, llm):
    verdicts.append(ValidationVerdict(True, 0.9))
    client.post("/api/chat", json={"message": "Vendí 3 panes"})
    llm.queue(UpstreamError("model offline"))

    response = client.post("/api/summarize", json={})

    assert response.status_code == 500
    assert response.json() == {"error": "Upstream service failed", "details": "model offline"}


def test_reset_clears_history(client, verdicts):
    verdicts.append(ValidationVerdict(True, 0.9))
    client.post("/api/chat", json={"message": "Vendí 3 panes"})

    assert client.post("/api/reset", json={}).json() == {"message": "Conversation reset", "session_id": "default"}
    assert client.get("/api/conversation-history").json() == {"history": []}


def test_inventory_recommendations(client, monkeypatch):
    result = {
        "success": True,
        "periodo": "semana",
        "recommendations": [{"producto_nombre": "Pan", "cambio_de_compra": 3, "compra_sugerida": 130}],
        "raw_data": [],
    }
    monkeypatch.setattr(server, "generate_inventory_recommendations", lambda: result)

    body = client.get("/api/inventory-recommendations").json()

    assert body["success"] is True
    assert body["recommendations"] == result["recommendations"]


def test_inventory_recommendations_decode_failure_is_500(client, monkeypatch):
    def fail():
        raise DecodeError("could not parse recommendations")

    monkeypatch.setattr(server, "generate_inventory_recommendations", fail)

    response = client.get("/api/inventory-recommendations")

    assert response.status_code == 500
    assert response.json()["error"] == "Upstream service failed"


def test_health(client, monkeypatch):
    monkeypatch.setenv("AI_MODEL", "llama-3")

    body = client.get("/api/health").json()

    assert body["status"] == "ok"
    assert body["model"] == "llama-3"
