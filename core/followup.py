# core/followup.py
from core.errors import UpstreamError
from core.logger import get_logger
from llm.llm_providers import complete

logger = get_logger("followup")

FOLLOWUP_SYS = "Eres un asistente de entrevista que genera preguntas de seguimiento claras y naturales."

FOLLOWUP_PROMPT = """Eres un asistente que genera preguntas de seguimiento claras y naturales en español.

Pregunta actual: "{question}"

Respuesta del usuario (incompleta o confusa): "{answer}"

Genera UNA sola pregunta de seguimiento en español, corta y directa, que solicite la información necesaria para clarificar la respuesta. No avances a la siguiente pregunta."""

FALLBACK_FOLLOWUP = "¿Puedes dar más detalles sobre tu respuesta anterior?"


def clean_followup(text) -> str:
    """Keep only the first question of ``text``; anything that isn't one becomes the fallback."""
    if not isinstance(text, str):
        return FALLBACK_FOLLOWUP
    text = text.strip()
    qm = text.find("?")
    if qm != -1:
        text = text[:qm + 1].strip()
    if not text.endswith("?"):
        return FALLBACK_FOLLOWUP
    return text


def generate_followup(question: str, answer: str) -> str:
    prompt = FOLLOWUP_PROMPT.format(question=question, answer=answer)
    try:
        raw = complete(FOLLOWUP_SYS, prompt, temperature=0.6)
    except UpstreamError as exc:
        logger.warning("Follow-up generation failed: %s", exc)
        return FALLBACK_FOLLOWUP

    follow_up = clean_followup(raw)
    logger.info("Follow-up question generated: %s", follow_up)
    return follow_up
