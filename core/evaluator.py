# core/evaluator.py
from pydantic import BaseModel, Field

from core.errors import UpstreamError
from core.logger import get_logger
from core.parsing import decode_json_object
from core.state import ValidationVerdict
from llm.llm_providers import complete

logger = get_logger("evaluator")

EVAL_SYS = "Eres un experto en validación de preguntas. Responde SOLO en formato JSON válido."

EVAL_PROMPT = """Eres un experto en validar respuestas de entrevistas.

Pregunta actual: "{question}"

Respuesta del usuario: "{answer}"

Evalúa si la respuesta del usuario contesta correctamente la pregunta. Ten en cuenta:
- ¿Proporciona información relevante sobre el tema?
- ¿Es clara y suficientemente específica?
- ¿Responde a lo solicitado?

Responde SOLO en formato JSON válido (sin texto adicional):
{{
  "isAnswered": true o false,
  "confidence": 0.0 a 1.0,
  "reason": "breve explicación"
}}"""

UNPARSEABLE_REASON = "Respuesta poco clara"
UPSTREAM_REASON = "Error en validación"


class VerdictPayload(BaseModel):
    isAnswered: bool
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str = ""


def validate_answer(question: str, answer: str) -> ValidationVerdict:
    """
    Ask the judge model whether ``answer`` covers ``question``.

    Never raises for upstream or parsing trouble: those come back as a
    rejecting verdict so the interview asks a follow-up instead of
    accepting something it could not check.
    """
    prompt = EVAL_PROMPT.format(question=question, answer=answer)
    try:
        raw = complete(EVAL_SYS, prompt, temperature=0.3)
    except UpstreamError as exc:
        logger.warning("Validation call failed: %s", exc)
        return ValidationVerdict(accepted=False, confidence=0.0, reason=UPSTREAM_REASON)

    decoded = decode_json_object(raw, VerdictPayload)
    if not decoded.ok:
        logger.warning("Could not parse validation response (%s): %r", decoded.error, raw)
        return ValidationVerdict(accepted=False, confidence=0.5, reason=UNPARSEABLE_REASON)

    verdict = ValidationVerdict(
        accepted=decoded.value.isAnswered,
        confidence=decoded.value.confidence,
        reason=decoded.value.reason,
    )
    logger.info("Validation result: accepted=%s confidence=%.2f", verdict.accepted, verdict.confidence)
    return verdict
