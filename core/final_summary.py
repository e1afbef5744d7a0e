# core/final_summary.py
from typing import Dict, List

from core.errors import EmptyTranscriptError
from core.logger import get_logger
from llm.llm_providers import complete

logger = get_logger("final_summary")

SUMMARY_SYS = "Eres una IA de análisis comercial. Resume datos comerciales en información clave."

SUMMARY_TOPICS = (
    "Productos vendidos",
    "Inventario actual",
    "Producto recibido",
    "Pagos a empleados",
    "Pagos de servicios comerciales locales",
)


def format_transcript(transcript: List[Dict[str, str]]) -> str:
    return "\n".join(f"{turn['role']}: {turn['content']}" for turn in transcript)


def summarize_conversation(transcript: List[Dict[str, str]]) -> str:
    """
    Narrative business summary of the whole interview.

    Raises EmptyTranscriptError when there is nothing to summarize and lets
    UpstreamError through: a summary is only useful if it was generated.
    """
    if not transcript:
        raise EmptyTranscriptError("No conversation to summarize")

    topics = "\n".join(f"- {topic}" for topic in SUMMARY_TOPICS)
    prompt = (
        f"Resume la siguiente entrevista comercial en puntos sobre:\n{topics}\n\n"
        f"Conversación:\n{format_transcript(transcript)}\n\n"
        "Proporciona un resumen conciso con información procesable."
    )
    summary = complete(SUMMARY_SYS, prompt, temperature=0.4)
    logger.info("Business summary generated (%d chars)", len(summary))
    return summary
