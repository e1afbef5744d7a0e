# core/state.py
import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional

BUSINESS_QUESTIONS = (
    "¿Qué productos vendiste hoy?",
    "¿Cuánto producto recibiste hoy?",
    "¿Cuál es tu conteo de inventario actual?",
    "¿Pagaste a tus empleados hoy?",
    "¿Pagaste algún servicio comercial local hoy?",
)

# answer must be accepted with confidence strictly above this to advance
ACCEPT_CONFIDENCE = 0.6

INTRO_MESSAGE = "¡Hola! Estoy aquí para ayudarte a rastrear la actividad comercial de hoy. Comencemos."


@dataclass
class ValidationVerdict:
    accepted: bool
    confidence: float
    reason: str = ""

    def passes(self) -> bool:
        return self.accepted and self.confidence > ACCEPT_CONFIDENCE

    def as_dict(self) -> Dict[str, object]:
        # wire names used by the original front-end
        return {"isAnswered": self.accepted, "confidence": self.confidence, "reason": self.reason}


def _empty_answers() -> List[Optional[str]]:
    return [None] * len(BUSINESS_QUESTIONS)


@dataclass
class InterviewState:
    questions: tuple = BUSINESS_QUESTIONS
    current_question_index: int = 0
    stage: str = "in_progress"  # in_progress | finished
    answers: List[Optional[str]] = field(default_factory=_empty_answers)
    # append-only; {"role": "user"|"assistant"|"system", "content": "..."}
    transcript: List[Dict[str, str]] = field(default_factory=list)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.stage == "finished"

    @property
    def current_question(self) -> Optional[str]:
        if self.finished:
            return None
        return self.questions[self.current_question_index]

    def clone(self) -> "InterviewState":
        return copy.deepcopy(self)

    def reset(self) -> "InterviewState":
        return InterviewState(questions=self.questions)
