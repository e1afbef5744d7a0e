# core/controller.py

from core.actions import dispatch
from core.errors import InvalidInput
from core.evaluator import validate_answer
from core.followup import generate_followup
from core.logger import get_logger
from core.state import InterviewState

logger = get_logger("controller")

ACKNOWLEDGMENT = "¡Excelente, entendido! Continuemos."


def handle_user_answer(state: InterviewState, answer: str) -> dict:
    """
    One interview turn.

      1) Record the raw answer for the current slot
      2) Validate it against the current question
      3) Accepted -> run the slot's business action, acknowledge, advance (or finish)
      4) Otherwise -> ask one follow-up and stay on the same question

    ``state`` is left untouched; the updated copy is returned under "state".
    Raises InvalidInput for a blank answer or a finished interview.
    """
    if not (answer or "").strip():
        raise InvalidInput("Message is required")
    if state.finished:
        raise InvalidInput("Interview already finished; reset to start again")

    state = state.clone()
    idx = state.current_question_index
    question = state.questions[idx]
    logger.info("User response to question %d: %r", idx, answer)

    # --- Always store raw user response ---
    state.answers[idx] = answer
    state.transcript.append({"role": "user", "content": answer})

    verdict = validate_answer(question, answer)

    if verdict.passes():
        message = dispatch(idx, answer) or ACKNOWLEDGMENT
        state.transcript.append({"role": "assistant", "content": message})

        if idx < state.total_questions - 1:
            state.current_question_index = idx + 1
            next_q = state.questions[state.current_question_index]
            logger.info("Answer accepted, advancing to question %d", state.current_question_index)
            return {
                "action": "ask_question",
                "acknowledgment": message,
                "next_question": next_q,
                "done": False,
                "requires_follow_up": False,
                "validation": verdict,
                "state": state,
            }

        state.stage = "finished"
        logger.info("All questions answered; interview complete")
        return {
            "action": "finish",
            "acknowledgment": message,
            "next_question": None,
            "done": True,
            "requires_follow_up": False,
            "validation": verdict,
            "state": state,
        }

    # --- Not enough: one clarifying question, same slot ---
    follow_up = generate_followup(question, answer)
    state.transcript.append({"role": "assistant", "content": follow_up})
    logger.info("Answer unclear (%s); asked follow-up", verdict.reason)
    return {
        "action": "ask_follow_up",
        "acknowledgment": follow_up,
        "next_question": question,
        "done": False,
        "requires_follow_up": True,
        "validation": verdict,
        "state": state,
    }
