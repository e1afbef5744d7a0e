# core/sessions.py
"""In-process store of interview states, one per session id."""
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List

from core.controller import handle_user_answer
from core.final_summary import summarize_conversation
from core.logger import get_logger
from core.state import InterviewState

logger = get_logger("sessions")

DEFAULT_SESSION_ID = "default"
MAX_SESSIONS = 1000


@dataclass
class _Session:
    state: InterviewState = field(default_factory=InterviewState)
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionStore:
    """
    Owns the live InterviewState for each session.

    Turns on the same session are serialized by a per-session lock, and the
    state produced by a turn is only stored once the turn has completed.
    At most ``max_sessions`` sessions are kept; the least recently used one
    is forgotten first, except the default session. Nothing is persisted.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, _Session]" = OrderedDict()
        self._guard = threading.Lock()

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session_id):
        return session_id in self._sessions

    def _session(self, session_id: str) -> _Session:
        with self._guard:
            session = self._sessions.get(session_id)
            if session is None:
                session = self._sessions[session_id] = _Session()
                self._evict()
            else:
                self._sessions.move_to_end(session_id)
            return session

    def _evict(self):
        while len(self._sessions) > self.max_sessions:
            victim = next((sid for sid in self._sessions if sid != DEFAULT_SESSION_ID), None)
            if victim is None:
                return
            del self._sessions[victim]
            logger.info("Session %s evicted (limit %d)", victim, self.max_sessions)

    def get(self, session_id: str = DEFAULT_SESSION_ID) -> InterviewState:
        session = self._session(session_id)
        with session.lock:
            return session.state.clone()

    def reset(self, session_id: str = DEFAULT_SESSION_ID) -> InterviewState:
        session = self._session(session_id)
        with session.lock:
            session.state = session.state.reset()
            return session.state.clone()

    def submit(self, answer: str, session_id: str = DEFAULT_SESSION_ID) -> dict:
        session = self._session(session_id)
        with session.lock:
            result = handle_user_answer(session.state, answer)
            session.state = result["state"]
            result["state"] = session.state.clone()
            return result

    def transcript(self, session_id: str = DEFAULT_SESSION_ID) -> List[Dict[str, str]]:
        return self.get(session_id).transcript

    def summarize(self, session_id: str = DEFAULT_SESSION_ID) -> str:
        return summarize_conversation(self.transcript(session_id))


store = SessionStore()
