# core/errors.py


class InterviewError(Exception):
    """Base class for errors raised by the interview agent."""


class UpstreamError(InterviewError):
    """A completion, catalog or ledger call failed or returned malformed data."""


class DecodeError(InterviewError):
    """Structured JSON could not be parsed out of a completion."""


class EmptyTranscriptError(InterviewError):
    """Summary requested for a conversation with no turns."""


class InvalidInput(InterviewError):
    """A required answer was missing or the interview cannot take more answers."""
