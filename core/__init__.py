"""Interview core: state machine, validation, follow-ups and business actions."""
