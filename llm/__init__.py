"""Completion client for the OpenAI-compatible chat endpoint."""
