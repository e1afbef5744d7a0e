"""Operator front-ends: HTTP API, terminal loop and Streamlit UI."""
