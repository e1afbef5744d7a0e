# app/main.py
import json
import sys
import os

# Add project root to PYTHONPATH so imports work when running this file directly
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import InterviewError
from core.recommendations import generate_inventory_recommendations
from core.report import export_pdf
from core.sessions import SessionStore
from core.state import INTRO_MESSAGE

HELP_TEXT = (
    "Commands: /summary  /history  /recommendations  /report  /reset  exit"
)


def prompt_user(prompt_text: str) -> str:
    try:
        return input(prompt_text)
    except EOFError:
        return "exit"


def print_history(store: SessionStore):
    for turn in store.transcript():
        speaker = "YOU" if turn["role"] == "user" else "AGENT"
        print(f"  {speaker}: {turn['content']}")


def run_command(store: SessionStore, command: str) -> bool:
    """Handle a slash command. Returns False if the input was not a command."""
    if command == "/summary":
        print("\n--- SUMMARY ---")
        print(store.summarize())
    elif command == "/history":
        print_history(store)
    elif command == "/recommendations":
        result = generate_inventory_recommendations()
        print(json.dumps(result.get("recommendations", []), indent=2, ensure_ascii=False))
        if result.get("message"):
            print(result["message"])
    elif command == "/report":
        state = store.get()
        summary = store.summarize() if state.transcript else None
        path = export_pdf(state, summary=summary, filename="business_report.pdf")
        print(f"Report written to {path}")
    elif command == "/reset":
        state = store.reset()
        print(f"\nAGENT: {INTRO_MESSAGE}")
        print(f"AGENT: {state.current_question}")
    else:
        return False
    return True


def run_cli_demo():
    print("=== Business Interview Agent ===")
    print(HELP_TEXT + "\n")

    store = SessionStore()
    state = store.reset()
    print(f"AGENT: {INTRO_MESSAGE}")
    print(f"AGENT: {state.current_question}")

    while True:
        user_input = prompt_user("YOU: ").strip()
        if not user_input:
            print("(Please type an answer, or 'exit' to quit.)")
            continue
        if user_input.lower() in ("exit", "quit"):
            print("Exiting.")
            break

        try:
            if user_input.startswith("/"):
                if not run_command(store, user_input.lower()):
                    print(HELP_TEXT)
                continue

            result = store.submit(user_input)
        except InterviewError as e:
            print(f"(!) {e}")
            continue

        print(f"AGENT: {result['acknowledgment']}")
        if result["done"]:
            print("\n=== Interview finished ===")
            print("Use /summary, /report or /reset, or 'exit' to quit.")
        elif not result["requires_follow_up"]:
            print(f"AGENT: {result['next_question']}")


if __name__ == "__main__":
    run_cli_demo()
