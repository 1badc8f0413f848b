"""
STUDY PORTAL AI CLIENT
======================

PURPOSE:
Python caller for the /ai endpoint, plus an interactive command-line chat.
It does what the portal's browser pages do: send one request per tool use,
treat any {"error"} answer as final, and try to read structured results
(quiz, flashcards, presentation) as JSON, falling back to the raw text.

USAGE:
    python client.py

    Make sure the server is running first: python run.py

COMMANDS:
    /plan <topic>  - Ask for a study plan
    /history       - View the chat history held by this client
    /clear         - Forget the chat history and start over
    /quit or /exit - Exit

The server keeps no history. This client holds it and sends all of it on every
chat call.
"""

import json
import re
from typing import Any, Dict, List, Optional

import requests


# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------
BASE_URL = "http://localhost:8000"

# Markdown code fences models like to wrap JSON in.
_JSON_FENCE = re.compile(r"```json\n?")
_PLAIN_FENCE = re.compile(r"```\n?")


class AIClientError(Exception):
    """The server answered {"error": ...} or could not be reached. Final for that request."""


def parse_structured_result(text: str) -> Optional[List[Any]]:
    """
    Read a quiz/flashcards/presentation result as a JSON array.
    Returns None when the text is not a JSON array, so the caller can show it as-is.
    """
    cleaned = _PLAIN_FENCE.sub("", _JSON_FENCE.sub("", text)).strip()
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


class StudyPortalAIClient:
    """One method per AI tool. Each returns the result text or raises AIClientError."""

    def __init__(self, base_url: str = BASE_URL, timeout: int = 90, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def invoke(self, payload: Dict[str, Any]) -> str:
        """POST one request body to /ai and return its "result"."""
        try:
            response = self.session.post(f"{self.base_url}/ai", json=payload, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise AIClientError("Cannot connect to backend. Start it with: python run.py") from e
        except requests.exceptions.Timeout as e:
            raise AIClientError("Request timed out.") from e
        except requests.RequestException as e:
            raise AIClientError(f"Error: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise AIClientError(f"Error: {response.status_code} - {response.text}") from e

        if isinstance(data, dict) and isinstance(data.get("error"), str):
            raise AIClientError(data["error"])
        if response.status_code != 200 or not isinstance(data, dict) or "result" not in data:
            raise AIClientError(f"Error: {response.status_code} - {response.text}")
        return data["result"]

    def summarize(self, notes: str) -> str:
        return self.invoke({"type": "summarize", "notes": notes})

    def quiz(self, notes: str, quiz_type: str = "mixed", num_questions: int = 5) -> str:
        return self.invoke({
            "type": "quiz",
            "notes": notes,
            "quizType": quiz_type,
            "numQuestions": num_questions,
        })

    def flashcards(self, notes: str) -> str:
        return self.invoke({"type": "flashcards", "notes": notes})

    def presentation(self, notes: str) -> str:
        return self.invoke({"type": "presentation", "notes": notes})

    def chat(self, messages: List[Dict[str, str]]) -> str:
        """messages: full history, oldest first, roles "user" / "assistant"."""
        return self.invoke({"type": "chat", "messages": messages})

    def study_plan(self, topic: str) -> str:
        return self.invoke({"type": "study-plan", "topic": topic})


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def format_history(history: List[Dict[str, str]]) -> str:
    if not history:
        return "No messages yet"
    lines = [f"\nChat History ({len(history)} messages):", "-" * 60]
    for i, msg in enumerate(history, 1):
        role = "You" if msg["role"] == "user" else "Assistant"
        lines.append(f"{i}. {role}: {msg['content']}")
    lines.append("-" * 60)
    return "\n".join(lines)


def main():
    """Chat until /quit or /exit. Handles /plan, /history and /clear."""
    client = StudyPortalAIClient()
    history: List[Dict[str, str]] = []

    print("\n" + "=" * 60)
    print("Study Portal AI - Chat")
    print("=" * 60)
    print("Commands: /plan <topic>, /history, /clear, /quit\n")

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if not user_input:
            continue
        if user_input in ["/quit", "/exit"]:
            print("\nGoodbye!")
            break
        if user_input == "/history":
            print(format_history(history))
            continue
        if user_input == "/clear":
            history = []
            print("\nHistory cleared. Starting fresh!")
            continue

        try:
            if user_input.startswith("/plan "):
                print(client.study_plan(user_input[len("/plan "):]))
                continue
            if user_input.startswith("/"):
                print(f"Unknown command: {user_input}")
                continue

            history.append({"role": "user", "content": user_input})
            reply = client.chat(history)
            history.append({"role": "assistant", "content": reply})
            print(f"Assistant: {reply}")
        except AIClientError as e:
            # Drop the unanswered turn so the history stays alternating.
            if history and history[-1]["role"] == "user":
                history.pop()
            print(f"Error: {e}")


# Run the interactive loop when this file is executed (python client.py).
if __name__ == "__main__":
    main()
