"""Fixed interviewer lines used by the scripted voice responder."""
from __future__ import annotations

from typing import Dict

AI_RESPONSES: Dict[str, str] = {
    "greeting": (
        "Hello {candidate_name}, let's start your interview. I'm excited to learn more about you. "
        "Let's begin with the first question."
    ),
    "acknowledgment": "Thank you for that response. That's interesting. Let me ask you the next question.",
    "closing": (
        "Thank you for completing this interview. Your responses have been recorded. "
        "The hiring team will review them and get back to you soon."
    ),
    "reprompt": "I didn't quite catch that. Could you please repeat your answer?",
}


def greeting_for(candidate_name: str) -> str:
    # str.replace keeps braces in candidate names literal
    return AI_RESPONSES["greeting"].replace("{candidate_name}", candidate_name)


__all__ = ["AI_RESPONSES", "greeting_for"]
