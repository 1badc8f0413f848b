"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all Study Portal AI settings: the upstream API key, endpoint,
  model name, generation limits, and the prompt templates for every AI tool.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes GOOGLE_AI_API_KEY, AI_API_URL, AI_MODEL for the upstream chat-completion call.
  - Fixes temperature (0.7) and max output tokens (2048) for every request.
  - Holds the prompt templates (summary, quiz, flashcards, presentation, study plan)
    and the quiz-type instruction texts.

USAGE:
  Import what you need: `from config import GOOGLE_AI_API_KEY, SUMMARIZE_PROMPT`
  The translator service takes these as constructor defaults, so tests can override them.
"""

import os
import logging
from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


def _get_int(name: str, default: int) -> int:
    """Read an integer env var; fall back to default (with a warning) if it is not a number."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer value for %s: %r", name, raw)
        return default


# ============================================================================
# UPSTREAM AI API CONFIGURATION
# ============================================================================
# The upstream is any OpenAI-compatible chat-completion endpoint. By default we
# talk to Google's generative-language API through its OpenAI-compatible route.
# An empty GOOGLE_AI_API_KEY means "not configured": every AI request fails
# with a configuration error before any network call.

GOOGLE_AI_API_KEY = os.getenv("GOOGLE_AI_API_KEY", "").strip()
AI_API_URL = os.getenv(
    "AI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
)
AI_MODEL = os.getenv("AI_MODEL", "gemini-2.0-flash")

# Role label the upstream expects for assistant turns in a chat history.
# OpenAI-compatible endpoints use "assistant"; Gemini's native schema uses "model".
AI_MODEL_ROLE = os.getenv("AI_MODEL_ROLE", "assistant")

# Generation settings are fixed for every request type.
AI_TEMPERATURE = 0.7
AI_MAX_TOKENS = 2048

# Seconds to wait for the upstream before giving up.
AI_REQUEST_TIMEOUT = _get_int("AI_REQUEST_TIMEOUT", 60)

# Attempts made when the upstream answers 429. 1 means a single call, no retry.
AI_RATE_LIMIT_RETRIES = max(1, _get_int("AI_RATE_LIMIT_RETRIES", 1))

# Returned as the result when the upstream reply carries no completion text.
FALLBACK_RESPONSE_TEXT = "No response generated"


# ============================================================================
# QUIZ TYPES
# ============================================================================
# Instruction text embedded in the quiz prompt. Any quizType not listed here
# (including "multiple-answer") falls through to QUIZ_TYPE_DEFAULT_TEXT.

QUIZ_TYPE_TEXTS = {
    "mixed": "a mixture of multiple choice, true/false, and multiple answer questions",
    "multiple-choice": "multiple choice questions with 4 options each",
    "true-false": "true or false questions",
}
QUIZ_TYPE_DEFAULT_TEXT = "multiple answer questions (select all that apply) with 5 options each"


# ============================================================================
# PROMPT TEMPLATES
# ============================================================================
# Filled with str.format(); literal braces in the JSON examples are doubled.

SUMMARIZE_PROMPT = "Please provide a clear and concise summary of the following notes:\n\n{notes}"

QUIZ_PROMPT = """Based on the following notes, generate {num_questions} {quiz_type_text}.

Notes:
{notes}

Format your response as a JSON array with the following structure:
[
  {{
    "question": "Question text",
    "type": "multiple-choice" | "true-false" | "multiple-answer",
    "options": ["Option 1", "Option 2", ...],
    "correctAnswer": "Option text" | ["Option 1", "Option 2"] (for multiple-answer),
    "explanation": "Brief explanation of the correct answer"
  }}
]

Make sure questions test understanding, not just memorization."""

FLASHCARDS_PROMPT = """Based on the following notes, generate 10 flashcards for studying.

Notes:
{notes}

Format your response as a JSON array:
[
  {{
    "front": "Question or concept",
    "back": "Answer or explanation"
  }}
]

Focus on key concepts, definitions, and important facts."""

PRESENTATION_PROMPT = """Based on the following notes, create a presentation outline with 5-8 slides.

Notes:
{notes}

Format your response as a JSON array:
[
  {{
    "title": "Slide title",
    "content": ["Bullet point 1", "Bullet point 2", "Bullet point 3"],
    "notes": "Speaker notes for this slide"
  }}
]

Make it clear, concise, and engaging."""

STUDY_PLAN_PROMPT = """Create a comprehensive study plan for learning: {topic}

Please include:
1. Overview of key concepts
2. Suggested timeline (weeks/days)
3. Learning resources
4. Practice exercises or projects
5. Milestones and checkpoints

Make it practical and actionable for a student."""
