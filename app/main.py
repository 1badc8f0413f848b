"""
STUDY PORTAL AI MAIN API
========================

This module defines the FastAPI application and its HTTP endpoints. It is the
server side of the portal's AI tools: the browser posts one JSON request per
tool invocation and gets back one JSON answer. Nothing is stored between calls;
for chat, the browser sends the whole history every time.

ENDPOINTS:
  GET     /        - Returns API name and list of endpoints.
  GET     /health  - Returns whether the translator is ready and an API key is set.
  POST    /ai      - Run one AI tool. Body: {"type": ..., plus the fields for that type}.
                     Success: {"result": text}. Any failure: {"error": message}, status 500.
  OPTIONS /ai      - Empty 200 with permissive CORS headers (no logic runs).

REQUEST TYPES (POST /ai):
  summarize     - notes
  quiz          - notes, quizType, numQuestions
  flashcards    - notes
  presentation  - notes
  chat          - messages: [{"role": "user" | "assistant", "content": ...}, ...]
  study-plan    - topic

STARTUP:
  The lifespan function builds the AITranslatorService once; all requests share it.
"""


from contextlib import asynccontextmanager
from typing import Any, Dict
import logging

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
import uvicorn

from app.exceptions import AIServiceError
from app.models import AIResponse, ErrorResponse, REQUEST_TYPES
from app.services.translator_service import AITranslatorService


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("StudyPortal.AI")


# Headers sent on every answer so any origin can call the API from a browser.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCES
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by the route handlers.
translator_service: AITranslatorService = None


def error_response(message: str) -> JSONResponse:
    """Every failure kind is answered the same way: {"error": message}, status 500."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the translator service on startup."""
    global translator_service

    logger.info("=" * 60)
    logger.info("Study Portal AI - Starting Up...")
    logger.info("=" * 60)

    try:
        translator_service = AITranslatorService()
        logger.info("Translator service initialized (model: %s)", translator_service.model)
        logger.info("API key configured: %s", translator_service.is_configured)
        logger.info("Docs: http://localhost:8000/docs")
        logger.info("=" * 60)
    except Exception as e:
        logger.error(f"Fatal error during startup: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down Study Portal AI...")


# -------------------------------------------------------------------------
# CORS
# -------------------------------------------------------------------------

class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Starlette's CORS middleware, but preflight answers carry no body."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)


# -------------------------------------------------------------------------
# FASTAPI APP
# -------------------------------------------------------------------------
app = FastAPI(
    title="Study Portal AI API",
    description="AI study tools: summaries, quizzes, flashcards, presentations, chat, study plans",
    lifespan=lifespan
)

# Allow any origin; credentials are not needed, so the wildcard is sent as-is.
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body that is not a JSON object: same {"error"} shape as every other failure."""
    logger.warning("Rejected request body (%s validation errors)", len(exc.errors()))
    return error_response("Invalid request body")


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint (for discovery)."""
    return {
        "message": "Study Portal AI API",
        "endpoints": {
            "/ai": "Run an AI tool (POST). Types: " + ", ".join(REQUEST_TYPES),
            "/health": "System health check"
        }
    }


@app.get("/health")
async def health():
    """Return 'healthy', whether the translator exists, and whether an API key is set."""
    return {
        "status": "healthy",
        "translator_service": translator_service is not None,
        "api_key_configured": bool(translator_service and translator_service.is_configured),
    }


@app.options("/ai")
async def ai_options():
    """Plain OPTIONS (no preflight headers): empty 200, nothing else runs."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/ai", response_model=AIResponse, responses={500: {"model": ErrorResponse}})
def ai(payload: Dict[str, Any] = Body(...)):
    """
    Run one AI tool and return its text.

    Declared as a plain def so FastAPI runs it in the threadpool; the upstream
    call blocks until the API answers or the timeout expires.

    REQUEST BODY (study plan example):
    {
        "type": "study-plan",
        "topic": "Thermodynamics"
    }

    RESPONSE:
    {
        "result": "Week 1: ..."
    }
    """
    if not translator_service:
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Translator service not initialized").model_dump(),
            headers=CORS_HEADERS,
        )

    try:
        result = translator_service.generate(payload)
        return JSONResponse(content=AIResponse(result=result).model_dump(), headers=CORS_HEADERS)
    except AIServiceError as e:
        logger.warning("AI request failed (%s): status=%s", e.kind, e.status)
        return error_response(e.message)
    except Exception as e:
        logger.error(f"Error processing AI request: {e}", exc_info=True)
        return error_response(str(e) or "An unknown error occurred")


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m app.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m app.main"""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

if __name__ == "__main__":
    run()
