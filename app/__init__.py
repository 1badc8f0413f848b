"""
STUDY PORTAL AI APPLICATION PACKAGE
===================================

This directory is the main Python package for the Study Portal AI backend.

  from app.main import app
  from app.models import QuizRequest
  from app.services.translator_service import AITranslatorService

FILE STRUCTURE:
  app/
    __init__.py   - This file; marks 'app' as a package.
    main.py       - FastAPI app and HTTP endpoints (/ai, /health).
    models.py     - Pydantic models: one request model per AI tool, plus response bodies.
    exceptions.py - Error kinds raised by the translator (all answered with status 500).
    services/     - Business logic: prompt building and the upstream chat-completion call.
    utils/        - Helpers: retry with backoff.
"""
