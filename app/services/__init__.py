"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (app.main) calls these services;
they don't handle HTTP routing, only request translation and the upstream call.

MODELS:
    translator_service - Builds the prompt for each AI tool, calls the upstream
                         chat-completion API once, returns the text or raises.
"""
