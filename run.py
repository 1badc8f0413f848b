"""
RUN SCRIPT - Start the Study Portal AI server
=============================================

PURPOSE:
  Single entry point to start the backend that serves the portal's AI tools.

WHAT IT DOES:
  - Imports the FastAPI app from app.main.
  - Runs it with uvicorn on host 0.0.0.0 (accept connections from any interface) and port 8000.
  - reload=True means any change to Python files will restart the server (handy for development).

USAGE:
  python run.py

  Then POST to http://localhost:8000/ai, or use client.py.
  API docs: http://localhost:8000/docs

NOTE:
  Before running, set GOOGLE_AI_API_KEY in .env. Without it every AI request fails
  with "GOOGLE_AI_API_KEY is not configured".
"""

import uvicorn

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",   # String path to the FastAPI app instance (module:variable).
        host="0.0.0.0",   # Listen on all network interfaces so browsers on other devices can connect.
        port=8000,        # HTTP port; change if 8000 is already in use.
        reload=True       # Auto-restart when .py files change (useful during development).
    )
