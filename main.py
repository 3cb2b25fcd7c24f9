"""ASGI Entry Point - Root Module.

This is the root-level entry point for ASGI servers
(e.g. `uvicorn main:app`). It imports from the quakemap package.
"""

from quakemap.main import app

__all__ = [
    "app",
]
