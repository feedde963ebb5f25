"""
Server package exposing the FastAPI app and session registry.
"""

from .app import app, create_app  # noqa: F401
from .registry import SessionRegistry  # noqa: F401
