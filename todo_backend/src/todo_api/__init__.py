"""
FastAPI Todo service package.

Exposes the application factory and the context it is built from, so callers
can assemble the app with any TodoStore (MongoDB in production, in-memory in
tests).
"""

from .context import AppContext  # noqa: F401
from .main import create_app  # noqa: F401
