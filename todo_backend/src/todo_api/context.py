from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .repositories import TodoStore
from .settings import Settings, get_settings

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


# PUBLIC_INTERFACE
@dataclass
class AppContext:
    """
    Dependencies shared by every request handler, built once at startup.

    Fields:
    - store: backend used by the todo handlers
    - settings: application settings (store timeout, CORS, ...)
    - templates: renderer for the home page
    """

    store: TodoStore
    settings: Settings = field(default_factory=get_settings)
    templates: Jinja2Templates = field(
        default_factory=lambda: Jinja2Templates(directory=str(TEMPLATES_DIR))
    )


# PUBLIC_INTERFACE
def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context attached to the running app."""
    return request.app.state.context
