import logging
import time

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from jinja2 import TemplateError

from .context import AppContext, get_context
from .errors import RenderError, TodoServiceError
from .routers import todos as todos_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "home", "description": "Static home page."},
    {"name": "todos", "description": "CRUD operations for Todo items stored in MongoDB."},
]


# PUBLIC_INTERFACE
def create_app(context: AppContext) -> FastAPI:
    """
    Build the FastAPI application around an explicitly constructed context.

    The context (store, settings, templates) is attached to app.state and handed
    to handlers through the get_context dependency.
    """
    app = FastAPI(
        title="Todo Service",
        description="HTTP CRUD service for todo items backed by a MongoDB collection.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.context = context

    origins = context.settings.cors_allow_origins
    allow_all = origins == ["*"] or len(origins) == 0
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            '"%s %s" %s in %.1fms',
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Malformed JSON or wrongly typed fields are client errors (400).

        Response format:
            {
                "message": "Invalid request body",
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request body",
                "error": "ValidationError",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(RenderError)
    async def render_exception_handler(request: Request, exc: RenderError) -> PlainTextResponse:
        return PlainTextResponse("Internal server error", status_code=exc.status_code)

    @app.exception_handler(TodoServiceError)
    async def service_exception_handler(request: Request, exc: TodoServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    # PUBLIC_INTERFACE
    @app.get("/", summary="Home", tags=["home"], response_class=HTMLResponse)
    def home(request: Request, ctx: AppContext = Depends(get_context)) -> HTMLResponse:
        """
        Render the static home page.
        """
        try:
            return ctx.templates.TemplateResponse(request, "home.html")
        except TemplateError as exc:
            logger.error("Template error: %s", exc)
            raise RenderError("Failed to render home page", str(exc)) from exc

    app.include_router(todos_router.router)
    return app
