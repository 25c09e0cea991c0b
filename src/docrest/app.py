"""Main docrest application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from rich.align import Align
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from starlette.exceptions import HTTPException as StarletteHTTPException

from docrest.api.crud import CrudOps
from docrest.api.responses import error_response, not_found_response
from docrest.core.config import DocRestConfig
from docrest.core.errors import DocRestError
from docrest.core.logging import color_palette, console, log
from docrest.db.registry import InstanceRegistry
from docrest.db.store import Collection, Database


class DocRest:
    """Serves every collection under a storage root as a REST resource."""

    def __init__(self, config: DocRestConfig, app: Optional[FastAPI] = None):
        """Initialize the application and the registry it owns."""
        self.config = config
        self.app = app or FastAPI(lifespan=self._lifespan)
        self.router = APIRouter(tags=["Collections"])
        self.registry = InstanceRegistry(config.root)

        self._initialize_app()

    def _initialize_app(self) -> None:
        """Initialize FastAPI app configuration."""
        self.app.title = self.config.project_name
        self.app.version = self.config.version
        self.app.description = self.config.description

        # Handlers reach the registry through the app state
        self.app.state.registry = self.registry

        # Add CORS middleware by default
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        yield
        self.registry.dispose()
        log.info("Released database handles")

    def resolve_database(self, name: str) -> Database:
        """Resolve a database handle by name, creating it if it does not exist."""
        return self.registry.resolve_database(name)

    def resolve_model(self, name: str, database: Database) -> Collection:
        """Resolve a collection model by name in a database, creating it if it does not exist."""
        return self.registry.resolve_model(name, database)

    def print_welcome(self) -> None:
        """Print a welcome panel with the storage root and docs URL."""
        docs_url = f"http://{self.config.host}:{self.config.port}/docs"
        message = Text.from_markup(
            f"Serving collections under [bold]{self.config.root}[/bold]\n"
            f"API Documentation available at [link={docs_url}]{docs_url}[/link]"
        )
        panel = Panel(
            Align.center(message, vertical="middle"),
            title=f"[bold green]{self.config.project_name} v{self.config.version}[/bold green]",
            border_style="blue",
            padding=(1, 2),
        )
        console.print(panel)

    def gen_collection_routes(self) -> None:
        """Generate the generic CRUD routes shared by every collection."""
        log.section("Generating Collection Routes")

        crud_ops = CrudOps(router=self.router)
        crud_ops.generate_all()

        self.app.include_router(self.router)

    def configure_error_handlers(self) -> None:
        """
        Configure global error handlers for the API.

        Unmatched routes get a fixed 404 body; every other failure is
        reported through the generic `{error: {message, code}}` payload.
        """

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            if exc.status_code == 404:
                return not_found_response()
            error = DocRestError(str(exc.detail), code=exc.status_code)
            return error_response(error)

        @self.app.exception_handler(DocRestError)
        async def docrest_exception_handler(request: Request, exc: DocRestError):
            log.warn(f"{color_palette['method'](request.method)} {escape(request.url.path)}: {escape(exc.message)}")
            return error_response(exc)

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            log.error(f"Unhandled exception on {request.method} {escape(request.url.path)}: {escape(repr(exc))}")
            return error_response(exc)

        log.success("Configured global error handlers")

    def generate_all(self) -> FastAPI:
        """Register routes and error handlers, returning the FastAPI app."""
        self.configure_error_handlers()
        self.gen_collection_routes()
        return self.app


def create_app(config: Optional[DocRestConfig] = None, **overrides) -> FastAPI:
    """
    Build a ready-to-serve FastAPI app.

    Without a config, one is read from the environment; keyword overrides
    (e.g. `root=...`) are applied on top of it.
    """
    config = config or DocRestConfig.from_env(**overrides)
    return DocRest(config).generate_all()
