import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from themebot.api.deps import request_has_valid_token
from themebot.api.routers import themes as themes_router
from themebot.core.config import Settings
from themebot.core.database import build_engine, build_session_factory, create_tables
from themebot.services.discord import DiscordClient
from themebot.services.gateway import ChatPlatform, ThemeGateway
from themebot.services.ingestion import ThemeIngestor

LOG = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: AsyncEngine | None = None,
    chat: ChatPlatform | None = None,
    ingestor=None,
) -> FastAPI:
    """
    Build the API. Everything handlers need (settings, gateway, ingestor) is
    created here and stored on `app.state`; nothing is read from module globals.
    """
    settings = settings or Settings.from_env()
    owns_engine = engine is None
    engine = engine or build_engine(settings.database_url, echo=settings.sql_echo)
    if chat is None and settings.discord_enabled:
        chat = DiscordClient(
            settings.discord_bot_token,
            settings.discord_channel_id,
            api_base=settings.discord_api_base,
        )
    gateway = ThemeGateway(build_session_factory(engine), chat=chat)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables and the upload folder on startup. Shutdown: drain background deletes, dispose engine."""
        if settings.create_tables:
            await create_tables(engine)
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        LOG.info("themes API ready upload_dir=%s discord=%s", settings.upload_dir, chat is not None)
        yield
        await gateway.aclose()
        if owns_engine:
            await engine.dispose()

    app = FastAPI(title="Themebot API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.ingestor = ingestor or ThemeIngestor(gateway)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(themes_router.router)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        """Request bodies are parsed before the bearer dependency runs; keep 403 ahead of 422."""
        if request.url.path.startswith(themes_router.router.prefix) and not request_has_valid_token(request):
            LOG.error("Bearer token mismatch %s %s", request.method, request.url.path)
            return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": "Forbidden"})
        return await request_validation_exception_handler(request, exc)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
