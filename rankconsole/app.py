from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rankconsole.application import get_upload_orchestrator
from rankconsole.core.log import get_logger, set_level
from rankconsole.core.settings import load_settings
from rankconsole.infrastructure import (
    RankingAPIClient,
    configure_ranking_service,
    get_ranking_service,
    ranking_service_configured,
)
from rankconsole.routes import session, upload

logger = get_logger("app")


def create_app() -> FastAPI:
    settings = load_settings()
    set_level(settings.log_level)

    owned_client: RankingAPIClient | None = None
    if not ranking_service_configured():
        owned_client = RankingAPIClient(settings.api_base, timeout=settings.api_timeout)
        configure_ranking_service(owned_client)
        logger.info("ranking backend at %s", settings.api_base)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        if owned_client is not None:
            await owned_client.aclose()
            if ranking_service_configured() and get_ranking_service() is owned_client:
                configure_ranking_service(None)

    app = FastAPI(title="Ranking Upload Console", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(upload.router, prefix="/api")
    app.include_router(session.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def status() -> JSONResponse:
        """Report which backend the console talks to and what it is doing."""
        orchestrator = get_upload_orchestrator()
        active = orchestrator.session
        backend = settings.api_base if owned_client is not None else type(get_ranking_service()).__name__
        return JSONResponse(
            {
                "backend": backend,
                "upload": orchestrator.upload_state.status.value,
                "session": active.identity.to_dict() if active is not None else None,
            }
        )

    return app


app = create_app()
