import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse

from aurora.app.core.config import Settings, settings as default_settings
from aurora.app.core.state import AppState, LoginRequired
from aurora.app.middleware import RequestPipeline, default_stages
import aurora.app.routers.health as health
import aurora.app.routers.reservations as reservations
import aurora.app.routers.rooms as rooms
import aurora.app.routers.session as session
import aurora.app.routers.simulation as simulation

log = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, state: AppState | None = None) -> FastAPI:
    settings = settings or default_settings
    state = state or AppState(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.LOG_LEVEL,
            format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        log.info(
            "Hotel Aurora ready: %d room types, auth mode %s",
            len(state.catalog),
            state.config.auth_mode.value,
        )
        yield

    app = FastAPI(
        title="Hotel Aurora",
        lifespan=lifespan,
    )
    app.state.aurora = state

    @app.exception_handler(LoginRequired)
    async def redirect_to_login(request: Request, exc: LoginRequired) -> RedirectResponse:
        return RedirectResponse("/", status_code=status.HTTP_302_FOUND)

    app.add_middleware(RequestPipeline, stages=default_stages(state))

    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(rooms.router)
    app.include_router(reservations.router)
    app.include_router(simulation.router)
    return app


app = create_app()
