import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import opsdesk.models  # noqa: F401  register all models with Base.metadata
from opsdesk.api.routes.availability import router as availability_router
from opsdesk.api.routes.clock import router as clock_router
from opsdesk.api.routes.costs import router as costs_router
from opsdesk.api.routes.leave import router as leave_router
from opsdesk.api.routes.tasks import router as tasks_router
from opsdesk.api.routes.users import router as users_router
from opsdesk.config import get_settings
from opsdesk.database import Base, engine
from opsdesk.schemas.system import StatusResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Create tables on startup (dev convenience)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="OpsDesk",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(availability_router)
    app.include_router(clock_router)
    app.include_router(costs_router)
    app.include_router(leave_router)
    app.include_router(tasks_router)
    app.include_router(users_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
