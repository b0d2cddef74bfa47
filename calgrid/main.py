import logging

from fastapi import FastAPI
import uvicorn

from calgrid.api.calendar import router as calendar_router
from calgrid.config import settings
from calgrid.core.env import load_env
from calgrid.db.session import build_engine, build_sessionmaker
from calgrid.logging import configure_logging
from calgrid.services.store.base import EventRepository
from calgrid.services.store.memory_store import InMemoryEventRepository
from calgrid.services.store.seed import load_seed_events
from calgrid.services.store.sql_store import SqlEventRepository

logger = logging.getLogger(__name__)


def build_repository() -> EventRepository:
    seed_events = load_seed_events(settings.SEED_PATH)
    backend = settings.CALGRID_STORE.strip().lower()
    if backend == "sql":
        repository = SqlEventRepository(build_sessionmaker(build_engine()))
        repository.seed(seed_events)
        return repository
    if backend != "memory":
        raise ValueError(f"Unknown CALGRID_STORE backend: {settings.CALGRID_STORE}")
    return InMemoryEventRepository(seed_events)


def create_app(repository: EventRepository | None = None) -> FastAPI:
    app = FastAPI(title="calgrid")
    app.state.repository = repository if repository is not None else build_repository()
    app.include_router(calendar_router)

    @app.get("/ping")
    def ping() -> dict[str, str]:
        return {"message": "pong"}

    return app


if __name__ == "__main__":
    load_env()
    configure_logging()
    logger.info("Starting calgrid env=%s store=%s", settings.ENV, settings.CALGRID_STORE)
    uvicorn.run("calgrid.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)
