"""FastAPI application entrypoint for TaskMaster."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api.v1.router import api_router
from .core.config import get_settings
from .core.database import SessionLocal, init_db
from .jobs import register_scheduler
from .services.seed_service import seed_demo_data

logger = logging.getLogger(__name__)


async def store_failure_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report store errors as a generic failure; nothing is retried."""

    logger.exception("store operation failed on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"detail": "Store operation failed"})


def register_startup(app: FastAPI) -> None:
    settings = get_settings()

    @app.on_event("startup")
    def prepare_store() -> None:
        init_db()
        if settings.seed_demo_data:
            session = SessionLocal()
            try:
                seed_demo_data(session)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                logger.exception("seeding demo data failed")
            finally:
                session.close()


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    logging.basicConfig(level=get_settings().log_level.upper())
    app = FastAPI(title="TaskMaster API", version="0.1.0")
    app.include_router(api_router, prefix="/api/v1")
    app.add_exception_handler(SQLAlchemyError, store_failure_handler)
    register_startup(app)
    register_scheduler(app)
    return app


app = create_app()
