import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pymongo import MongoClient

from flightlog.core.config import Settings, get_settings
from flightlog.core.errors import StoreError
from flightlog.core.logging import configure_logging
from flightlog.core.middleware import MethodOverrideMiddleware
from flightlog.core.session import SessionManager, get_current_user
from flightlog.core.store import store_errors
from flightlog.models.database import SESSIONS, connect, ensure_indexes
from flightlog.routers import api, auth, flights
from flightlog.templating import BASE_DIR, templates

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, client: MongoClient | None = None) -> FastAPI:
    """
    Build the application.

    The Mongo client is created at startup and closed at shutdown unless one is
    passed in, in which case the caller owns it.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        mongo = client if client is not None else connect(settings.mongodb_uri)
        db = mongo[settings.mongodb_db]
        try:
            with store_errors("create indexes"):
                ensure_indexes(db)
        except StoreError:
            logger.warning("Starting without verified indexes on %s", settings.mongodb_db)

        app.state.db = db
        app.state.sessions = SessionManager(db[SESSIONS], settings.session_max_age)
        logger.info("Flight log started (database %s)", settings.mongodb_db)
        yield
        if client is None:
            mongo.close()
        logger.info("Flight log stopped")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(MethodOverrideMiddleware)

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    # include our routers
    app.include_router(auth.router)
    app.include_router(api.router)
    app.include_router(flights.router)

    # anything else: generic "not found" page (registered last)
    @app.get("/{path:path}", response_class=HTMLResponse)
    def not_found(request: Request, path: str):
        return templates.TemplateResponse(
            request,
            "info.html",
            {"message": "Page not found", "user": get_current_user(request)},
            status_code=404,
        )

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("flightlog.main:app", host=settings.host, port=settings.port)
