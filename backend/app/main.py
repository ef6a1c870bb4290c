import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.errors import InvalidInput, TicketingError
from app.core.logging_config import configure_logging
from app.db.init_db import create_tables
from app.db.session import Store
from app.services.qr import QREncoder

logger = logging.getLogger(__name__)

def _run_migrations_if_needed(cfg: Settings):
    """Apply Alembic migrations automatically in production if enabled.

    Controlled by env var AUTO_APPLY_MIGRATIONS (default: '1'). Safe to run repeatedly.
    """
    if cfg.env.lower() != "prod":
        return
    if os.getenv("AUTO_APPLY_MIGRATIONS", "1") != "1":
        return
    from alembic import command
    from alembic.config import Config
    alembic_ini = Path(__file__).resolve().parents[1] / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("[migrate] alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return
    alembic_cfg = Config(str(alembic_ini))
    # Ensure script_location resolves correctly when launched from arbitrary CWD
    alembic_cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    logger.info("[migrate] Applying Alembic migrations -> head ...")
    command.upgrade(alembic_cfg, "head")
    logger.info("[migrate] Migrations applied successfully")

def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"

async def ticketing_error_handler(request: Request, exc: TicketingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

async def validation_error_handler(request: Request, exc: RequestValidationError):
    err = InvalidInput(_validation_message(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())

def create_app(
    cfg: Settings = default_settings,
    store: Optional[Store] = None,
    qr_encoder: Optional[QREncoder] = None,
) -> FastAPI:
    store = store or Store.from_settings(cfg)
    qr_encoder = qr_encoder or QREncoder(box_size=cfg.qr_box_size, border=cfg.qr_border)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _run_migrations_if_needed(cfg)
        store.open()
        if cfg.create_tables_on_startup:
            create_tables(store)
        app.state.store = store
        app.state.qr_encoder = qr_encoder
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title=cfg.app_name, version="0.1.0", lifespan=lifespan)

    origins = cfg.cors_origins
    logger.info("[startup] Resolved CORS origins: %s", origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TicketingError, ticketing_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(api_router)
    return app

configure_logging(default_settings.log_level)
app = create_app()
