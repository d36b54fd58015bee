from __future__ import annotations

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Hourly Heatmap",
        description="Turns hourly sensor statistics into a color-mapped day-by-hour grid.",
        version="0.1.0",
    )
    app.include_router(router)
    return app

app = create_app()
