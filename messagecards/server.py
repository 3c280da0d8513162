"""Aggregate app for the message card API."""
from __future__ import annotations

import logging

from fastapi import FastAPI

from messagecards.cards.routes import router as cards_router
from messagecards.common.error_envelope import register_error_handlers
from messagecards.common.health import router as health_router
from messagecards.config import runtime_config
from messagecards.templates.routes import router as templates_router


def create_app() -> FastAPI:
    logging.basicConfig(
        level=runtime_config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = FastAPI(title="Message Cards")
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(cards_router)
    app.include_router(templates_router)
    return app


app = create_app()
