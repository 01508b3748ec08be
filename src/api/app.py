"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.api.routes import router
from src.calculators.documents import DocumentAggregator
from src.calculators.errors import ValidationError
from src.calculators.payroll import PayrollEngine
from src.calculators.tax_data import TaxTable, load_tax_table

logger = logging.getLogger(__name__)


def configure_state(app: FastAPI, table: TaxTable) -> None:
    """Attach the calculators for a validated tax table to the app."""
    app.state.tax_table = table
    app.state.payroll_engine = PayrollEngine.from_table(table)
    app.state.document_aggregator = DocumentAggregator()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: load and validate the tax table. A bad table aborts startup."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up...")

    configure_state(app, load_tax_table())

    yield

    logger.info("Shutting down...")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return engine validation failures as 422 with the offending field."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": exc.message, "field": exc.field}, status_code=422)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Monetary Derivation Engine", lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(router)
    return app
