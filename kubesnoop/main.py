import structlog
from fastapi import FastAPI

from kubesnoop import __version__
from kubesnoop.api.errors import register_error_handlers
from kubesnoop.api.evaluate import router as evaluate_api_router
from kubesnoop.api.rules import router as rules_api_router
from kubesnoop.core.config import config
from kubesnoop.core.utils.logging import configure_logging

# --- Application Setup ---

configure_logging(config.logging)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="kubesnoop",
    description="Kubernetes security configuration analysis.",
    version=__version__,
    debug=config.debug,
)

register_error_handlers(app)

# --- Include Routers ---

app.include_router(rules_api_router, prefix="/api/v1", tags=["Rules API"])
app.include_router(evaluate_api_router, prefix="/api/v1", tags=["Evaluation API"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "kubesnoop is running.", "environment": config.environment}


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """Refuse to start on an invalid configuration."""
    config.validate()
    logger.info(
        "application_started",
        environment=config.environment,
        rules_backend=config.rule_store.backend,
        version=__version__,
    )
