"""Application Entry Point.

This module configures logging, loads configuration and builds the
FastAPI app. It's a thin wrapper around quakemap.api.create_app.
"""

import logging
import os

from quakemap.api import create_app
from quakemap.core.config import Config, validate_config
from quakemap.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        config = load_config(config_path)
    elif os.environ.get("FEED_BASE_URL") or os.environ.get("DEFAULT_WINDOW"):
        # Simple env-based config
        config = load_config_from_env()
    else:
        # Try default config path
        config = load_config()

    result = validate_config(config)
    for warning in result.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    if not result.valid:
        messages = "; ".join(f"{e.field}: {e.message}" for e in result.critical_errors)
        raise ValueError(f"Invalid configuration: {messages}")

    return config


app = create_app(_get_config())


# For local testing
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
    )
