"""Application Entry Point.

Configures logging, loads configuration and serves the API with uvicorn.
It's a thin wrapper around create_app.
"""

import logging
import os

import uvicorn

from quakeview.api import create_app
from quakeview.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif any(key.startswith("QUAKEVIEW_") for key in os.environ):
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


app = create_app(_get_config())


def run() -> None:
    """Serve the API (console script entry point)."""
    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "8000"))

    logger.info("Serving Quakeview on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    run()
