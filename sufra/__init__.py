"""Sufra package initializer.

This package contains the recipe sharing platform: API routes, configuration, database
models, domain services, middleware and utilities.
"""

import logging

from sufra.core.logging import configure_logging
from sufra.middleware.logging_middleware import InterceptHandler

# Configure logging for the entire app
configure_logging()

# Intercept all standard logging (including Uvicorn and SQLAlchemy) and route to Loguru
logging.basicConfig(handlers=[InterceptHandler()], level=0)
for name in logging.root.manager.loggerDict:
    logging.getLogger(name).handlers = [InterceptHandler()]
