import logging

from moviemax.core.logging_config import configure_logging
from moviemax.main import app

# Configure logging at import time so errors reach the Vercel logs
configure_logging()
logger = logging.getLogger(__name__)

logger.info("Vercel api/index.py initialized")

# This is the entry point for Vercel Serverless Functions
# It exports the FastAPI app instance
__all__ = ["app"]
