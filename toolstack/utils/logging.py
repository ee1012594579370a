# =============================================
# File: toolstack/utils/logging.py
# Purpose: Loguru sink configuration
# =============================================

import os
from loguru import logger

_configured = False

def setup_logging() -> None:
    """Add a rotating file sink when LOG_FILE is set (once per process)."""
    global _configured
    if _configured:
        return
    path = os.getenv("LOG_FILE")
    if path:
        logger.add(path, rotation="10 MB", level=os.getenv("LOG_LEVEL", "INFO").upper())
    _configured = True
