"""
sheet_ds.api - Run as module

Usage: python -m sheet_ds.api
"""

import logging
import os

import uvicorn

logger = logging.getLogger("sheet_ds.api")


def main():
    """Run the API gateway server."""
    host = os.environ.get("SHEET_HOST", "0.0.0.0")
    port = int(os.environ.get("SHEET_PORT", "5050"))
    reload = os.environ.get("SHEET_RELOAD", "false").lower() == "true"
    log_level = os.environ.get("SHEET_LOG_LEVEL", "info")

    logging.basicConfig(level=log_level.upper())
    logger.info("Starting spreadsheet feed gateway on %s:%s", host, port)

    uvicorn.run(
        "sheet_ds.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
