#!/usr/bin/env python3
"""Start the auth gateway with Logfire error tracking for startup errors."""

import sys
import logfire
import uvicorn

from splitbill.config import Settings
from splitbill.util.logging import setup_logging
from splitbill.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info("Starting auth gateway", port=settings.port)

        uvicorn.run(
            "splitbill.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="info",
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
