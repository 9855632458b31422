#!/usr/bin/env python3
"""Run the Roam API under uvicorn, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from roam.config import Settings
from roam.util.logging import setup_logging
from roam.util.observability import configure_logfire


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    logfire.info(
        "Starting Roam auth service",
        environment=settings.environment,
        network_domain=settings.network.domain,
    )
    try:
        # Client addresses come from the proxy; remote-login tokens are bound to them
        uvicorn.run(
            "roam.interface.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=8000,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,
            forwarded_allow_ips="*",
        )
    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
