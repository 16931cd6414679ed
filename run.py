#!/usr/bin/env python
"""Start the ShipDesk admin API with uvicorn.

Host, port and log level come from the environment (HOST, PORT, LOG_LEVEL);
auto-reload is only enabled when APP_ENV is development.
"""

import uvicorn

from shipdesk.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "shipdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.app_env == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
