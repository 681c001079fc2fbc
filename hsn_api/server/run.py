"""Run the HSN API server with uvicorn."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run(
        "hsn_api.server.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
