"""Application entry point."""

import uvicorn

from unified_weather.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "unified_weather.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
