"""Serve the application with uvicorn: ``python -m shortener``."""

import uvicorn

from shortener.core.setting import settings


def main() -> None:
    uvicorn.run(
        "shortener.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
