"""Run the appointments API with uvicorn.

Usage:
    python -m backend.serve
"""
import uvicorn

from backend.core import config


def main() -> None:
    uvicorn.run(
        'backend.main:app',
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.API_RELOAD,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
