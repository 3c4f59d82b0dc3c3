"""Main application entry point."""

from __future__ import annotations

from app.api.app import create_api_app
from app.core.logging import setup_logging

setup_logging()

app = create_api_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
