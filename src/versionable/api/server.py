"""
ASGI Entry Point for the Versionable API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` first so that `VERSIONABLE_DB_PATH`
and friends are visible before the application factory runs.

Usage
-----
Run via the module entry point:
    $ python -m versionable.api.server

Or via uvicorn directly:
    $ uvicorn versionable.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from versionable.api.app import create_app

# Load environment variables from .env BEFORE building the app, so the
# settings loader sees them on its first read.
env_path = Path(".env")
load_dotenv(dotenv_path=env_path)

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    uvicorn.run(
        "versionable.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
