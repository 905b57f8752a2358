"""
ASGI Entry Point for the blogstore API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` before the application factory runs,
so file paths and the port can be configured there.

Usage
-----
Run via the console script or module entry point:
    $ blogstore-server
    $ python -m blogstore.api.server

Or via uvicorn directly:
    $ uvicorn blogstore.api.server:app --port 7894
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env BEFORE the settings singleton is built.
load_dotenv(dotenv_path=Path(".env"))

from blogstore.api.app import create_app  # noqa: E402
from blogstore.core.settings import load_settings  # noqa: E402

# Factory invocation
app = create_app()


def main() -> None:
    """Serve the API on the configured host and port."""
    cfg = load_settings()
    uvicorn.run(
        "blogstore.api.server:app",
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
