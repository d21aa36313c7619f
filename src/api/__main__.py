"""
Production server: FastAPI app under uvicorn.
Run: python -m api (from repo root, with .env or env vars set).
"""
import logging
import os

import uvicorn

from api.main import app

logger = logging.getLogger(__name__)


def main() -> None:
    host = os.environ.get("HOST", "127.0.0.1").strip()
    port = int(os.environ.get("PORT", "5174").strip())
    logger.info("Server listening on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
