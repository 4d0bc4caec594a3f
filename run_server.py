"""
Production server launcher from the repository root.

Loads environment variables and serves the EZPMS application via Waitress.
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv
import sys
sys.dont_write_bytecode = True


BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

load_dotenv()

from waitress import serve  # noqa: E402
from config.wsgi import application  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("=" * 70)
    logger.info("Starting EZPMS API with Waitress (Production Server)")
    logger.info("=" * 70)
    port_env = (
        os.getenv("PORT")
        or os.getenv("APP_PORT")
        or os.getenv("DEFAULT_PORT")
        or "8080"
    )
    try:
        port = int(port_env)
    except ValueError:
        logger.warning(
            "Invalid port value '%s' from environment. Falling back to 8080.", port_env
        )
        port = 8080
    threads = int(os.getenv("WAITRESS_THREADS", "4"))
    logger.info("Server: http://0.0.0.0:%s", port)
    logger.info("API Docs: http://0.0.0.0:%s/api/docs", port)
    logger.info("Worker Threads: %s", threads)
    logger.info("=" * 70)
    logger.info("Press Ctrl+C to stop the server")

    try:
        serve(
            application,
            host="0.0.0.0",
            port=port,
            threads=threads,
            _quiet=False,
            _start=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as exc:  # pragma: no cover - logging unexpected errors
        logger.error("Server error: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
