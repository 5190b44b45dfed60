"""`python -m cursor_rules_manager` 로 로컬 서버 실행."""
# src/cursor_rules_manager/__main__.py
import logging

import uvicorn
from dotenv import load_dotenv

from .config import get_host, get_port
from .logging_setup import configure_logging

logger = logging.getLogger("cursor_rules_manager")


def main():
    load_dotenv()
    configure_logging()

    host, port = get_host(), get_port()
    logger.info("Cursor Rules Manager running at http://localhost:%d", port)
    uvicorn.run("cursor_rules_manager.api.main:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
