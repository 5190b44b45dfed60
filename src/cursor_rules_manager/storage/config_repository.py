# src/cursor_rules_manager/storage/config_repository.py
import logging
from typing import List

from ..config import (
    ensure_config_initialized,
    get_global_rules_path,
    load_config,
    save_config,
)

logger = logging.getLogger(__name__)


def read_global_rules() -> str:
    ensure_config_initialized()
    return get_global_rules_path().read_text(encoding="utf-8")


def write_global_rules(content: str) -> None:
    ensure_config_initialized()
    get_global_rules_path().write_text(content, encoding="utf-8")
    logger.info("Updated global rules (%d chars)", len(content))


def get_scan_paths() -> List[str]:
    return list(load_config().get("scanPaths") or [])


def set_scan_paths(scan_paths: List[str]) -> None:
    """scanPaths만 교체하고 projects.json의 나머지 키는 보존한다."""
    config = load_config()
    config["scanPaths"] = list(scan_paths)
    save_config(config)
    logger.info("Updated scan paths: %s", scan_paths)
