"""설정 디렉토리 및 환경 변수 접근 모듈.

모든 경로는 호출 시점에 환경 변수를 읽어 계산한다 (테스트에서 CRM_HOME 교체 가능).
"""
# src/cursor_rules_manager/config.py
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3847
DEFAULT_HOST = "127.0.0.1"

DEFAULT_GLOBAL_RULES = """# Global Cursor Rules

## Files to Always Read
<!-- List files that should ALWAYS be read before any task -->

## Core Instructions
<!-- Your global instructions here -->
"""


def get_config_dir() -> Path:
    """설정 디렉토리 (기본값: ~/.cursor-rules-manager)."""
    override = os.getenv("CRM_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cursor-rules-manager"


def get_global_rules_path() -> Path:
    return get_config_dir() / "global-rules.md"


def get_projects_config_path() -> Path:
    return get_config_dir() / "projects.json"


def get_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def get_postmortem_dir() -> Path:
    return get_config_dir() / "postmortems"


def get_public_dir() -> Path:
    return Path(os.getenv("CRM_PUBLIC_DIR", "public"))


def get_port() -> int:
    return int(os.getenv("PORT", str(DEFAULT_PORT)))


def get_host() -> str:
    return os.getenv("HOST", DEFAULT_HOST)


def default_scan_paths() -> list[str]:
    home = Path.home()
    return [str(home / "code"), str(home / "projects"), str(home / "dev")]


def ensure_config_initialized() -> None:
    """설정 디렉토리와 기본 파일이 없으면 생성한다."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    global_rules = get_global_rules_path()
    if not global_rules.exists():
        global_rules.write_text(DEFAULT_GLOBAL_RULES, encoding="utf-8")
        logger.info("Initialized global rules at %s", global_rules)

    projects_config = get_projects_config_path()
    if not projects_config.exists():
        save_config({"projects": [], "scanPaths": default_scan_paths()})
        logger.info("Initialized projects config at %s", projects_config)


def load_config() -> Dict[str, Any]:
    """projects.json 읽기."""
    ensure_config_initialized()
    return json.loads(get_projects_config_path().read_text(encoding="utf-8"))


def save_config(config: Dict[str, Any]) -> None:
    """projects.json 저장 (전체 덮어쓰기)."""
    path = get_projects_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(config, ensure_ascii=False, indent=2), encoding="utf-8"
    )
