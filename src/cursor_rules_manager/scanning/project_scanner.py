# src/cursor_rules_manager/scanning/project_scanner.py
import logging
from pathlib import Path
from typing import Iterable, List

from ..models.rule_types import ProjectInfo
from .project_paths import encode_project_path

logger = logging.getLogger(__name__)

PROJECT_MARKERS = (".cursor", ".git")


def _is_project(directory: Path) -> bool:
    return any((directory / marker).exists() for marker in PROJECT_MARKERS)


def scan_for_projects(scan_paths: Iterable[str]) -> List[ProjectInfo]:
    """
    scan path 바로 아래 디렉토리 중 .cursor 또는 .git이 있는 것을 프로젝트로 본다.
    존재하지 않는 scan path는 건너뛰고, 읽기 실패는 로그만 남긴다.
    """
    paths = list(scan_paths)
    projects: List[ProjectInfo] = []

    for scan_path in paths:
        root = Path(scan_path).expanduser()
        if not root.exists():
            continue

        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.error("Error scanning %s: %s", root, exc)
            continue

        for entry in entries:
            try:
                if not entry.is_dir() or not _is_project(entry):
                    continue
                has_rules = (entry / ".cursor" / "rules").exists()
            except OSError as exc:
                logger.warning("Skipping %s: %s", entry, exc)
                continue

            projects.append(
                ProjectInfo(
                    name=entry.name,
                    path=str(entry),
                    has_cursor_rules=has_rules,
                    encoded_path=encode_project_path(entry),
                )
            )

    logger.info("Found %d projects in %d scan paths", len(projects), len(paths))
    return projects
