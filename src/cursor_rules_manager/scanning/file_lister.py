# src/cursor_rules_manager/scanning/file_lister.py
import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

IGNORED_DIRS = frozenset({"node_modules", ".git", ".next", "dist", "build", ".cursor"})
MAX_DEPTH = 5
MAX_FILES = 200


def list_project_files(
    project_path: Path,
    max_depth: int = MAX_DEPTH,
    limit: int = MAX_FILES,
) -> List[str]:
    """
    파일 선택기용 프로젝트 파일 목록 (상대 POSIX 경로, 정렬, 최대 limit개).

    - 프로젝트 루트 바로 아래의 IGNORED_DIRS는 통째로 제외
    - 점으로 시작하는 파일/디렉토리는 어느 깊이든 제외
    - 경로 세그먼트가 max_depth개를 넘는 파일은 제외
    - 프로젝트가 없거나 읽을 수 없으면 빈 리스트
    """
    root = Path(project_path)
    if not root.is_dir():
        return []

    files: List[str] = []

    def _on_error(exc: OSError) -> None:
        logger.warning("Cannot read %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel_dir = Path(dirpath).relative_to(root)
        depth = len(rel_dir.parts)

        # glob 기본값(dot: false)과 동일: 점으로 시작하는 이름은 모든 깊이에서 제외
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        if depth == 0:
            dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS]
        # 이 아래 디렉토리의 파일은 모두 max_depth를 넘는다
        if depth + 1 >= max_depth:
            dirnames[:] = []

        for filename in filenames:
            if filename.startswith("."):
                continue
            rel = rel_dir / filename
            if len(rel.parts) > max_depth:
                continue
            if not (Path(dirpath) / filename).is_file():
                continue
            files.append(rel.as_posix())

    files.sort()
    return files[:limit]
