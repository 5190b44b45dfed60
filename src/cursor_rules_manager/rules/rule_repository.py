"""
프로젝트별 규칙 파일 저장소.

저장 위치: <project>/.cursor/rules/<filename>
대상 확장자: .mdc, .md
"""
# src/cursor_rules_manager/rules/rule_repository.py
import logging
from pathlib import Path
from typing import List

from ..errors import InvalidRuleFilename, RuleNotFound
from ..models.rule_types import RuleFile
from .front_matter import parse_front_matter

logger = logging.getLogger(__name__)

RULE_EXTENSIONS = (".mdc", ".md")


def rules_dir(project_path: Path) -> Path:
    return project_path / ".cursor" / "rules"


def validate_filename(filename: str) -> str:
    """경로 구분자나 상위 디렉토리 참조 없는 순수 파일명만 허용."""
    name = (filename or "").strip()
    if (
        not name
        or name in (".", "..")
        or "/" in name
        or "\\" in name
        or "\x00" in name
    ):
        raise InvalidRuleFilename(
            f"'{filename}' is not a plain file name",
            target="filename",
        )
    return name


def _read_rule(path: Path) -> RuleFile:
    raw = path.read_text(encoding="utf-8", errors="replace")
    frontmatter, body = parse_front_matter(raw)
    return RuleFile(filename=path.name, frontmatter=frontmatter, content=body, raw=raw)


def list_rules(project_path: Path) -> List[RuleFile]:
    directory = rules_dir(project_path)
    if not directory.is_dir():
        return []

    rules: List[RuleFile] = []
    for path in sorted(directory.iterdir(), key=lambda p: p.name):
        if not path.is_file() or not path.name.endswith(RULE_EXTENSIONS):
            continue
        rules.append(_read_rule(path))
    return rules


def get_rule(project_path: Path, filename: str) -> RuleFile:
    path = rules_dir(project_path) / validate_filename(filename)
    if not path.is_file():
        raise RuleNotFound(
            f"No rule '{path.name}' in {rules_dir(project_path)}",
            target="filename",
        )
    return _read_rule(path)


def save_rule(project_path: Path, filename: str, content: str) -> Path:
    """.cursor/rules 디렉토리가 없으면 만들고 파일을 덮어쓴다."""
    name = validate_filename(filename)
    directory = rules_dir(project_path)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content, encoding="utf-8")
    logger.info("Saved rule %s", path)
    return path


def delete_rule(project_path: Path, filename: str) -> bool:
    """파일이 없어도 성공으로 본다. 실제로 지웠으면 True."""
    path = rules_dir(project_path) / validate_filename(filename)
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Deleted rule %s", path)
    return True
