"""규칙 파일(.md / .mdc)의 front-matter 파싱."""
# src/cursor_rules_manager/rules/front_matter.py
import logging
import re
from typing import Any, Dict, Tuple

import yaml

logger = logging.getLogger(__name__)

# 파일 맨 앞의 --- ... --- 블록. 닫는 구분자 뒤의 개행 하나까지 소비한다.
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.S | re.M)


def _parse_lines(block: str) -> Dict[str, Any]:
    """
    YAML로 읽히지 않는 블록용 fallback.
    `key: value` 줄만 읽고 따옴표는 벗긴다 (예: `globs: *.ts` 처럼 alias로 오인되는 값).
    """
    data: Dict[str, Any] = {}
    for line in block.splitlines():
        if ":" not in line or line.lstrip().startswith("#"):
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if not key:
            continue
        value = value.strip().strip('"').strip("'")
        if value.lower() in ("true", "false"):
            data[key] = value.lower() == "true"
        else:
            data[key] = value
    return data


def parse_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Returns:
        (front-matter dict, 본문). front-matter가 없으면 ({}, 원문 그대로).
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    block = match.group(1)
    body = text[match.end():]

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        logger.warning("Front-matter is not valid YAML, using line parser: %s", exc)
        return _parse_lines(block), body

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        logger.warning("Front-matter is not a mapping (got %s)", type(data).__name__)
        return {}, body
    # YAML 1.1은 `2024:` `on:` 같은 키를 int/bool로 읽는다. 키는 항상 문자열로 맞춘다
    return {str(key): value for key, value in data.items()}, body
