# src/cursor_rules_manager/rules/rule_builder.py
import json
from typing import List

from ..models.rule_types import GenerateRuleRequest, GeneratedRule

MUST_READ_PREAMBLE = "Before doing ANYTHING, you MUST read and understand these files:"
MUST_READ_CLOSING = "**DO NOT proceed without reading these files first.**"

SANITY_CHECK_SECTION = """# Sanity Check

Before making ANY change, reply with a short sanity check:

1. Restate the task in one sentence.
2. List the files you have actually read.
3. List every assumption you are making and confirm it against the code.

If any assumption cannot be confirmed, STOP and ask instead of guessing.
"""


def _front_matter(req: GenerateRuleRequest) -> List[str]:
    lines = ["---"]
    if req.description:
        lines.append(f'description: "{req.description}"')
    if req.globs:
        lines.append(f"globs: {json.dumps(req.globs, ensure_ascii=False, separators=(',', ':'))}")
    if req.always_apply:
        lines.append("alwaysApply: true")
    lines.append("---")
    return lines


def build_rule_content(req: GenerateRuleRequest) -> str:
    """
    MDC 규칙 파일 본문 생성.

    구성 순서: front-matter → 필독 파일 → Instructions → (선택) Sanity Check
    """
    content = "\n".join(_front_matter(req)) + "\n\n"

    if req.must_read_files:
        content += "# Files You MUST Read\n\n"
        content += f"{MUST_READ_PREAMBLE}\n\n"
        for path in req.must_read_files:
            content += f"- `{path}`\n"
        content += f"\n{MUST_READ_CLOSING}\n\n"

    if req.instructions:
        content += f"# Instructions\n\n{req.instructions}\n"

    if req.sanity_check:
        if req.instructions:
            content += "\n"
        content += SANITY_CHECK_SECTION

    return content


def rule_filename(name: str | None) -> str:
    return f"{name or 'rule'}.mdc"


def generate_rule(req: GenerateRuleRequest) -> GeneratedRule:
    return GeneratedRule(content=build_rule_content(req), filename=rule_filename(req.name))
