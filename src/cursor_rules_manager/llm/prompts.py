"""LLM 프롬프트 문자열 모음."""
# src/cursor_rules_manager/llm/prompts.py
import json
from typing import Optional, Sequence

from ..models.postmortem_types import Postmortem
from ..models.rule_types import RuleFile

# 프롬프트에 넣는 기존 규칙 파일 1개당 최대 길이
MAX_RULE_CHARS = 4000
MAX_POSTMORTEMS = 50

RULE_WRITER_ROLE = """You are the Rulefile-Writer for an AI coding assistant (Cursor).
Rules live in .cursor/rules/*.mdc files with YAML front-matter
(description, globs, alwaysApply) followed by a Markdown body.

GUIDELINES
- Propose a rule only if it would have prevented a concrete mistake.
- Keep each rule short: imperative bullets, no more than 5.
- Prefer narrow globs over alwaysApply; use alwaysApply only for rules
  relevant to every task in the project.
- If an existing rule already covers the idea, suggest clarifying it instead
  of adding a duplicate (reuse its name).
- Rule names are kebab-case without extension.
"""

FEW_SHOT_EXAMPLE = """
Example:
Notes: "cursor keeps adding axios calls in components even though we have src/api/client.ts, had to rewrite 3 files today, annoying"

Result:
{
  "title": "Direct axios calls instead of shared API client",
  "whatHappened": "The assistant added axios calls directly inside React components.",
  "expectedBehavior": "All HTTP calls go through src/api/client.ts.",
  "rootCause": "No rule points the assistant at the shared API client.",
  "severity": "medium",
  "tags": ["api", "architecture"],
  "suggestedRules": [
    {
      "name": "use-api-client",
      "description": "HTTP calls must go through the shared API client",
      "globs": ["src/components/**/*.tsx"],
      "alwaysApply": false,
      "instructions": "- Never import axios in components.\\n- Use the helpers exported by `src/api/client.ts`.",
      "rationale": "Prevents duplicated, unconfigured HTTP calls."
    }
  ]
}
"""

SANITY_CHECK_ROLE = """You are reviewing a rule file for an AI coding assistant (Cursor)
before it is saved. Check it as a skeptical senior engineer:

1. Is the front-matter valid (description, globs as a list, alwaysApply boolean)?
2. Are any instructions vague, untestable or contradictory?
3. Does it conflict with or duplicate the project's other rules?
4. Would it have prevented the recent mistakes listed below, if relevant?

Answer "ok" when nothing needs to change. Otherwise answer "needs_changes",
list the issues, give concrete suggestions and return the full corrected file
in revisedContent.
"""


def format_rules_context(rules: Sequence[RuleFile]) -> str:
    if not rules:
        return "(no existing rules)"
    parts = []
    for rule in rules:
        raw = rule.raw
        if len(raw) > MAX_RULE_CHARS:
            raw = raw[:MAX_RULE_CHARS] + "\n[...truncated]"
        parts.append(f"### {rule.filename}\n{raw}")
    return "\n\n".join(parts)


def format_postmortems(postmortems: Sequence[Postmortem]) -> str:
    if not postmortems:
        return "(no postmortems)"
    records = [
        {
            "id": pm.id,
            "title": pm.title,
            "whatHappened": pm.what_happened,
            "expectedBehavior": pm.expected_behavior,
            "severity": pm.severity.value,
            "tags": pm.tags,
            "notes": pm.notes,
        }
        for pm in postmortems[:MAX_POSTMORTEMS]
    ]
    return json.dumps(records, ensure_ascii=False, indent=2)


def build_notes_prompt(notes: str, rules: Sequence[RuleFile], project_name: Optional[str]) -> str:
    """비정형 메모 → 구조화된 postmortem + 규칙 제안."""
    return f"""{RULE_WRITER_ROLE}
Convert the developer's informal notes about a mistake made by the assistant
into a structured postmortem and suggest rules that would prevent it.
{FEW_SHOT_EXAMPLE}
Project: {project_name or "(unknown)"}

Existing rules:
{format_rules_context(rules)}

Notes:
{notes}

Record your step-by-step reasoning in the reasoning field.
"""


def build_postmortem_prompt(pm: Postmortem, rules: Sequence[RuleFile]) -> str:
    """저장된 postmortem 1건 분석."""
    record = format_postmortems([pm])
    return f"""{RULE_WRITER_ROLE}
Analyze this recorded postmortem. Keep the given facts, fill in the root cause
and suggest rules that would prevent it.
{FEW_SHOT_EXAMPLE}
Project: {pm.project_name or "(unknown)"}

Existing rules:
{format_rules_context(rules)}

Postmortem:
{record}

Record your step-by-step reasoning in the reasoning field.
"""


def build_pattern_prompt(postmortems: Sequence[Postmortem], rules: Sequence[RuleFile]) -> str:
    """여러 postmortem에서 반복 패턴 찾기."""
    return f"""{RULE_WRITER_ROLE}
Find recurring patterns across these postmortems. For each pattern give the
number of occurrences and the ids of the postmortems involved, then suggest
the smallest set of rules that covers the patterns.

Existing rules:
{format_rules_context(rules)}

Postmortems:
{format_postmortems(postmortems)}
"""


def build_sanity_check_prompt(
    content: str,
    other_rules: Sequence[RuleFile],
    postmortems: Sequence[Postmortem],
) -> str:
    return f"""{SANITY_CHECK_ROLE}
Other rules in the project:
{format_rules_context(other_rules)}

Recent mistakes:
{format_postmortems(postmortems)}

Rule file under review:
```
{content}
```
"""
