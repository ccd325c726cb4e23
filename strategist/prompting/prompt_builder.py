"""Prompt assembly for strategic literature analysis.

This module is intentionally narrow: it only merges the fixed analysis template
with the two user inputs. Input validation and model invocation happen outside
this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - No hidden side effects (no I/O, no global state mutation).

Substitution model:
    - The template carries one `{{FIELD}}` and one `{{LITERATURE_DATA}}` marker.
    - Substitution is a single left-to-right pass over the template; only the first
      occurrence of each marker is replaced.
    - Marker text inside a substituted value is never re-processed.

Prompt safety model:
    - User text is interpolated as a raw string, without escaping or length limits.
    - Upstream layers own any trust-boundary decisions.
"""

import re


FIELD_MARKER = "{{FIELD}}"
LITERATURE_MARKER = "{{LITERATURE_DATA}}"

_MARKER_PATTERN = re.compile(
    "|".join(re.escape(marker) for marker in (FIELD_MARKER, LITERATURE_MARKER))
)


# =========================================================
# STRATEGIC ANALYSIS TEMPLATE
# =========================================================
# Sent as a single user turn. The model answers in markdown; the section
# headings below are what adapters render as the report outline.

STRATEGIC_ANALYSIS_PROMPT_TEMPLATE = """你是一位资深的学术战略顾问，长期为顶尖课题组制定研究规划。
请基于下面提供的研究领域与文献元数据（年份、期刊、论文标题），撰写一份面向课题组负责人的战略分析报告。

## 研究大领域
{{FIELD}}

## 文献列表数据
{{LITERATURE_DATA}}

## 分析要求
请严格依据上述文献数据进行推断，不要编造未出现的论文或期刊。如果数据不足以支撑某个结论，请明确说明。

请使用 Markdown 输出，并包含以下章节：

### 1. 领域全景概览
用 3-5 句话概括该领域当前的研究格局、核心问题与主流技术路线。

### 2. 时间演化与研究热点
按年份梳理研究主题的变迁，指出正在升温、趋于饱和以及逐渐降温的方向，并给出判断依据。

### 3. 期刊分布与发表策略
分析高水平期刊偏好的选题类型，总结不同层级期刊的录用特点，给出投稿策略建议。

### 4. 研究空白与机会
列出 3-5 个尚未被充分研究的问题或交叉方向，说明其学术价值与可行性。

### 5. 选题建议
给出 3 个具体的候选课题，每个课题包含：题目、核心科学问题、创新点、预期目标期刊、主要风险。

### 6. 行动路线图
为未来 12-24 个月制定分阶段的行动计划，包括关键里程碑与资源投入建议。

请保持专业、客观、具有前瞻性的语气，结论要具体、可执行。
"""


def build_prompt(template: str, field: str, literature_data: str) -> str:
    """Substitute the field and literature markers in `template`.

    Args:
        template: Template containing `FIELD_MARKER` and `LITERATURE_MARKER`.
        field: Research field name, inserted verbatim.
        literature_data: Literature metadata, inserted verbatim.

    Returns:
        The template with the first occurrence of each marker replaced.

    Edge cases:
        - A marker absent from the template is simply not substituted.
        - Later occurrences of a marker in the template are left untouched.
        - Marker text contained in `field` or `literature_data` survives as-is.
    """
    values = {FIELD_MARKER: field, LITERATURE_MARKER: literature_data}
    pending = set(values)

    def _substitute(match):
        marker = match.group(0)
        if marker in pending:
            pending.discard(marker)
            return values[marker]
        return marker

    return _MARKER_PATTERN.sub(_substitute, template)


def build_analysis_prompt(field: str, literature_data: str) -> str:
    """Build the strategic analysis prompt for one submission."""
    return build_prompt(STRATEGIC_ANALYSIS_PROMPT_TEMPLATE, field, literature_data)
