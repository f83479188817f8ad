from arena_core.domain.prompts.enhancement import (
    enhance_prompt_manually,
    improvement_tags,
    prompt_battle_summary,
    response_battle_summary,
)
from arena_core.domain.prompts.parsing import (
    ImprovementProposal,
    ParsedReview,
    parse_improvement,
    parse_review,
)
from arena_core.domain.prompts.templates import (
    IMPROVEMENT_PROMPT_TEMPLATE,
    REVIEW_PROMPT_TEMPLATE,
    build_improvement_prompt,
    build_review_prompt,
)

__all__ = [
    "IMPROVEMENT_PROMPT_TEMPLATE",
    "REVIEW_PROMPT_TEMPLATE",
    "ImprovementProposal",
    "ParsedReview",
    "build_improvement_prompt",
    "build_review_prompt",
    "enhance_prompt_manually",
    "improvement_tags",
    "parse_improvement",
    "parse_review",
    "prompt_battle_summary",
    "response_battle_summary",
]
