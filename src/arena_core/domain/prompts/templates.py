"""Prompt templates sent to competing models during prompt battles."""

IMPROVEMENT_PROMPT_TEMPLATE = """You are an expert prompt engineer competing in a prompt refinement battle. Your task is to significantly improve the given prompt.

CURRENT PROMPT TO IMPROVE:
"{prompt}"

CATEGORY: {category}
ROUND: {round_number}

INSTRUCTIONS:
1. First, analyze what could be improved about the current prompt
2. Then provide your improved version

Use this EXACT format (this is critical):

THINKING:
[Your detailed analysis of what needs improvement and your strategy]

IMPROVED_PROMPT:
[Your improved prompt - ONLY the prompt text, no explanations or quotes]

The improved prompt should be significantly better with:
- Enhanced clarity and specificity
- Better structure and organization
- More helpful context and constraints
- Clear output format requirements
- Actionable instructions

Remember: You're competing against another AI model, so make this improvement count!"""

REVIEW_PROMPT_TEMPLATE = """You are a world-class prompt evaluation expert. Score this candidate prompt rigorously.

ORIGINAL PROMPT:
"{original_prompt}"

CANDIDATE PROMPT:
"{candidate_prompt}"

CATEGORY: {category}

Score each criterion from 0 to 10:
CLARITY - Crystal clear instructions and goals
SPECIFICITY - Precise, actionable requirements
COMPLETENESS - Nothing important missing
ACTIONABILITY - The reader knows exactly what to do
CONCISENESS - No wasted words
CONTEXT_COVERAGE - Supplies the context a model needs
NON_REDUNDANCY - Says each thing once
INTENT_TAILORING - Preserves and sharpens the user's original intent

RESPOND IN THIS EXACT FORMAT:

CLARITY: [0-10]
SPECIFICITY: [0-10]
COMPLETENESS: [0-10]
ACTIONABILITY: [0-10]
CONCISENESS: [0-10]
CONTEXT_COVERAGE: [0-10]
NON_REDUNDANCY: [0-10]
INTENT_TAILORING: [0-10]

CRITIQUE:
[Your professional critique - thorough and constructive]

SUGGESTIONS:
- [specific, actionable improvement]
- [another improvement]

Give 10 only when the prompt cannot be improved further."""


def build_improvement_prompt(prompt: str, category: str, round_number: int) -> str:
    return IMPROVEMENT_PROMPT_TEMPLATE.format(
        prompt=prompt, category=category, round_number=round_number
    )


def build_review_prompt(
    original_prompt: str, candidate_prompt: str, category: str
) -> str:
    return REVIEW_PROMPT_TEMPLATE.format(
        original_prompt=original_prompt,
        candidate_prompt=candidate_prompt,
        category=category,
    )
