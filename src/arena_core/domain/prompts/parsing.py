"""Extraction of structured fields from free-form model output."""

import re
from dataclasses import dataclass, field

from arena_core.domain.prompts.enhancement import enhance_prompt_manually
from arena_core.shared.constants import MAX_SUB_SCORE, REVIEW_CRITERIA
from arena_core.shared.logging import get_contextual_logger
from arena_core.shared.statistics import clamp
from arena_core.shared.text import (
    clean_prompt_candidate,
    parse_list_items,
    strip_meta_commentary,
)

logger = get_contextual_logger("arena.parsing")

DEFAULT_THINKING = (
    "Analyzed prompt structure and identified areas for improvement including "
    "clarity, specificity, and actionable instructions."
)

MIN_PROMPT_LENGTH = 20

_THINKING_BLOCK = re.compile(
    r"THINKING:\s*([\s\S]*?)(?=\n\s*IMPROVED_PROMPT:|$)", re.IGNORECASE
)
_PROMPT_BLOCK = re.compile(r"IMPROVED_PROMPT:\s*([\s\S]*?)$", re.IGNORECASE)
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_CRITIQUE_BLOCK = re.compile(
    r"CRITIQUE:\**\s*([\s\S]*?)(?=\n\s*\**SUGGESTIONS:|$)", re.IGNORECASE
)
_SUGGESTIONS_BLOCK = re.compile(r"SUGGESTIONS:\**\s*([\s\S]*?)$", re.IGNORECASE)

_CRITERION_PATTERNS = {
    criterion: re.compile(
        criterion.upper().replace("_", r"[_\s-]?") + r"[*:\s]+(\d+(?:\.\d+)?)",
        re.IGNORECASE,
    )
    for criterion in REVIEW_CRITERIA
}


@dataclass(frozen=True)
class ImprovementProposal:
    thinking: str
    prompt: str
    # "delimiters", "lines", "paragraphs", "emergency" or "manual"
    strategy: str

    @property
    def manual(self) -> bool:
        return self.strategy == "manual"


@dataclass(frozen=True)
class ParsedReview:
    criteria: dict[str, float]
    missing: tuple[str, ...] = ()
    critique: str = ""
    suggestions: tuple[str, ...] = field(default_factory=tuple)


def _by_delimiters(text: str) -> tuple[str, str]:
    thinking_match = _THINKING_BLOCK.search(text)
    prompt_match = _PROMPT_BLOCK.search(text)
    if thinking_match and prompt_match:
        return thinking_match.group(1).strip(), prompt_match.group(1).strip()
    return "", ""


def _by_lines(text: str) -> tuple[str, str]:
    thinking_lines: list[str] = []
    prompt_lines: list[str] = []
    section = None
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        lowered = line.lower()
        if lowered.startswith("thinking:") or "analysis:" in lowered:
            section = "thinking"
            continue
        if lowered.startswith("improved_prompt:") or (
            "improved" in lowered and "prompt:" in lowered
        ):
            section = "prompt"
            continue
        if not line:
            continue
        if section == "thinking":
            thinking_lines.append(line)
        elif section == "prompt":
            prompt_lines.append(line)
    return " ".join(thinking_lines).strip(), " ".join(prompt_lines).strip()


def _by_paragraphs(text: str) -> tuple[str, str]:
    paragraphs = [p.strip() for p in text.split("\n\n") if len(p.strip()) > 50]
    if len(paragraphs) >= 2:
        return paragraphs[0], paragraphs[-1]
    return "", ""


def _emergency_block(text: str) -> str:
    blocks = [
        block.strip()
        for block in _PARAGRAPH_SPLIT.split(text)
        if len(block.strip()) > 50
        and "thinking" not in block.lower()
        and "analysis" not in block.lower()
        and " " in block.strip()
    ]
    if not blocks:
        return ""
    return max(blocks, key=len)


def parse_improvement(
    response_text: str, current_prompt: str, category: str
) -> ImprovementProposal:
    """Pull the refined prompt out of an improvement response.

    Falls back to ``enhance_prompt_manually`` when nothing usable remains.
    """
    text = strip_meta_commentary(response_text or "")
    thinking, candidate, strategy = "", "", "manual"
    for name, extract in (
        ("delimiters", _by_delimiters),
        ("lines", _by_lines),
        ("paragraphs", _by_paragraphs),
    ):
        thinking, candidate = extract(text)
        if thinking and candidate:
            strategy = name
            break
        logger.debug(f"Improvement parse strategy '{name}' found nothing")

    candidate = clean_prompt_candidate(candidate)
    if not thinking or len(thinking) < 20:
        thinking = DEFAULT_THINKING

    min_length = min(len(current_prompt) * 0.8, 50)
    if not candidate or len(candidate) < min_length:
        candidate = _emergency_block(text)
        strategy = "emergency" if candidate else "manual"

    lowered = candidate.lower()
    if (
        candidate.strip() == current_prompt.strip()
        or len(candidate) < MIN_PROMPT_LENGTH
        or "thinking" in lowered
        or "analysis" in lowered
    ):
        logger.debug("Improvement unusable, applying manual enhancement")
        return ImprovementProposal(
            thinking=thinking,
            prompt=enhance_prompt_manually(current_prompt, category),
            strategy="manual",
        )

    return ImprovementProposal(thinking=thinking, prompt=candidate, strategy=strategy)


def parse_review(response_text: str, neutral_score: float) -> ParsedReview:
    """Read the eight criterion scores, the critique and the suggestions.

    Criteria the reviewer left out get ``neutral_score``.
    """
    text = response_text or ""
    criteria: dict[str, float] = {}
    missing = []
    for criterion, pattern in _CRITERION_PATTERNS.items():
        match = pattern.search(text)
        if match:
            criteria[criterion] = clamp(float(match.group(1)), 0.0, MAX_SUB_SCORE)
        else:
            criteria[criterion] = neutral_score
            missing.append(criterion)

    critique_match = _CRITIQUE_BLOCK.search(text)
    critique = critique_match.group(1).strip() if critique_match else ""

    suggestions_match = _SUGGESTIONS_BLOCK.search(text)
    suggestions = (
        tuple(parse_list_items(suggestions_match.group(1)))
        if suggestions_match
        else ()
    )

    return ParsedReview(
        criteria=criteria,
        missing=tuple(missing),
        critique=critique,
        suggestions=suggestions,
    )
