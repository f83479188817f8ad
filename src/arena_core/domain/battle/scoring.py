"""Rule-based response scoring.

No model call is involved: the same text, prompt and category always
produce the same ``Score``.
"""

from arena_core.domain.battle.models import Score
from arena_core.shared.constants import MAX_SUB_SCORE, MIN_SUB_SCORE
from arena_core.shared.statistics import clamp
from arena_core.shared.text import (
    count_sentences,
    keyword_tokens,
    parse_list_items,
    word_tokens,
)

BASE_SCORE = 7.0

# Character band that reads as a complete but focused answer
LENGTH_BAND = (200, 800)
WORD_BAND = (50, 200)
SENTENCE_BAND = (3, 15)

MAX_OVERLAP_BONUS = 1.5

REASONING_MARKERS = frozenset(
    {"because", "therefore", "since", "thus", "hence", "consequently"}
)

# category -> (trigger word, sub-score it lifts, bonus)
CATEGORY_BONUSES: dict[str, tuple[str, str, float]] = {
    "creative": ("imagine", "creativity", 1.5),
    "technical": ("step", "structure", 1.0),
    "analysis": ("because", "reasoning", 1.0),
    "research": ("evidence", "accuracy", 1.0),
    "explanation": ("example", "accuracy", 0.5),
    "math": ("therefore", "reasoning", 0.5),
    "summary": ("key", "structure", 0.5),
}


class ResponseScorer:
    def score(self, response_text: str, prompt: str, category: str) -> Score:
        text = (response_text or "").strip()
        if not text:
            return Score.from_parts(
                MIN_SUB_SCORE,
                MIN_SUB_SCORE,
                MIN_SUB_SCORE,
                MIN_SUB_SCORE,
                notes="empty response",
            )

        parts = {
            "accuracy": BASE_SCORE,
            "reasoning": BASE_SCORE,
            "structure": BASE_SCORE,
            "creativity": BASE_SCORE,
        }
        notes: list[str] = []

        words = word_tokens(text)
        word_count = len(words)
        sentence_count = count_sentences(text)

        length = len(text)
        if LENGTH_BAND[0] <= length <= LENGTH_BAND[1]:
            parts["accuracy"] += 1.0
        elif length < 50:
            parts["accuracy"] -= 2.0
        elif length > LENGTH_BAND[1] * 4:
            parts["accuracy"] -= 0.5
        notes.append(f"{length} chars")

        prompt_keywords = keyword_tokens(prompt or "")
        if prompt_keywords:
            covered = prompt_keywords & keyword_tokens(text)
            overlap = len(covered) / len(prompt_keywords)
            parts["accuracy"] += min(overlap * 2.0, MAX_OVERLAP_BONUS)
            notes.append(f"covers {len(covered)}/{len(prompt_keywords)} prompt keywords")

        if WORD_BAND[0] <= word_count <= WORD_BAND[1]:
            parts["reasoning"] += 1.0
        if REASONING_MARKERS.intersection(words):
            parts["reasoning"] += 0.5
        notes.append(f"{word_count} words")

        if SENTENCE_BAND[0] <= sentence_count <= SENTENCE_BAND[1]:
            parts["structure"] += 1.0
        elif sentence_count <= 1:
            parts["structure"] -= 1.0
        if "\n\n" in text or parse_list_items(text):
            parts["structure"] += 0.5
        notes.append(f"{sentence_count} sentences")

        if word_count:
            diversity = len(set(words)) / word_count
            parts["creativity"] += clamp((diversity - 0.5) * 2.0, -1.0, 1.0)

        bonus = CATEGORY_BONUSES.get(category)
        if bonus:
            trigger, target, amount = bonus
            if trigger in text.lower():
                parts[target] += amount
                notes.append(f"{category} bonus for '{trigger}'")

        clamped = {
            name: clamp(value, MIN_SUB_SCORE, MAX_SUB_SCORE)
            for name, value in parts.items()
        }
        return Score.from_parts(**clamped, notes="; ".join(notes))
