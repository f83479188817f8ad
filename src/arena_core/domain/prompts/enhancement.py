"""Deterministic prompt refinement used when a model's proposal is unusable."""

MAX_ENHANCED_LENGTH = 800

CATEGORY_ENHANCEMENTS: dict[str, str] = {
    "general": (
        "Please provide a comprehensive response with specific examples, clear "
        "structure, and actionable insights. Format your response with clear "
        "headings and bullet points where appropriate. Ensure completeness and "
        "practical value."
    ),
    "creative": (
        "Please create original, engaging content with vivid details, compelling "
        "narrative, and creative flair. Use descriptive language and imaginative "
        "elements. Make it memorable and impactful."
    ),
    "technical": (
        "Please provide step-by-step technical guidance with code examples, best "
        "practices, and troubleshooting tips. Include specific implementation "
        "details and common pitfalls to avoid."
    ),
    "analysis": (
        "Please conduct thorough analysis with data-driven insights, comparative "
        "evaluation, and evidence-based conclusions. Structure your analysis "
        "clearly with supporting evidence."
    ),
    "explanation": (
        "Please explain with clear definitions, relevant examples, analogies for "
        "better understanding, and structured breakdown of complex concepts. Make "
        "it accessible and comprehensive."
    ),
    "math": (
        "Please solve with detailed step-by-step calculations, explanations of "
        "methods used, and verification of results. Show all work clearly and "
        "explain reasoning."
    ),
    "research": (
        "Please research comprehensively with multiple perspectives, credible "
        "sources, and well-organized findings. Cite specific examples and provide "
        "balanced viewpoints."
    ),
}


def enhance_prompt_manually(prompt: str, category: str) -> str:
    enhancement = CATEGORY_ENHANCEMENTS.get(category, CATEGORY_ENHANCEMENTS["general"])
    enhanced = f"{prompt.strip()}\n\n{enhancement}"
    if len(enhanced) <= MAX_ENHANCED_LENGTH:
        return enhanced

    focused = enhancement.split(".")[0] + ". Provide detailed, actionable guidance."
    return f"{prompt.strip()}\n\n{focused}"


def improvement_tags(original: str, refined: str) -> tuple[str, ...]:
    tags = []
    lowered = refined.lower()
    if len(refined) > len(original) * 1.2:
        tags.append("Added context")
    if "specific" in lowered or "example" in lowered:
        tags.append("Increased specificity")
    if "format" in lowered or "structure" in lowered:
        tags.append("Better structure")
    if "please" in lowered or "step" in lowered:
        tags.append("Enhanced clarity")
    if refined != original or not tags:
        tags.append("General refinement")
    return tuple(tags)


def prompt_battle_summary(
    original_prompt: str,
    final_prompt: str,
    rounds_run: int,
    improvements: int,
    final_score: float,
    consensus: bool,
) -> str:
    if consensus:
        growth = round(len(final_prompt) / max(len(original_prompt), 1) * 100)
        return (
            f"Perfect consensus achieved! After {rounds_run} rounds of iterative "
            "refinement, every reviewer scored the prompt 10/10. The final prompt "
            f"is {growth}% of the original length."
        )
    if improvements > 0:
        return (
            f"Significant improvement achieved! After {rounds_run} rounds, the "
            f"prompt evolved with {improvements} successful improvements. Final "
            f"score: {final_score}/10. Both models contributed refinements."
        )
    return (
        f"Your original prompt was already quite good! After {rounds_run} rounds "
        "of analysis, no refinement outscored it."
    )


def response_battle_summary(
    winner_name: str, winner_score: float, runner_up_score: float, rounds_run: int
) -> str:
    margin = round(winner_score - runner_up_score, 1)
    if margin == 0:
        return (
            f"{winner_name} wins on the tie-break after {rounds_run} "
            f"round(s), both scoring {winner_score}/10."
        )
    return (
        f"{winner_name} wins after {rounds_run} round(s) with "
        f"{winner_score}/10, ahead by {margin} points."
    )
