from arena_core.domain.prompts import (
    enhance_prompt_manually,
    improvement_tags,
    parse_improvement,
    parse_review,
)
from arena_core.domain.prompts.parsing import DEFAULT_THINKING
from arena_core.shared.constants import REVIEW_CRITERIA
from tests.fixtures.clients import improvement_text, review_text

CURRENT = "Explain photosynthesis simply"


class TestParseImprovement:
    """Recovering the refined prompt from free-form model output."""

    def test_delimited_format(self) -> None:
        proposal = parse_improvement(improvement_text(1), CURRENT, "general")
        assert proposal.strategy == "delimiters"
        assert proposal.prompt.startswith("Explain photosynthesis to a curious ten-year-old")
        assert proposal.prompt.endswith("under 101 words.")
        assert "reader" in proposal.thinking

    def test_meta_commentary_and_quotes_are_removed(self) -> None:
        text = (
            "Sure! Here's my refinement.\n"
            "THINKING:\nAdded an audience and a length limit to focus the answer.\n"
            "IMPROVED_PROMPT:\n"
            '"Explain photosynthesis to a ten-year-old in under 120 words."'
        )
        proposal = parse_improvement(text, CURRENT, "general")
        assert proposal.prompt == (
            "Explain photosynthesis to a ten-year-old in under 120 words."
        )

    def test_paragraph_fallback(self) -> None:
        text = (
            "The original lacks an audience, a format and any constraint on length.\n\n"
            "Describe how photosynthesis works for a high-school biology class, "
            "using one labelled diagram description and two real-world examples."
        )
        proposal = parse_improvement(text, CURRENT, "general")
        assert proposal.strategy == "paragraphs"
        assert proposal.prompt.startswith("Describe how photosynthesis works")

    def test_unusable_output_gets_manual_enhancement(self) -> None:
        """Echoing the prompt back is not a refinement."""
        text = f"THINKING:\nLooks fine to me as it stands.\n\nIMPROVED_PROMPT:\n{CURRENT}"
        proposal = parse_improvement(text, CURRENT, "explanation")
        assert proposal.manual
        assert proposal.prompt == enhance_prompt_manually(CURRENT, "explanation")

    def test_garbage_output(self) -> None:
        proposal = parse_improvement("???", CURRENT, "general")
        assert proposal.manual
        assert proposal.thinking == DEFAULT_THINKING


class TestParseReview:
    def test_all_criteria_present(self) -> None:
        parsed = parse_review(review_text(8.5, "Solid prompt."), neutral_score=5.0)
        assert parsed.criteria == dict.fromkeys(REVIEW_CRITERIA, 8.5)
        assert parsed.missing == ()
        assert parsed.critique == "Solid prompt."
        assert parsed.suggestions == ("Name the target audience", "Ask for a concrete example")

    def test_missing_criteria_get_neutral_score(self) -> None:
        parsed = parse_review("CLARITY: 9\nSpecificity: 7\nCONTEXT COVERAGE: 12", 5.0)
        assert parsed.criteria["clarity"] == 9.0
        assert parsed.criteria["specificity"] == 7.0
        # Clamped to the scale
        assert parsed.criteria["context_coverage"] == 10.0
        assert parsed.criteria["conciseness"] == 5.0
        assert "conciseness" in parsed.missing
        assert "clarity" not in parsed.missing

    def test_markdown_bold_labels(self) -> None:
        text = (
            "**CLARITY:** 8\n"
            "**Specificity**: 6.5\n"
            "- **Non-redundancy:** 9\n\n"
            "**CRITIQUE:** Clear but vague.\n"
            "**SUGGESTIONS:**\n"
            "- Name the audience\n"
        )
        parsed = parse_review(text, 5.0)
        assert parsed.criteria["clarity"] == 8.0
        assert parsed.criteria["specificity"] == 6.5
        assert parsed.criteria["non_redundancy"] == 9.0
        assert parsed.critique == "Clear but vague."
        assert parsed.suggestions == ("Name the audience",)


class TestEnhancement:
    def test_manual_enhancement_is_category_specific(self) -> None:
        technical = enhance_prompt_manually("Sort a list", "technical")
        unknown = enhance_prompt_manually("Sort a list", "no-such-category")
        assert "step-by-step technical guidance" in technical
        assert "comprehensive response" in unknown

    def test_long_prompts_get_a_focused_enhancement(self) -> None:
        enhanced = enhance_prompt_manually("x " * 400, "general")
        assert enhanced.endswith("Provide detailed, actionable guidance.")

    def test_improvement_tags(self) -> None:
        tags = improvement_tags(
            "Write code",
            "Please write code step by step with a specific example and output format",
        )
        assert tags == (
            "Added context",
            "Increased specificity",
            "Better structure",
            "Enhanced clarity",
            "General refinement",
        )
        assert improvement_tags("same", "same") == ("General refinement",)
