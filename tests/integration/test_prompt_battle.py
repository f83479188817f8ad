"""Prompt battles: alternating refinement, peer review and convergence."""

from typing import Any

import pytest

from arena_core.domain.battle import BattleStatus, BattleType
from arena_core.domain.errors import TerminalCompletionError
from arena_core.domain.prompts import enhance_prompt_manually
from tests.fixtures.clients import PromptBattleClient
from tests.fixtures.factories import MODEL_A, MODEL_B
from tests.integration.conftest import ArenaFactory, collect_events

ORIGINAL = "Explain photosynthesis simply"


@pytest.fixture()  # type: ignore[misc]
def prompt_battle(manual_battle: dict[str, Any]) -> dict[str, Any]:
    return {**manual_battle, "battle_type": "prompt", "rounds": 5}


class TestConvergence:
    @pytest.mark.asyncio
    async def test_plateau_stops_early(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        """5.0 -> 7.0 -> 7.1 is within the 0.3 threshold over two rounds."""
        client = PromptBattleClient(review_scores=[5.0, 7.0, 7.1])
        arena = make_arena(client, save_records=False)

        battle = await arena.run_battle(prompt_battle)

        assert battle.config.battle_type is BattleType.PROMPT
        assert battle.status is BattleStatus.COMPLETED
        assert len(battle.rounds) == 3
        assert [r.champion_score for r in battle.rounds] == [5.0, 7.0, 7.1]
        assert battle.plateau_reason is not None
        assert not battle.global_consensus
        assert battle.winner_model_id == MODEL_A
        assert battle.final_prompt is not None
        assert battle.final_prompt.endswith("Keep it under 103 words.")
        assert battle.summary.startswith("Significant improvement achieved!")

        # Improvers alternate and never review their own candidate
        assert [r.candidate_author_id for r in battle.rounds] == [MODEL_A, MODEL_B, MODEL_A]
        for result in battle.rounds:
            assert [review.reviewer_id for review in result.peer_reviews] == [
                model for model in (MODEL_A, MODEL_B) if model != result.candidate_author_id
            ]

        # Three proposals and three reviews at 0.25c each
        assert client.improvement_calls == 3
        assert client.review_calls == 3
        assert battle.total_cost == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_evolution_tracks_each_round(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        arena = make_arena(PromptBattleClient(review_scores=[5.0, 7.0, 7.1]), save_records=False)

        battle = await arena.run_battle(prompt_battle)

        evolution = battle.evolution
        assert [entry.round_number for entry in evolution] == [0, 1, 2, 3]
        assert evolution[0].prompt == ORIGINAL
        assert evolution[0].author_id == "user"
        assert [entry.author_id for entry in evolution[1:]] == [MODEL_A, MODEL_B, MODEL_A]
        assert [entry.score for entry in evolution[1:]] == [5.0, 7.0, 7.1]
        assert "General refinement" in evolution[1].improvements
        assert evolution[-1].prompt == battle.final_prompt

    @pytest.mark.asyncio
    async def test_perfect_reviews_reach_consensus(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        arena = make_arena(PromptBattleClient(review_scores=[10.0]), save_records=False)

        battle = await arena.run_battle(prompt_battle)

        assert battle.global_consensus
        assert len(battle.rounds) == 1
        assert battle.plateau_reason is None
        assert battle.summary.startswith("Perfect consensus achieved!")

    @pytest.mark.asyncio
    async def test_budget_is_never_exceeded(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        """Steady gains run the whole budget without a plateau."""
        client = PromptBattleClient(review_scores=[2.0, 4.0, 6.0])
        arena = make_arena(client, save_records=False)

        battle = await arena.run_battle({**prompt_battle, "rounds": 3})

        assert len(battle.rounds) == 3
        assert battle.plateau_reason is None
        assert not battle.global_consensus

    @pytest.mark.asyncio
    async def test_unbeaten_original_prompt_is_kept(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        """The submitted prompt survives, but the winner is still a competitor."""
        arena = make_arena(PromptBattleClient(review_scores=[0.0]), save_records=False)

        battle = await arena.run_battle({**prompt_battle, "rounds": 3})

        assert battle.status is BattleStatus.COMPLETED
        assert battle.kept_original
        assert battle.final_prompt == ORIGINAL
        assert battle.winner_model_id == MODEL_A
        assert battle.summary.startswith("Your original prompt was already quite good!")
        for result in battle.rounds:
            assert not result.accepted
            assert result.champion_model_id in battle.models
            assert set(result.scores) <= set(battle.models)

    @pytest.mark.asyncio
    async def test_refined_prompt_is_not_marked_as_kept(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        arena = make_arena(PromptBattleClient(review_scores=[6.0]), save_records=False)

        battle = await arena.run_battle({**prompt_battle, "rounds": 1})

        assert not battle.kept_original
        assert battle.rounds[0].accepted
        assert battle.final_prompt != ORIGINAL


class TestDegradedPromptBattles:
    @pytest.mark.asyncio
    async def test_failed_improver_gets_manual_enhancement(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        client = PromptBattleClient(
            review_scores=[6.0],
            failures={MODEL_A: TerminalCompletionError("bad key", error_type="authentication")},
        )
        arena = make_arena(client, save_records=False)

        battle = await arena.run_battle({**prompt_battle, "rounds": 1})

        assert battle.status is BattleStatus.COMPLETED
        assert battle.final_prompt == enhance_prompt_manually(ORIGINAL, "explanation")
        assert "manual enhancement applied" in battle.rounds[0].notes
        assert any("could not propose a refinement" in n for n in battle.degraded_notes)
        assert client.improvement_calls == 0

    @pytest.mark.asyncio
    async def test_failed_reviewer_uses_neutral_score(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        client = PromptBattleClient(
            review_scores=[9.0],
            failures={MODEL_B: TerminalCompletionError("bad key", error_type="authentication")},
        )
        arena = make_arena(client, save_records=False)

        battle = await arena.run_battle({**prompt_battle, "rounds": 1})

        review = battle.rounds[0].peer_reviews[0]
        assert review.is_fallback
        assert review.overall == 5.0
        assert battle.rounds[0].champion_score == 5.0
        assert battle.winner_model_id == MODEL_A
        assert battle.degraded_notes == [
            f"{MODEL_B} review in round 1 used the neutral fallback score"
        ]

    @pytest.mark.asyncio
    async def test_progress_reports_rounds(
        self, make_arena: ArenaFactory, prompt_battle: dict[str, Any]
    ) -> None:
        arena = make_arena(PromptBattleClient(review_scores=[5.0, 7.0, 7.1]), save_records=False)

        channel, task = await arena.stream_battle(prompt_battle)
        events = await collect_events(channel)
        await task

        decisions = [e.sub_phase for e in events if e.phase == "decision"]
        assert decisions == ["continuing", "continuing", "plateaued"]
        assert events[-1].phase == "completed"
