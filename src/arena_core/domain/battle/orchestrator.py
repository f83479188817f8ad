"""Top-level battle coordination.

``BattleOrchestrator.run`` is the single entry point: it resolves the two
competing models, drives the rounds, and returns a finalized ``Battle``.
Only configuration problems found before the first remote call produce a
failed battle; every remote failure degrades into fallback content.
"""

from collections.abc import Sequence

from arena_core.domain.battle.convergence import (
    ConvergenceDetector,
    ConvergenceState,
)
from arena_core.domain.battle.cost import CostTracker
from arena_core.domain.battle.models import (
    Battle,
    BattleConfig,
    BattleMode,
    BattleType,
    ModelResponse,
    ModelStatus,
    PromptEvolutionEntry,
    RoundResult,
)
from arena_core.domain.battle.peer_review import PeerReviewPanel
from arena_core.domain.battle.progress import (
    NullProgressSink,
    ProgressEvent,
    ProgressSink,
    round_progress,
)
from arena_core.domain.battle.rounds import RoundExecutor
from arena_core.domain.battle.scoring import ResponseScorer
from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.model_selection import ModelSelector
from arena_core.domain.prompts import (
    ImprovementProposal,
    build_improvement_prompt,
    enhance_prompt_manually,
    improvement_tags,
    parse_improvement,
    prompt_battle_summary,
    response_battle_summary,
)
from arena_core.domain.prompts.parsing import DEFAULT_THINKING
from arena_core.ports.llm import ModelInvoker
from arena_core.shared.constants import (
    IMPROVEMENT_MAX_TOKENS,
    IMPROVEMENT_TEMPERATURE,
    SELECTION_PROGRESS,
    USER_AUTHOR_ID,
)
from arena_core.shared.errors import ConfigurationError
from arena_core.shared.logging import get_contextual_logger
from arena_core.shared.statistics import rounded_mean

logger = get_contextual_logger("arena.orchestrator")


class _BattleRun:
    """Mutable state of one ``run`` call. Never shared between battles."""

    def __init__(self, battle: Battle, sink: ProgressSink):
        self.battle = battle
        self.sink = sink
        self.cost = CostTracker(battle)
        self.model_status: dict[str, ModelStatus] = {}
        self.percent = 0.0

    def emit(
        self,
        phase: str,
        percent: float | None = None,
        sub_phase: str | None = None,
        current_round: int | None = None,
    ) -> None:
        if percent is not None:
            self.percent = max(self.percent, percent)
        event = ProgressEvent(
            phase=phase,
            progress_percent=self.percent,
            model_status=dict(self.model_status),
            sub_phase=sub_phase,
            current_round=current_round,
            total_rounds=self.battle.config.rounds,
            battle_id=self.battle.id,
        )
        try:
            self.sink.publish(event)
        except Exception as exc:
            logger.warning(
                f"Progress sink failed on '{phase}' event: {exc!s}", exc_info=True
            )

    def close(self) -> None:
        try:
            self.sink.close()
        except Exception as exc:
            logger.warning(f"Progress sink failed to close: {exc!s}", exc_info=True)

    def set_status(self, model_id: str, status: ModelStatus) -> None:
        self.model_status[model_id] = status
        self.emit("model_status", sub_phase=f"{model_id} {status.value}")

    def reset_statuses(self) -> None:
        for model_id in self.battle.models:
            self.model_status[model_id] = ModelStatus.PENDING


class BattleOrchestrator:
    def __init__(
        self,
        catalog: ModelCatalog,
        invoker: ModelInvoker,
        selector: ModelSelector | None = None,
        scorer: ResponseScorer | None = None,
        round_executor: RoundExecutor | None = None,
        review_panel: PeerReviewPanel | None = None,
        convergence: ConvergenceDetector | None = None,
        improvement_max_tokens: int = IMPROVEMENT_MAX_TOKENS,
        improvement_temperature: float = IMPROVEMENT_TEMPERATURE,
    ):
        self.catalog = catalog
        self.invoker = invoker
        self.selector = selector or ModelSelector(catalog)
        self.scorer = scorer or ResponseScorer()
        self.round_executor = round_executor or RoundExecutor(invoker, self.scorer)
        self.review_panel = review_panel or PeerReviewPanel(invoker)
        self.convergence = convergence or ConvergenceDetector()
        self.improvement_max_tokens = improvement_max_tokens
        self.improvement_temperature = improvement_temperature

    async def run(
        self,
        config: BattleConfig,
        progress: ProgressSink | None = None,
        battle_id: str | None = None,
    ) -> Battle:
        sink = progress or NullProgressSink()
        battle = Battle(config=config)
        if battle_id:
            battle.id = battle_id
        logger.set_run(battle.id)
        run = _BattleRun(battle, sink)

        try:
            logger.info("=" * 80)
            logger.info(
                f"Starting {config.battle_type.value} battle "
                f"({config.mode.value} mode, {config.rounds} round(s))"
            )
            logger.info("=" * 80)

            try:
                models = self._resolve_models(config, battle)
            except ConfigurationError as exc:
                logger.error(f"Battle {battle.id} cannot start: {exc}")
                battle.fail(str(exc))
                run.emit("failed", sub_phase=str(exc))
                return battle

            battle.assign_models(models)
            run.reset_statuses()
            run.emit(
                "selection",
                SELECTION_PROGRESS,
                sub_phase=f"Selected {models[0]} vs {models[1]}",
            )

            if config.battle_type is BattleType.RESPONSE:
                await self._run_response_battle(run)
            else:
                await self._run_prompt_battle(run)

            run.emit("completed", 100.0, sub_phase=battle.summary)
            logger.info("=" * 80)
            logger.info(
                f"Battle {battle.id} completed. Winner: {battle.winner_model_id}. "
                f"Total cost: {battle.total_cost:.4f}c"
            )
            logger.info("=" * 80)
            return battle
        finally:
            run.close()

    def _resolve_models(self, config: BattleConfig, battle: Battle) -> tuple[str, str]:
        if config.mode is BattleMode.AUTO:
            selection = self.selector.select(
                config.prompt, config.category, config.battle_type
            )
            battle.selection_rationale = selection.rationale
            logger.info(selection.rationale)
            return selection.selected

        problems = []
        for model_id in config.models:
            model = self.catalog.get(model_id)
            if model is None:
                problems.append(f"Unknown model: {model_id}")
            elif not model.available:
                problems.append(f"Model is unavailable: {model_id}")
        if problems:
            raise ConfigurationError("Selected models cannot battle", problems)

        first, second = config.models
        battle.selection_rationale = (
            f"Selected {self.catalog.display_name(first)} vs "
            f"{self.catalog.display_name(second)}. Reasoning: chosen manually."
        )
        return first, second

    async def _run_response_battle(self, run: _BattleRun) -> None:
        battle = run.battle
        config = battle.config
        total = config.rounds

        for round_number in range(1, total + 1):
            with logger.scope(round_number=round_number, phase="response"):
                logger.info(f"Round {round_number}/{total}", display_type="section_header")
                run.reset_statuses()
                run.emit(
                    "round",
                    round_progress(round_number, total, 0.0),
                    sub_phase=f"Round {round_number} started",
                    current_round=round_number,
                )

                result = await self.round_executor.run_round(
                    config,
                    round_number,
                    battle.models,
                    on_status=run.set_status,
                )
                for response in result.responses:
                    run.cost.add_response(response)
                for note in result.notes:
                    battle.note_degraded(note)
                battle.append_round(result)

                run.emit(
                    "round",
                    round_progress(round_number, total, 1.0),
                    sub_phase=f"Round {round_number} scored",
                    current_round=round_number,
                )

        final = battle.rounds[-1]
        winner = final.champion_model_id
        runner_up = next(model_id for model_id in battle.models if model_id != winner)
        run.emit("decision", sub_phase=f"{winner} wins", current_round=final.round_number)
        battle.complete(
            winner,
            response_battle_summary(
                self.catalog.display_name(winner),
                final.scores[winner].overall,
                final.scores[runner_up].overall,
                len(battle.rounds),
            ),
        )

    @staticmethod
    def _title_holder(models: Sequence[str], champion_author: str) -> str:
        # An unbeaten original prompt is credited to the first competitor
        return champion_author if champion_author in models else models[0]

    def _improver_for(
        self, models: Sequence[str], champion_author: str, round_number: int
    ) -> str:
        if champion_author in models:
            return next(model_id for model_id in models if model_id != champion_author)
        return models[(round_number - 1) % len(models)]

    async def _propose(
        self,
        run: _BattleRun,
        improver: str,
        prompt: str,
        round_number: int,
    ) -> tuple[ImprovementProposal, ModelResponse]:
        config = run.battle.config
        run.set_status(improver, ModelStatus.RUNNING)
        with logger.scope(phase="improvement", model=improver):
            response = await self.invoker.invoke(
                improver,
                build_improvement_prompt(prompt, config.category, round_number),
                self.improvement_max_tokens,
                self.improvement_temperature,
                config.category,
            )
        run.cost.add_response(response)

        if response.is_fallback:
            run.set_status(improver, ModelStatus.FAILED)
            run.battle.note_degraded(
                f"{improver} could not propose a refinement in round "
                f"{round_number} ({response.error_type}); manual enhancement used"
            )
            return (
                ImprovementProposal(
                    thinking=DEFAULT_THINKING,
                    prompt=enhance_prompt_manually(prompt, config.category),
                    strategy="manual",
                ),
                response,
            )

        run.set_status(improver, ModelStatus.COMPLETED)
        proposal = parse_improvement(response.text, prompt, config.category)
        if proposal.manual:
            logger.warning(
                f"{improver}'s proposal was unusable; manual enhancement applied"
            )
        return proposal, response

    async def _run_prompt_battle(self, run: _BattleRun) -> None:
        battle = run.battle
        config = battle.config
        models = battle.models
        total = config.rounds
        original = config.prompt.strip()

        battle.append_evolution(
            PromptEvolutionEntry(round_number=0, prompt=original, author_id=USER_AUTHOR_ID)
        )
        champion_prompt = original
        champion_author = USER_AUTHOR_ID
        # The original prompt is an unscored baseline
        champion_score = 0.0
        accepted_count = 0

        for round_number in range(1, total + 1):
            with logger.scope(round_number=round_number, phase="refinement"):
                logger.info(f"Round {round_number}/{total}", display_type="section_header")
                run.reset_statuses()
                run.emit(
                    "round",
                    round_progress(round_number, total, 0.0),
                    sub_phase=f"Round {round_number} started",
                    current_round=round_number,
                )

                improver = self._improver_for(models, champion_author, round_number)
                reviewers = [model_id for model_id in models if model_id != improver]
                proposal, response = await self._propose(
                    run, improver, champion_prompt, round_number
                )
                run.emit(
                    "round",
                    round_progress(round_number, total, 0.4),
                    sub_phase=f"{improver} proposed a refinement",
                    current_round=round_number,
                )

                for reviewer in reviewers:
                    run.set_status(reviewer, ModelStatus.RUNNING)
                reviews = await self.review_panel.review(
                    proposal.prompt, improver, reviewers, original, config.category
                )
                run.cost.add_reviews(reviews)
                for review in reviews:
                    run.set_status(
                        review.reviewer_id,
                        ModelStatus.FAILED if review.is_fallback else ModelStatus.COMPLETED,
                    )
                    if review.is_fallback:
                        battle.note_degraded(
                            f"{review.reviewer_id} review in round {round_number} "
                            "used the neutral fallback score"
                        )

                peer_score = rounded_mean(review.overall for review in reviews)
                scores = {
                    improver: self.scorer.score(proposal.prompt, original, config.category)
                }
                if champion_author in models:
                    scores[champion_author] = self.scorer.score(
                        champion_prompt, original, config.category
                    )
                candidates = {champion_author: champion_prompt, improver: proposal.prompt}

                accepted = peer_score > champion_score
                if accepted:
                    tags = improvement_tags(champion_prompt, proposal.prompt)
                    champion_prompt = proposal.prompt
                    champion_author = improver
                    champion_score = peer_score
                    accepted_count += 1
                    battle.append_evolution(
                        PromptEvolutionEntry(
                            round_number=round_number,
                            prompt=champion_prompt,
                            author_id=improver,
                            improvements=tags,
                            score=peer_score,
                            thinking=proposal.thinking,
                        )
                    )
                    logger.info(
                        f"{improver}'s refinement takes the lead with {peer_score}/10"
                    )
                else:
                    battle.append_evolution(
                        PromptEvolutionEntry(
                            round_number=round_number,
                            prompt=champion_prompt,
                            author_id=champion_author,
                            score=champion_score,
                            thinking=proposal.thinking,
                        )
                    )
                    logger.info(
                        f"{improver}'s refinement scored {peer_score}/10 and did not "
                        f"beat the champion's {champion_score}/10"
                    )

                notes = []
                if response.is_fallback:
                    notes.append(f"{improver} used fallback content ({response.error_type})")
                if proposal.manual:
                    notes.append("manual enhancement applied")

                result = RoundResult(
                    round_number=round_number,
                    champion_model_id=self._title_holder(models, champion_author),
                    champion_score=champion_score,
                    scores=scores,
                    responses=(response,),
                    candidates=candidates,
                    peer_reviews=tuple(reviews),
                    candidate_author_id=improver,
                    accepted=accepted,
                    notes=tuple(notes),
                )
                battle.append_round(result)
                run.emit(
                    "round",
                    round_progress(round_number, total, 0.9),
                    sub_phase=f"Round {round_number} reviewed",
                    current_round=round_number,
                )

                decision = self.convergence.evaluate(battle.rounds)
                run.emit(
                    "decision",
                    round_progress(round_number, total, 1.0),
                    sub_phase=decision.state.value,
                    current_round=round_number,
                )
                if decision.state is ConvergenceState.CONSENSUS_REACHED:
                    battle.global_consensus = True
                    logger.info(f"Consensus reached in round {round_number}")
                    break
                if decision.state is ConvergenceState.PLATEAUED and round_number < total:
                    battle.plateau_reason = decision.reason
                    logger.info(f"Stopping early: {decision.reason}")
                    break

        battle.final_prompt = champion_prompt
        battle.kept_original = accepted_count == 0
        battle.complete(
            self._title_holder(models, champion_author),
            prompt_battle_summary(
                original,
                champion_prompt,
                len(battle.rounds),
                accepted_count,
                champion_score,
                battle.global_consensus,
            ),
        )
