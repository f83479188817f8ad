from arena_core.domain.battle.convergence import (
    ConvergenceDecision,
    ConvergenceDetector,
    ConvergenceState,
)
from arena_core.domain.battle.cost import CostTracker
from arena_core.domain.battle.models import (
    Battle,
    BattleConfig,
    BattleMode,
    BattleStatus,
    BattleType,
    ModelResponse,
    ModelStatus,
    PeerReview,
    PromptEvolutionEntry,
    RoundResult,
    Score,
)
from arena_core.domain.battle.orchestrator import BattleOrchestrator
from arena_core.domain.battle.peer_review import PeerReviewPanel
from arena_core.domain.battle.progress import (
    NullProgressSink,
    ProgressChannel,
    ProgressEvent,
    ProgressSink,
)
from arena_core.domain.battle.rounds import RoundExecutor, pick_champion
from arena_core.domain.battle.scoring import ResponseScorer

__all__ = [
    "Battle",
    "BattleConfig",
    "BattleMode",
    "BattleOrchestrator",
    "BattleStatus",
    "BattleType",
    "ConvergenceDecision",
    "ConvergenceDetector",
    "ConvergenceState",
    "CostTracker",
    "ModelResponse",
    "ModelStatus",
    "NullProgressSink",
    "PeerReview",
    "PeerReviewPanel",
    "ProgressChannel",
    "ProgressEvent",
    "ProgressSink",
    "PromptEvolutionEntry",
    "ResponseScorer",
    "RoundExecutor",
    "RoundResult",
    "Score",
    "pick_champion",
]
