"""Automatic choice of the two competing models."""

from dataclasses import dataclass, field

from arena_core.domain.battle.models import BattleType
from arena_core.domain.catalog import ModelCatalog
from arena_core.shared.errors import ConfigurationError
from arena_core.shared.text import word_tokens


@dataclass(frozen=True)
class Bucket:
    name: str
    categories: frozenset[str]
    # Matched as token prefixes, so "calculat" covers calculate/calculation
    keywords: tuple[str, ...]
    pair: tuple[str, str]
    reasoning: str


DEFAULT_PAIR = ("llama-3.1-8b-instant", "qwen/qwen3-32b")
DEFAULT_REASONING = (
    "A balanced match between a fast general-purpose model and a larger "
    "general-purpose model."
)
GENERIC_RATIONALE = (
    "No prompt details to match against, so a balanced default pair was chosen."
)

# Checked in order; the first bucket whose category or keywords match wins
BUCKETS: tuple[Bucket, ...] = (
    Bucket(
        name="math",
        categories=frozenset({"math"}),
        keywords=("math", "calculat", "solve", "equation", "algebra", "arithmetic"),
        pair=("deepseek-r1-distill-llama-70b", "llama-3.3-70b-versatile"),
        reasoning=(
            "Mathematical prompt: a step-by-step reasoning specialist faces a "
            "strong general model."
        ),
    ),
    Bucket(
        name="creative",
        categories=frozenset({"creative"}),
        keywords=("creative", "story", "poem", "narrative", "fiction", "imagine"),
        pair=("llama-3.1-8b-instant", "llama-3.3-70b-versatile"),
        reasoning=(
            "Creative prompt: a fast, free-flowing model faces a larger model "
            "with richer language."
        ),
    ),
    Bucket(
        name="technical",
        categories=frozenset({"technical"}),
        keywords=("code", "technical", "program", "function", "debug", "algorithm", "software"),
        pair=("llama-3.3-70b-versatile", "deepseek-r1-distill-llama-70b"),
        reasoning=(
            "Technical prompt: a versatile coder faces a model tuned for "
            "careful reasoning."
        ),
    ),
    Bucket(
        name="explanation",
        categories=frozenset({"explanation", "summary"}),
        keywords=("explain", "teach", "tutorial", "describe"),
        pair=("llama-3.1-8b-instant", "openai/gpt-oss-20b"),
        reasoning=(
            "Explanatory prompt: a concise fast model faces a model known for "
            "clear, structured teaching."
        ),
    ),
    Bucket(
        name="analysis",
        categories=frozenset({"analysis", "research"}),
        keywords=("analy", "research", "compare", "evaluat"),
        pair=("llama-3.3-70b-versatile", "qwen/qwen3-32b"),
        reasoning=(
            "Analytical prompt: a broad general model faces a model strong at "
            "structured comparison."
        ),
    ),
)


@dataclass(frozen=True)
class Selection:
    selected: tuple[str, str]
    rationale: str
    bucket: str = "default"
    # model id -> why it sat this battle out
    deselected: dict[str, str] = field(default_factory=dict)


class ModelSelector:
    """Picks two models for a prompt. Pure over the injected catalog."""

    def __init__(
        self,
        catalog: ModelCatalog,
        buckets: tuple[Bucket, ...] = BUCKETS,
        default_pair: tuple[str, str] = DEFAULT_PAIR,
    ):
        self.catalog = catalog
        self.buckets = buckets
        self.default_pair = default_pair

    def _match_bucket(self, prompt: str, category: str) -> Bucket | None:
        category = (category or "").strip().lower()
        for bucket in self.buckets:
            if category in bucket.categories:
                return bucket

        tokens = word_tokens(prompt)
        for bucket in self.buckets:
            if any(
                token.startswith(keyword)
                for token in tokens
                for keyword in bucket.keywords
            ):
                return bucket
        return None

    def _usable(self, pair: tuple[str, str]) -> bool:
        return all(self.catalog.is_available(model_id) for model_id in pair)

    def _resolve_pair(self, preferred: tuple[str, str]) -> tuple[str, str]:
        if self._usable(preferred):
            return preferred
        if self._usable(self.default_pair):
            return self.default_pair

        available = self.catalog.available()
        if len(available) < 2:
            raise ConfigurationError(
                f"Need at least two available models, catalog has {len(available)}"
            )
        return available[0].id, available[1].id

    def _deselected(self, selected: tuple[str, str]) -> dict[str, str]:
        reasons = {}
        for model in self.catalog:
            if model.id in selected:
                continue
            if not model.available:
                reasons[model.id] = "Currently unavailable"
            else:
                reasons[model.id] = "Less suited to this prompt than the selected pair"
        return reasons

    def select(
        self,
        prompt: str,
        category: str = "general",
        battle_type: BattleType = BattleType.RESPONSE,
    ) -> Selection:
        if not prompt or not prompt.strip():
            pair = self._resolve_pair(self.default_pair)
            return Selection(
                selected=pair,
                rationale=self._rationale(pair, GENERIC_RATIONALE),
                deselected=self._deselected(pair),
            )

        bucket = self._match_bucket(prompt, category)
        if bucket is None:
            pair = self._resolve_pair(self.default_pair)
            reasoning, name = DEFAULT_REASONING, "default"
        else:
            pair = self._resolve_pair(bucket.pair)
            reasoning, name = bucket.reasoning, bucket.name
            if pair != bucket.pair:
                reasoning += " Preferred models were unavailable, so substitutes were used."

        if battle_type is BattleType.PROMPT:
            reasoning += " Both models will take turns refining the prompt."

        return Selection(
            selected=pair,
            rationale=self._rationale(pair, reasoning),
            bucket=name,
            deselected=self._deselected(pair),
        )

    def _rationale(self, pair: tuple[str, str], reasoning: str) -> str:
        first = self.catalog.display_name(pair[0])
        second = self.catalog.display_name(pair[1])
        return f"Selected {first} vs {second}. Reasoning: {reasoning}"
