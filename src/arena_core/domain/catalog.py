"""Read-only registry of the models a battle may use."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from arena_core.shared.errors import ConfigurationError


@dataclass(frozen=True)
class Model:
    id: str
    name: str
    provider: str
    available: bool = True
    premium: bool = False
    strengths: tuple[str, ...] = ()
    description: str = ""
    context_window: int | None = None
    max_completion_tokens: int | None = None
    # Cents per 1K tokens
    price_per_1k_tokens: float = 0.0
    speed: str = "medium"
    quality: str = "good"

    @property
    def descriptor(self) -> str:
        if self.strengths:
            return ", ".join(self.strengths)
        return self.description


class ModelCatalog:
    """Immutable lookup of ``Model`` entries keyed by id.

    The catalog is built once and handed to every collaborator that needs
    it, so concurrent battles share it without copying.
    """

    def __init__(self, models: Iterable[Model]):
        entries: dict[str, Model] = {}
        for model in models:
            if model.id in entries:
                raise ConfigurationError(
                    f"Duplicate model id in catalog: {model.id}"
                )
            entries[model.id] = model
        self._models: Mapping[str, Model] = entries

    @classmethod
    def from_config(cls, models: Mapping[str, Mapping[str, Any]]) -> "ModelCatalog":
        """Build a catalog from the ``models`` section of the settings."""
        entries = []
        for key, raw in models.items():
            model_id = raw.get("model_name") or key
            entries.append(
                Model(
                    id=model_id,
                    name=raw.get("display_name") or raw.get("name") or model_id,
                    provider=raw.get("provider", "unknown"),
                    available=bool(raw.get("available", True)),
                    premium=bool(raw.get("premium", False)),
                    strengths=tuple(raw.get("strengths") or ()),
                    description=raw.get("description", ""),
                    context_window=raw.get("context_window"),
                    max_completion_tokens=raw.get("max_completion_tokens"),
                    price_per_1k_tokens=float(
                        raw.get("price_per_1k_tokens", 0.0)
                    ),
                    speed=raw.get("speed", "medium"),
                    quality=raw.get("quality", "good"),
                )
            )
        return cls(entries)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __iter__(self) -> Iterator[Model]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)

    def get(self, model_id: str) -> Model | None:
        return self._models.get(model_id)

    def require(self, model_id: str) -> Model:
        model = self._models.get(model_id)
        if model is None:
            raise ConfigurationError(f"Unknown model: {model_id}")
        return model

    def is_available(self, model_id: str) -> bool:
        model = self._models.get(model_id)
        return model is not None and model.available

    def available(self) -> list[Model]:
        return [model for model in self._models.values() if model.available]

    def display_name(self, model_id: str) -> str:
        model = self._models.get(model_id)
        return model.name if model else model_id

    def cost_for(self, model_id: str, tokens: int) -> float:
        """Cost in cents for ``tokens`` at the model's catalog price."""
        model = self._models.get(model_id)
        if model is None or tokens <= 0:
            return 0.0
        return round(tokens / 1000 * model.price_per_1k_tokens, 6)
