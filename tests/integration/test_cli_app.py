"""The ``arena`` command driven through ``App`` with a scripted client."""

import logging
from pathlib import Path
from typing import Any

import pytest

from arena_core.domain.battle import BattleStatus
from arena_core.domain.errors import FatalError
from arena_core.interfaces.cli.main import App
from arena_core.interfaces.cli.ui import Display
from tests.fixtures.clients import FakeCompletionClient, PromptBattleClient
from tests.fixtures.factories import MODEL_A, MODEL_B


def _app(settings: dict[str, Any], client: FakeCompletionClient, **args: Any) -> App:
    return App(
        args={"command": "battle", **args},
        display=Display(use_color=False),
        settings=settings,
        client=client,
    )


@pytest.fixture(autouse=True)  # type: ignore[misc]
def capture_display(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.INFO, logger="arena")
    return caplog


class TestBattleCommand:
    @pytest.mark.asyncio
    async def test_manual_battle_with_model_keys(
        self,
        arena_settings: dict[str, Any],
        records_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        app = _app(
            arena_settings,
            FakeCompletionClient(responses={MODEL_B: "Plants use light."}),
            prompt="Explain photosynthesis simply",
            mode="manual",
            models=["alpha", "beta"],
        )

        battle = await app.run_battle()

        assert battle.status is BattleStatus.COMPLETED
        assert battle.models == (MODEL_A, MODEL_B)
        assert (records_dir / f"battle_{battle.id}.json").exists()
        assert "Winner: Alpha Large" in caplog.text
        assert "Total cost: 0.5000 cents" in caplog.text
        assert "Alpha Large: 0.2500 cents (50.0%)" in caplog.text
        assert "Beta Fast: 0.2500 cents (50.0%)" in caplog.text

    @pytest.mark.asyncio
    async def test_no_save_skips_record(
        self, arena_settings: dict[str, Any], records_dir: Path
    ) -> None:
        app = _app(
            arena_settings,
            FakeCompletionClient(),
            prompt="Explain tides",
            mode="manual",
            models=["alpha", "beta"],
            no_save=True,
        )

        await app.run_battle()

        assert not records_dir.exists()

    @pytest.mark.asyncio
    async def test_outputs_dir_argument(
        self, arena_settings: dict[str, Any], tmp_path: Path
    ) -> None:
        elsewhere = tmp_path / "elsewhere"
        app = _app(
            arena_settings,
            FakeCompletionClient(),
            prompt="Explain tides",
            mode="manual",
            models=["alpha", "beta"],
            outputs_dir=str(elsewhere),
        )

        battle = await app.run_battle()

        assert (elsewhere / f"battle_{battle.id}.json").exists()

    @pytest.mark.asyncio
    async def test_prompt_battle(
        self, arena_settings: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        app = _app(
            arena_settings,
            PromptBattleClient(review_scores=[10.0]),
            prompt="Explain photosynthesis simply",
            battle_type="prompt",
            mode="manual",
            models=["alpha", "beta"],
            no_save=True,
        )

        battle = await app.run_battle()

        assert battle.global_consensus
        assert "Final prompt" in caplog.text
        assert "Perfect consensus achieved!" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_model_is_fatal(self, arena_settings: dict[str, Any]) -> None:
        client = FakeCompletionClient()
        app = _app(
            arena_settings,
            client,
            prompt="Explain tides",
            mode="manual",
            models=["alpha", "nobody"],
            no_save=True,
        )

        with pytest.raises(FatalError, match="Battle failed"):
            await app.run_battle()
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_invalid_battle_is_fatal(self, arena_settings: dict[str, Any]) -> None:
        app = _app(
            arena_settings,
            FakeCompletionClient(),
            prompt="Explain tides",
            temperature=9.0,
            no_save=True,
        )

        with pytest.raises(FatalError, match="Invalid battle"):
            await app.run_battle()

    @pytest.mark.asyncio
    async def test_invalid_settings_are_fatal(self, arena_settings: dict[str, Any]) -> None:
        del arena_settings["models"]["beta"]
        app = _app(arena_settings, FakeCompletionClient(), prompt="Explain tides")

        with pytest.raises(FatalError, match="Configuration error"):
            await app.run_battle()


class TestModelsCommand:
    @pytest.mark.asyncio
    async def test_lists_catalog(
        self, arena_settings: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        app = App(
            args={"command": "models"},
            display=Display(use_color=False),
            settings=arena_settings,
            client=FakeCompletionClient(),
        )

        await app.run()

        assert "Model catalog" in caplog.text
        assert "alpha" in caplog.text
        assert "gamma" in caplog.text
        assert "unavailable" in caplog.text
