"""
Unit tests for the command line entry point.
"""

import functools
import json
import time

import pytest
from rich.console import Console

from pathfinder.agents.pathway_share import ShareAdapter
from pathfinder.coordinator import AppState
from pathfinder.main import PathfinderApp, build_parser, main
from pathfinder.models.config import AppSettings
from pathfinder.utils.errors import PathwayServiceError
from pathfinder.utils.storage import STORAGE_KEY, LocalStorage, PathwayStore


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run the CLI inside an empty directory with a settings file."""
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "settings.json"
    config.write_text(
        json.dumps({"storage": {"storage_dir": "state"}, "export": {"output_dir": "pdfs"}})
    )
    return tmp_path, config


class TestBuildParser:
    """Test cases for argument parsing."""

    def test_defaults_to_no_command(self):
        args = build_parser().parse_args([])

        assert args.command is None
        assert str(args.config).endswith("app_settings.json")

    def test_export_output_option(self, tmp_path):
        args = build_parser().parse_args(["--log-level", "DEBUG", "export", "--output", str(tmp_path)])

        assert args.command == "export"
        assert args.output == tmp_path
        assert args.log_level == "DEBUG"


class TestMain:
    """Test cases for the non-interactive sub-commands."""

    def test_invalid_settings_exit_code(self, workspace):
        """Test that a bad settings file stops before anything runs."""
        tmp_path, config = workspace
        config.write_text(json.dumps({"unknown": 1}))

        assert main(["--config", str(config), "reset"]) == 2

    def test_show_without_stored_pathway(self, workspace):
        _, config = workspace

        assert main(["--config", str(config), "show"]) == 1

    def test_show_renders_stored_pathway(self, workspace, profile, pathway, capsys):
        """Test that a stored pair is restored and rendered."""
        # Arrange
        tmp_path, config = workspace
        PathwayStore(LocalStorage(tmp_path / "state")).save(profile, pathway)

        # Act
        code = main(["--config", str(config), "show"])

        # Assert
        assert code == 0
        assert "Electronics Technician" in capsys.readouterr().out

    def test_export_writes_pdf(self, workspace, profile, pathway):
        """Test that export restores the stored pathway and writes the report."""
        tmp_path, config = workspace
        PathwayStore(LocalStorage(tmp_path / "state")).save(profile, pathway)

        code = main(["--config", str(config), "export"])

        assert code == 0
        assert (tmp_path / "pdfs" / "AURA-SKILL-Strategy-Asha.pdf").exists()

    def test_reset_clears_storage(self, workspace, profile, pathway):
        """Test that reset removes the stored pair."""
        tmp_path, config = workspace
        PathwayStore(LocalStorage(tmp_path / "state")).save(profile, pathway)

        code = main(["--config", str(config), "reset"])

        assert code == 0
        assert LocalStorage(tmp_path / "state").get_item(STORAGE_KEY) is None


class ScriptedGenerator:
    """Generation double that raises or returns the queued outcomes in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def generate_pathway(self, profile):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def no_sleep(_seconds):
    return None


@pytest.fixture
def recorded(mocker):
    """Route the CLI console into a recording console."""
    recording = Console(record=True, width=200, force_terminal=False)
    mocker.patch("pathfinder.main.console", recording)
    return recording


@pytest.fixture
def app_factory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def build(**overrides):
        settings = AppSettings(storage={"storage_dir": str(tmp_path / "state")}, **overrides)
        app = PathfinderApp(settings)
        app.coordinator.sleep = no_sleep
        return app

    return build


class TestBrowse:
    """Test cases for the interactive roadmap menu."""

    @pytest.mark.asyncio
    async def test_share_status_reverts_before_next_menu(
        self, app_factory, recorded, mocker, profile, pathway
    ):
        """Test that the label shown after a slow prompt is back to its resting text."""
        # Arrange
        copied = []
        mocker.patch(
            "pathfinder.main.ShareAdapter",
            functools.partial(ShareAdapter, copy_to_clipboard=copied.append),
        )
        app = app_factory(share={"status_revert_seconds": 0.01})
        app.store.save(profile, pathway)
        app.coordinator.restore()
        answers = iter(["h", "g", "q"])

        def slow_answer(*_args, **_kwargs):
            # The user takes longer than the revert delay to choose
            time.sleep(0.05)
            return next(answers)

        mocker.patch("pathfinder.main.Prompt.ask", side_effect=slow_answer)

        # Act
        outcome = await app.browse()

        # Assert
        output = recorded.export_text()
        menus = [line for line in output.splitlines() if line.startswith("i live insight")]
        assert outcome == "quit"
        assert len(copied) == 1
        assert "Copied!" in output
        assert [menu.rsplit(" ", 1)[-1] for menu in menus] == ["(Share)", "(Copied!)", "(Share)"]

    @pytest.mark.asyncio
    async def test_start_over_clears_stored_pathway(
        self, app_factory, recorded, mocker, profile, pathway
    ):
        app = app_factory()
        app.store.save(profile, pathway)
        app.coordinator.restore()
        mocker.patch("pathfinder.main.Prompt.ask", return_value="r")

        outcome = await app.browse()

        assert outcome == "reset"
        assert app.coordinator.state == AppState.IDLE
        assert app.store.load() is None


class TestRun:
    """Test cases for the top-level session loop."""

    @pytest.mark.asyncio
    async def test_failure_then_try_again_regenerates(
        self, app_factory, recorded, mocker, profile, pathway
    ):
        """Test that a failed request offers a retry that starts from a fresh form."""
        # Arrange
        app = app_factory()
        generator = ScriptedGenerator(PathwayServiceError("Service unavailable"), pathway)
        app.coordinator.generator = generator
        collect = mocker.patch("pathfinder.main.collect_profile", return_value=profile)
        confirm = mocker.patch("pathfinder.main.Confirm.ask", return_value=True)
        mocker.patch("pathfinder.main.Prompt.ask", return_value="q")

        # Act
        code = await app.run()

        # Assert
        assert code == 0
        assert generator.calls == 2
        assert collect.call_count == 2
        confirm.assert_called_once()
        assert "Service unavailable" in recorded.export_text()
        assert app.store.load().pathway == pathway

    @pytest.mark.asyncio
    async def test_failure_declined_exits(self, app_factory, recorded, mocker, profile):
        app = app_factory()
        app.coordinator.generator = ScriptedGenerator(PathwayServiceError("Service unavailable"))
        mocker.patch("pathfinder.main.collect_profile", return_value=profile)
        mocker.patch("pathfinder.main.Confirm.ask", return_value=False)

        code = await app.run()

        assert code == 1
        assert app.coordinator.state == AppState.FAILED

    @pytest.mark.asyncio
    async def test_stored_pathway_skips_form(
        self, app_factory, recorded, mocker, profile, pathway
    ):
        app = app_factory()
        app.store.save(profile, pathway)
        collect = mocker.patch("pathfinder.main.collect_profile")
        mocker.patch("pathfinder.main.Prompt.ask", return_value="q")

        assert await app.run() == 0
        collect.assert_not_called()
