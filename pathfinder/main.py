"""
Talent Pathfinder command line.

Sub-commands:
    run        restore or collect a profile, generate, then browse the roadmap (default)
    show       render the stored roadmap
    export     write the stored roadmap as a PDF
    reset      clear the stored roadmap
    configure  prompt for and save the API key
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from pathfinder.agents.pathway_export import PdfExporter
from pathfinder.agents.pathway_generator import ClaudePathwayGenerator
from pathfinder.agents.pathway_reporting import PathwayRenderer, render_guide
from pathfinder.agents.pathway_share import ShareAdapter
from pathfinder.agents.profile_form import collect_profile
from pathfinder.coordinator import AppState, PathwayCoordinator
from pathfinder.models.config import AppSettings
from pathfinder.utils.credential_manager import CredentialManager
from pathfinder.utils.errors import ConfigurationError, ExportError
from pathfinder.utils.logger import configure_logging, get_logger
from pathfinder.utils.progress_tracker import ProgressTracker
from pathfinder.utils.storage import LocalStorage, PathwayStore
from pathfinder.utils.validator import load_app_settings

console = Console()

MENU = (
    "[bold]i[/bold] live insight  [bold]s[/bold] direct search  "
    "[bold]e[/bold] export PDF  [bold]h[/bold] share  [bold]g[/bold] guide  "
    "[bold]r[/bold] start over  [bold]q[/bold] quit"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talent-pathfinder",
        description="Map a learner's talents to an NSQF-aligned training pathway.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/app_settings.json"),
        help="Path to app settings JSON (defaults apply when missing)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("run", help="Create or restore a pathway and browse it")
    sub.add_parser("show", help="Render the stored pathway")
    export = sub.add_parser("export", help="Export the stored pathway as PDF")
    export.add_argument("--output", type=Path, help="Output directory")
    sub.add_parser("reset", help="Clear the stored pathway")
    sub.add_parser("configure", help="Set the API key")
    return parser


class PathfinderApp:
    """Wires settings, persistence, generation and presentation together."""

    def __init__(self, settings: AppSettings):
        self.settings = settings
        self.logger = get_logger(phase="cli", component="main")
        self.credentials = CredentialManager(api_key_env=settings.generation.api_key_env)
        self.store = PathwayStore(LocalStorage(settings.storage.storage_dir))
        self.generator = ClaudePathwayGenerator(
            credentials=self.credentials,
            generation=settings.generation,
            search=settings.search,
        )
        self.coordinator = PathwayCoordinator(
            generator=self.generator,
            store=self.store,
            progress=settings.progress,
        )
        self.tracker = ProgressTracker(console=console)
        self.coordinator.subscribe(self._on_change)

    def _on_change(self, coordinator: PathwayCoordinator) -> None:
        if coordinator.state == AppState.SUBMITTING:
            if not self.tracker.is_active():
                self.tracker.start(coordinator.status_text)
            self.tracker.update(coordinator.progress, coordinator.status_text)
        elif self.tracker.is_active():
            self.tracker.complete()

    def renderer(self) -> PathwayRenderer:
        return PathwayRenderer(
            self.coordinator.pathway,
            self.coordinator.profile,
            generator=self.generator,
            on_reset=self.coordinator.reset,
            search=self.settings.search,
            console=console,
        )

    def export(self, output_dir: Optional[Path] = None) -> Optional[Path]:
        exporter = PdfExporter(output_dir or Path(self.settings.export.output_dir))
        try:
            path = exporter.export(self.coordinator.pathway, self.coordinator.profile)
        except ExportError as e:
            self.logger.error("Export failed", error=str(e))
            console.print("[red]Error generating PDF.[/red]")
            return None
        console.print(f"[green][+] Saved {path}[/green]")
        return path

    async def run(self) -> int:
        while True:
            if self.coordinator.state == AppState.IDLE and not self.coordinator.restore():
                profile = collect_profile(console)
                await self.coordinator.submit(profile)

            if self.coordinator.state == AppState.FAILED:
                console.print(f"\n[red]Error Generating Pathway[/red]\n{self.coordinator.error}\n")
                if not Confirm.ask("Try again?", default=True):
                    return 1
                self.coordinator.reset()
                continue

            if await self.browse() == "quit":
                return 0

    async def browse(self) -> str:
        renderer = self.renderer()
        share = ShareAdapter(self.settings.share)
        renderer.render()
        try:
            while True:
                console.print(f"\n{MENU}  [dim]({share.status})[/dim]")
                choice = Prompt.ask(
                    "Action", choices=["i", "s", "e", "h", "g", "r", "q"], default="q"
                )
                if choice == "q":
                    return "quit"
                if choice == "r":
                    renderer.reset()
                    return "reset"
                if choice == "g":
                    render_guide(console)
                elif choice == "e":
                    self.export()
                elif choice == "h":
                    status = await share.share(self.coordinator.pathway)
                    console.print(status)
                elif choice in ("i", "s"):
                    key = self._ask_resource(renderer)
                    if key is None:
                        continue
                    if choice == "i":
                        await renderer.live_insight(*key)
                        renderer.render()
                    else:
                        url = renderer.open_direct_search(*key)
                        console.print(f"Opened {url}")
        finally:
            share.close()

    @staticmethod
    def _ask_resource(renderer: PathwayRenderer) -> Optional[tuple[int, int]]:
        views = renderer.resource_views()
        if not views:
            console.print("This pathway has no learning resources.")
            return None
        for view in views:
            console.print(f"  {view.step_index + 1}.{view.resource_index + 1}  {view.label}")
        labels = [f"{v.step_index + 1}.{v.resource_index + 1}" for v in views]
        picked = Prompt.ask("Resource", choices=labels, show_choices=False)
        step, res = picked.split(".")
        return int(step) - 1, int(res) - 1


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    command = args.command or "run"

    try:
        settings = load_app_settings(args.config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        return 2

    configure_logging(log_level=args.log_level or settings.log_level)
    app = PathfinderApp(settings)

    if command == "configure":
        try:
            app.credentials.prompt_for_api_key()
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            return 1
        return 0

    if command == "reset":
        app.coordinator.reset()
        console.print("Stored pathway cleared.")
        return 0

    if command in ("show", "export"):
        if not app.coordinator.restore():
            console.print("No stored pathway. Run `talent-pathfinder run` first.")
            return 1
        if command == "show":
            app.renderer().render()
            return 0
        return 0 if app.export(args.output) else 1

    try:
        return asyncio.run(app.run())
    except KeyboardInterrupt:
        console.print("\nBye.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
