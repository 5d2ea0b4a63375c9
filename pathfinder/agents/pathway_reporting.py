"""Pathway Reporting Agent.

Renders a TrainingPathway for the terminal with rich, and owns the display-only
state that goes with it: live-insight search results keyed by (step index,
resource index) and the direct-search links.

Step types map to presentation categories through a lookup table with an
explicit default, so step types the generator adds later still render.
"""

import webbrowser
from typing import Callable, NamedTuple, Optional
from urllib.parse import quote_plus

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pathfinder.agents.pathway_generator import PathwayGenerator
from pathfinder.models.config import SearchConfig
from pathfinder.models.pathway import LearningResource, SearchResult, TrainingPathway
from pathfinder.models.profile import LearnerProfile, TalentCategory
from pathfinder.utils.errors import SearchError
from pathfinder.utils.logger import get_logger

RGB = tuple[int, int, int]

ACADEMIC_THEME: RGB = (79, 70, 229)
SPORTS_THEME: RGB = (234, 88, 12)


class StepCategory(NamedTuple):
    name: str
    color: RGB


ATHLETIC = StepCategory("Athletic", SPORTS_THEME)
DEFAULT_CATEGORY = StepCategory("General", (75, 85, 99))

STEP_CATEGORIES: dict[str, StepCategory] = {
    "Athletic Coaching": ATHLETIC,
    "Fitness Training": ATHLETIC,
    "Trial/Selection": ATHLETIC,
    "Course": StepCategory("Course", ACADEMIC_THEME),
    "Certification": StepCategory("Certification", (5, 150, 105)),
    "Assessment": StepCategory("Assessment", (71, 85, 105)),
}

GROWTH_HIGH: RGB = (22, 163, 74)
GROWTH_OTHER: RGB = (217, 119, 6)

NSQF_BANDS = [
    ("1-3", "Entry level: foundational skills and basic trade knowledge"),
    ("4-6", "Skilled worker: independent practice, supervision of routine work"),
    ("7-10", "Advanced / professional: specialist, managerial and research roles"),
]

REFERENCE_PORTALS = [
    ("Skill India Digital", "https://www.skillindiadigital.gov.in"),
    ("NCVET", "https://ncvet.gov.in"),
    ("SAI (Sports Authority of India)", "https://sportsauthorityofindia.nic.in"),
    ("SWAYAM", "https://swayam.gov.in"),
]


def category_for(step_type: str) -> StepCategory:
    """Presentation category for a step type, default for unknown types."""
    return STEP_CATEGORIES.get(step_type, DEFAULT_CATEGORY)


def theme_color(talent_category: str) -> RGB:
    if talent_category == TalentCategory.SPORTS.value:
        return SPORTS_THEME
    return ACADEMIC_THEME


def growth_color(growth_potential: str) -> RGB:
    return GROWTH_HIGH if growth_potential == "High" else GROWTH_OTHER


def rgb_style(color: RGB, bold: bool = False) -> str:
    style = f"rgb({color[0]},{color[1]},{color[2]})"
    return f"bold {style}" if bold else style


def direct_search_url(
    label: str, role: str, search: Optional[SearchConfig] = None
) -> str:
    """Build the external search link for a resource; no network call."""
    search = search or SearchConfig()
    query = f"{search.site_filter} {label} {role}"
    return f"{search.search_url}{quote_plus(query)}"


class ResourceView(NamedTuple):
    step_index: int
    resource_index: int
    label: str
    url: str
    search_url: str


class PathwayRenderer:
    """Presentation over a pathway plus the profile that produced it."""

    def __init__(
        self,
        pathway: TrainingPathway,
        profile: LearnerProfile,
        generator: Optional[PathwayGenerator] = None,
        on_reset: Optional[Callable[[], None]] = None,
        search: Optional[SearchConfig] = None,
        console: Optional[Console] = None,
        open_url: Callable[[str], object] = webbrowser.open,
        correlation_id: Optional[str] = None,
    ):
        self.pathway = pathway
        self.profile = profile
        self.generator = generator
        self.on_reset = on_reset
        self.search = search or SearchConfig()
        self.console = console or Console()
        self.open_url = open_url
        self.search_results: dict[tuple[int, int], SearchResult] = {}
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="display",
            component="pathway_reporting",
        )

    @property
    def theme(self) -> RGB:
        return theme_color(self.profile.talent_category)

    def resource(self, step_index: int, resource_index: int) -> LearningResource:
        return self.pathway.pathway[step_index].learning_resources[resource_index]

    def resource_views(self) -> list[ResourceView]:
        """Every resource with its anchor and direct-search link, in display order."""
        views = []
        for step_index, step in enumerate(self.pathway.pathway):
            for resource_index, res in enumerate(step.learning_resources):
                views.append(
                    ResourceView(
                        step_index=step_index,
                        resource_index=resource_index,
                        label=res.label,
                        url=res.url,
                        search_url=direct_search_url(
                            res.label, self.pathway.recommended_role, self.search
                        ),
                    )
                )
        return views

    async def live_insight(self, step_index: int, resource_index: int) -> SearchResult:
        """
        Look up current information about one resource.

        The result (or its error state) replaces any earlier result under the
        same key. A loading entry is stored while the search runs.
        """
        key = (step_index, resource_index)
        res = self.resource(step_index, resource_index)
        if self.generator is None:
            raise RuntimeError("Live insight requires a pathway generator")

        self.search_results[key] = SearchResult(loading=True)
        try:
            result = await self.generator.search_course_updates(
                res.label, self.pathway.recommended_role
            )
        except SearchError as e:
            self.logger.warning(
                "Live insight failed", step_index=step_index, resource_index=resource_index
            )
            result = SearchResult(loading=False, error=str(e))
        except Exception as e:
            self.logger.exception(
                "Unexpected live insight error",
                step_index=step_index,
                resource_index=resource_index,
                error=str(e),
            )
            result = SearchResult(loading=False, error=str(SearchError()))
        self.search_results[key] = result
        return result

    def open_direct_search(self, step_index: int, resource_index: int) -> str:
        res = self.resource(step_index, resource_index)
        url = direct_search_url(res.label, self.pathway.recommended_role, self.search)
        self.open_url(url)
        return url

    def reset(self) -> None:
        self.search_results.clear()
        if self.on_reset is not None:
            self.on_reset()

    # Rendering

    def _header(self) -> Panel:
        theme = rgb_style(self.theme, bold=True)
        badge = Text(f" {self.profile.talent_category} ", style=f"reverse {theme}")
        body = Group(
            badge,
            Text(""),
            Text(self.pathway.recommended_role, style=theme),
            Text(self.pathway.summary),
        )
        return Panel(body, title=f"Roadmap for {self.profile.name}", border_style=theme)

    def _skills(self) -> Group:
        gaps = self.pathway.skill_gap_analysis
        strengths = Table(title="Strengths", show_header=False, box=None)
        for skill in gaps.matching_skills:
            strengths.add_row(Text(f"+ {skill}", style="green"))
        hurdles = Table(title="Critical Hurdles", show_header=False, box=None)
        for gap in gaps.critical_gaps:
            hurdles.add_row(Text(f"! {gap}", style="red"))
        return Group(
            Panel(self.pathway.skills_feedback, title="Expert Commentary"),
            strengths,
            hurdles,
            Text(gaps.summary, style="dim"),
        )

    def _prospects(self) -> Table:
        table = Table(title="Career Prospects")
        table.add_column("Role", style="bold")
        table.add_column("Description")
        table.add_column("Expected Package")
        table.add_column("Growth")
        for prospect in self.pathway.future_prospects:
            table.add_row(
                prospect.role,
                prospect.description,
                prospect.estimated_package,
                Text(
                    prospect.growth_potential,
                    style=rgb_style(growth_color(prospect.growth_potential), bold=True),
                ),
            )
        return table

    def _search_result_text(self, key: tuple[int, int]) -> Optional[Text]:
        result = self.search_results.get(key)
        if result is None:
            return None
        if result.loading:
            return Text("      Searching live sources...", style="italic")
        if result.error:
            return Text(f"      {result.error}", style="red")
        text = Text(f"      {result.source_type} ({result.timestamp})\n", style="dim")
        text.append(f"      {result.text}\n")
        for source in result.sources:
            text.append("      - ")
            text.append(source.title, style=f"link {source.uri}")
            text.append("\n")
        return text

    def _steps(self) -> list[Panel]:
        views = self.resource_views()
        panels = []
        for step_index, step in enumerate(self.pathway.pathway):
            category = category_for(step.type)
            style = rgb_style(category.color, bold=True)
            lines: list = [
                Text.assemble(
                    (f"{step.type}", style),
                    f"  |  {step.nsqf_level}  |  {step.duration}  |  Cost: {step.cost_type}",
                ),
            ]
            if step.cost_notes:
                lines.append(Text(step.cost_notes, style="dim"))
            lines.append(Text(step.description))
            if step.relevant_skills:
                lines.append(Text("Skills: " + ", ".join(step.relevant_skills), style="dim"))
            for view in (v for v in views if v.step_index == step_index):
                line = Text("  * ")
                line.append(view.label, style=f"underline link {view.url}")
                number = f"{view.step_index + 1}.{view.resource_index + 1}"
                line.append(f"  [insight {number}]", style="cyan")
                line.append("  ")
                line.append("[search]", style=f"cyan link {view.search_url}")
                lines.append(line)
                result_text = self._search_result_text((view.step_index, view.resource_index))
                if result_text is not None:
                    lines.append(result_text)
            panels.append(
                Panel(
                    Group(*lines),
                    title=f"Step {step.step}: {step.title}",
                    title_align="left",
                    border_style=rgb_style(category.color),
                )
            )
        return panels

    def render(self) -> None:
        self.console.print(self._header())
        self.console.print(self._skills())
        self.console.print(self._prospects())
        heading_style = rgb_style(self.theme, bold=True)
        self.console.print(Text("Your Step-by-Step Pathway", style=heading_style))
        for panel in self._steps():
            self.console.print(panel)
        self.logger.info(
            "Pathway rendered",
            step_count=len(self.pathway.pathway),
            resource_count=len(self.resource_views()),
        )


def render_guide(console: Optional[Console] = None) -> None:
    """Explain the app, the NSQF bands and the official reference portals."""
    console = console or Console()
    console.print(
        Panel(
            "AURA SKILL maps your talents to an official training pathway aligned "
            "with the National Skills Qualifications Framework (NSQF) and Indian "
            "sports development programmes.",
            title="How it works",
        )
    )
    bands = Table(title="NSQF Levels")
    bands.add_column("Levels")
    bands.add_column("Meaning")
    for levels, meaning in NSQF_BANDS:
        bands.add_row(levels, meaning)
    console.print(bands)
    portals = Table(title="Reference Portals", show_header=False)
    for name, url in REFERENCE_PORTALS:
        portals.add_row(Text(name, style=f"link {url}"), url)
    console.print(portals)
