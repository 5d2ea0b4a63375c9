"""
Pathway Export Agent
Lays out a TrainingPathway as a multi-page A4 PDF report with reportlab.

Layout is a single sequential pass with a running vertical cursor measured in
millimetres from the top of the page. Before drawing any block the cursor is
checked against the break limit and a new page is started when the block would
not fit. Footers ("Page i of N") are stamped in a second pass once the total
page count is known.
"""

import re
from pathlib import Path
from typing import NamedTuple, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from pathfinder.agents.pathway_reporting import growth_color, theme_color
from pathfinder.models.pathway import FutureProspect, TrainingPathway
from pathfinder.models.profile import LearnerProfile
from pathfinder.utils.errors import ExportError
from pathfinder.utils.logger import get_logger

PAGE_WIDTH_MM = A4[0] / mm
PAGE_HEIGHT_MM = A4[1] / mm
MARGIN = 20
BREAK_LIMIT = 275
FOOTER_Y = 288
CONTENT_WIDTH = PAGE_WIDTH_MM - 2 * MARGIN
LINE_HEIGHT = 5
COVER_VALUE_OFFSET = 45
CARD_INSET = 5
CARD_PAD_TOP = 8
CARD_PAD_BOTTOM = 2

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"

TEXT_DARK = (31, 41, 55)
TEXT_MUTED = (107, 114, 128)
LINK_BLUE = (37, 99, 235)
CARD_FILL = (249, 250, 251)
WHITE = (255, 255, 255)


class LayoutEntry(NamedTuple):
    page: int
    kind: str
    text: str


class CardRow(NamedTuple):
    text: str
    font: str
    size: float
    color: tuple
    advance: float


def ensure_full_url(url: str) -> str:
    """Prefix https:// when the URL has no scheme."""
    url = url.strip()
    if re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", url):
        return url
    return f"https://{url}"


def export_filename(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.strip())
    return f"AURA-SKILL-Strategy-{slug}.pdf"


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so every page can carry 'Page i of N'."""

    def __init__(self, *args, footer_label: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []
        self._footer_label = footer_label

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        text = (
            f"AURA SKILL Strategic Report | {self._footer_label} | "
            f"Page {self.getPageNumber()} of {total}"
        )
        self.setFont(REGULAR, 8)
        self.setFillColorRGB(*[c / 255 for c in TEXT_MUTED])
        self.drawCentredString(A4[0] / 2, A4[1] - FOOTER_Y * mm, text)


class PdfExporter:
    """Writes the strategic roadmap PDF for a learner."""

    def __init__(
        self,
        output_dir: Path | str = Path("output"),
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize exporter.

        Args:
            output_dir: Directory to write PDF files to (created on export)
            correlation_id: Correlation ID for logging
        """
        self.output_dir = Path(output_dir)
        self.layout: list[LayoutEntry] = []
        self.logger = get_logger(
            correlation_id=correlation_id, phase="export", component="pathway_export"
        )
        self._canvas: Optional[_NumberedCanvas] = None
        self._page = 1
        self._y = MARGIN

    def export(self, pathway: TrainingPathway, profile: LearnerProfile) -> Path:
        """
        Lay out and save the PDF.

        Args:
            pathway: Pathway to export
            profile: Profile that produced it

        Returns:
            Path of the written file

        Raises:
            ExportError: If layout or writing fails
        """
        path = self.output_dir / export_filename(profile.name)
        self.layout = []
        self._page = 1
        self._y = MARGIN

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._canvas = _NumberedCanvas(
                str(path), pagesize=A4, footer_label=profile.name
            )
            self._canvas.setTitle(f"AURA SKILL Strategy - {profile.name}")
            theme = theme_color(profile.talent_category)

            self._draw_cover(profile, theme)
            self._draw_summary(pathway, theme)
            self._new_page()
            self._draw_prospects(pathway, theme)
            self._new_page()
            self._draw_roadmap(pathway, theme)

            self._canvas.showPage()
            self._canvas.save()
        except Exception as e:
            self.logger.error("PDF export failed", error_type=type(e).__name__, error=str(e))
            raise ExportError(f"Failed to export PDF: {e}") from e
        finally:
            self._canvas = None

        self.logger.info(
            "PDF exported",
            path=str(path),
            page_count=self._page,
            step_count=len(pathway.pathway),
        )
        return path

    @property
    def page_count(self) -> int:
        return max((entry.page for entry in self.layout), default=0)

    # Drawing primitives

    def _pt_y(self, y_mm: float) -> float:
        return A4[1] - y_mm * mm

    def _record(self, kind: str, text: str) -> None:
        self.layout.append(LayoutEntry(self._page, kind, text))

    def _new_page(self) -> None:
        self._canvas.showPage()
        self._page += 1
        self._y = MARGIN
        self._record("page", str(self._page))

    def _ensure_space(self, height: float) -> None:
        if self._y + height > BREAK_LIMIT:
            self._new_page()

    def _fill(self, color) -> None:
        self._canvas.setFillColorRGB(*[c / 255 for c in color])

    def _text(
        self, text: str, x: float, font: str = REGULAR, size: float = 10, color=TEXT_DARK
    ) -> None:
        self._canvas.setFont(font, size)
        self._fill(color)
        self._canvas.drawString(x * mm, self._pt_y(self._y), text)

    def _wrapped(
        self,
        text: str,
        font: str = REGULAR,
        size: float = 10,
        width: float = CONTENT_WIDTH,
        x: float = MARGIN,
        color=TEXT_DARK,
    ) -> None:
        for line in simpleSplit(text or "", font, size, width * mm):
            self._ensure_space(LINE_HEIGHT)
            self._text(line, x, font, size, color)
            self._y += LINE_HEIGHT

    def _heading(self, text: str, theme) -> None:
        self._ensure_space(12)
        self._text(text, MARGIN, BOLD, 14, theme)
        self._record("heading", text)
        self._y += 8

    # Sections

    def _draw_cover(self, profile: LearnerProfile, theme) -> None:
        c = self._canvas
        self._record("page", "1")
        self._fill(theme)
        c.rect(0, self._pt_y(45), A4[0], 45 * mm, stroke=0, fill=1)

        self._y = 20
        self._text("AURA SKILL", MARGIN, BOLD, 24, WHITE)
        self._y = 30
        self._text("NCVET AI TALENT STRATEGIC ROADMAP", MARGIN, BOLD, 11, WHITE)
        self._y = 38
        self._text(f"Prepared for: {profile.name}", MARGIN, REGULAR, 10, WHITE)
        self._record("cover", profile.name)

        self._y = 60
        rows = [
            ("Talent Stream", profile.talent_category),
            ("Education Level", profile.education_level),
            ("Primary Interest", profile.field_of_study),
            ("Learning Pace", profile.learning_pace.capitalize()),
        ]
        for label, value in rows:
            self._ensure_space(LINE_HEIGHT)
            self._text(f"{label}:", MARGIN, BOLD, 10)
            self._wrapped(
                value or "-",
                x=MARGIN + COVER_VALUE_OFFSET,
                width=CONTENT_WIDTH - COVER_VALUE_OFFSET,
            )
            self._y += 2
        self._y += 5

    def _draw_summary(self, pathway: TrainingPathway, theme) -> None:
        self._heading("Executive Summary", theme)
        self._wrapped(pathway.recommended_role, font=BOLD, size=12)
        self._y += 2
        self._wrapped(pathway.summary)
        self._y += 6

        self._heading("Expert AI Analysis", theme)
        self._wrapped(pathway.skills_feedback)
        if pathway.skill_gap_analysis.summary:
            self._y += 3
            self._wrapped(pathway.skill_gap_analysis.summary, color=TEXT_MUTED)

    def _draw_prospects(self, pathway: TrainingPathway, theme) -> None:
        self._heading("Future Career Prospects", theme)
        for prospect in pathway.future_prospects:
            self._draw_prospect(prospect, theme)
            self._record("prospect", prospect.role)
            self._y += 5

    def _draw_prospect(self, prospect: FutureProspect, theme) -> None:
        growth = f"GROWTH: {prospect.growth_potential.upper()}"
        growth_width = stringWidth(growth, BOLD, 8) / mm
        inner = CONTENT_WIDTH - 2 * CARD_INSET
        salary = f"Expected Salary: {prospect.estimated_package}"
        rows = [
            CardRow(line, BOLD, 11, TEXT_DARK, 6)
            for line in simpleSplit(prospect.role, BOLD, 11, (inner - growth_width - 4) * mm)
        ]
        rows += [
            CardRow(line, REGULAR, 9, TEXT_MUTED, LINE_HEIGHT)
            for line in simpleSplit(prospect.description, REGULAR, 9, inner * mm)
        ]
        rows += [
            CardRow(line, BOLD, 9, theme, LINE_HEIGHT)
            for line in simpleSplit(salary, BOLD, 9, inner * mm)
        ]

        height = CARD_PAD_TOP + sum(row.advance for row in rows) + CARD_PAD_BOTTOM
        if height + 5 <= BREAK_LIMIT - MARGIN:
            # Whole card fits on a fresh page: keep it together
            self._ensure_space(height + 5)

        first_segment = True
        while rows:
            self._ensure_space(CARD_PAD_TOP + rows[0].advance)
            top = self._y
            segment = []
            cursor = top + CARD_PAD_TOP
            for row in rows:
                if segment and cursor > BREAK_LIMIT:
                    break
                segment.append(row)
                cursor += row.advance
            bottom = cursor + CARD_PAD_BOTTOM

            self._fill(CARD_FILL)
            self._canvas.roundRect(
                MARGIN * mm,
                self._pt_y(bottom),
                CONTENT_WIDTH * mm,
                (bottom - top) * mm,
                3 * mm,
                stroke=0,
                fill=1,
            )
            self._y = top + CARD_PAD_TOP
            if first_segment:
                growth_x = MARGIN + CONTENT_WIDTH - CARD_INSET - growth_width
                self._text(growth, growth_x, BOLD, 8, growth_color(prospect.growth_potential))
            for row in segment:
                self._text(row.text, MARGIN + CARD_INSET, row.font, row.size, row.color)
                self._y += row.advance

            self._y = bottom
            rows = rows[len(segment):]
            first_segment = False

    def _draw_roadmap(self, pathway: TrainingPathway, theme) -> None:
        self._heading("Your Official Step-by-Step Pathway", theme)
        for step in pathway.pathway:
            self._ensure_space(20)
            self._wrapped(f"Step {step.step}: {step.title}", font=BOLD, size=12, color=theme)
            self._record("step", str(step.step))
            self._y += 1
            self._wrapped(
                f"Type: {step.type} | Duration: {step.duration} | NSQF Level: {step.nsqf_level}",
                size=9,
                color=TEXT_MUTED,
            )
            self._y += 1
            self._wrapped(step.description, size=10)

            if step.learning_resources:
                self._y += 2
                self._ensure_space(LINE_HEIGHT)
                self._text("Official Government & Training Links:", MARGIN, BOLD, 9)
                self._y += LINE_HEIGHT
                for res in step.learning_resources:
                    self._link(f"• {res.label}", ensure_full_url(res.url))
                    self._record("link", res.label)
            self._y += 6

    def _link(self, label: str, url: str) -> None:
        x = MARGIN + 4
        for line in simpleSplit(label, REGULAR, 9, (CONTENT_WIDTH - 4) * mm):
            self._ensure_space(LINE_HEIGHT)
            self._text(line, x, REGULAR, 9, LINK_BLUE)
            y = self._pt_y(self._y)
            x2 = x * mm + stringWidth(line, REGULAR, 9)
            self._canvas.linkURL(url, (x * mm, y - 2, x2, y + 9), relative=0)
            self._y += LINE_HEIGHT
