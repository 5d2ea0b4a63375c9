"""Training pathway data models returned by the generation service."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# Closed enumerations from the output schema. Values outside these sets are
# accepted (logged as warnings) so new upstream values render with a fallback.
STEP_TYPES = [
    "Course",
    "Certification",
    "On-the-Job Training",
    "Micro-credential",
    "Assessment",
    "Apprenticeship",
    "Internship",
    "Workshop",
    "Online Module",
    "Athletic Coaching",
    "Fitness Training",
    "Trial/Selection",
]
COST_TYPES = ["Free", "Paid", "Mixed"]
GROWTH_POTENTIALS = ["High", "Medium", "Low"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LearningResource(_WireModel):
    label: str
    url: str


class PathwayStep(_WireModel):
    """One ordered unit of the roadmap.

    Attributes:
        step: Positive step number (1..N)
        title: Step title
        description: What the learner does in this step
        nsqf_level: Free-form NSQF level label (e.g. "Level 4")
        duration: Free-form duration (e.g. "3 months")
        type: Step category, normally one of STEP_TYPES
        cost_type: Free | Paid | Mixed
        cost_notes: Optional note on fees or scholarships
        learning_resources: Ordered list of links
        relevant_skills: Optional skills the step builds
    """

    step: int = Field(gt=0)
    title: str
    description: str
    nsqf_level: str
    duration: str
    type: str
    cost_type: str
    cost_notes: Optional[str] = None
    learning_resources: list[LearningResource] = Field(default_factory=list)
    relevant_skills: Optional[list[str]] = None


class SkillGapAnalysis(_WireModel):
    matching_skills: list[str] = Field(default_factory=list)
    critical_gaps: list[str] = Field(default_factory=list)
    summary: str = ""

    @model_validator(mode="before")
    @classmethod
    def normalize_gaps(cls, data: Any) -> Any:
        """Accept ``missingSkills`` as the same concept as ``criticalGaps``."""
        if not isinstance(data, dict):
            return data
        gaps = data.get("criticalGaps") or data.get("critical_gaps")
        missing = data.get("missingSkills") or data.get("missing_skills")
        if not gaps and missing:
            data = {
                k: v
                for k, v in data.items()
                if k not in ("missingSkills", "missing_skills", "critical_gaps")
            }
            data["criticalGaps"] = missing
        else:
            data = {
                k: v for k, v in data.items() if k not in ("missingSkills", "missing_skills")
            }
        return data


class FutureProspect(_WireModel):
    role: str
    description: str
    estimated_package: str
    growth_potential: str


class TrainingPathway(_WireModel):
    """Structured roadmap produced wholesale by the generation service."""

    summary: str
    recommended_role: str
    skills_feedback: str
    skill_gap_analysis: SkillGapAnalysis
    future_prospects: list[FutureProspect] = Field(default_factory=list)
    pathway: list[PathwayStep] = Field(min_length=1)

    def sorted_by_step(self) -> "TrainingPathway":
        """Return a copy with steps ordered ascending by step number."""
        return self.model_copy(
            update={"pathway": sorted(self.pathway, key=lambda s: s.step)}
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Source(BaseModel):
    title: str
    uri: str


class SearchResult(BaseModel):
    """Ephemeral live-insight result for one (step index, resource index) key."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    sources: list[Source] = Field(default_factory=list)
    source_type: str = Field(default="", alias="sourceType")
    timestamp: str = ""
    loading: bool = False
    error: Optional[str] = None
