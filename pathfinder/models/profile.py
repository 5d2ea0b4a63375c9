"""
Learner Profile Data Models

The form works on a mutable ``ProfileDraft``; submission produces an immutable
``LearnerProfile`` with every "Other" choice resolved to its free-text value.
Wire names (storage, prompts) are camelCase, Python attribute names snake_case.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


OTHER_CHOICE = "Other"

EDUCATION_LEVELS = [
    "10th Pass",
    "12th Pass",
    "Diploma",
    "Undergraduate",
    "Graduate",
    "Postgraduate",
    OTHER_CHOICE,
]

SOCIO_ECONOMIC_CONTEXTS = ["Urban", "Semi-Urban", "Rural", OTHER_CHOICE]


class LearningPace(str, Enum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"


class DifficultyLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class TalentCategory(str, Enum):
    ACADEMIC = "Academic/Vocational"
    SPORTS = "Sports/Athletics"


class LearnerProfile(BaseModel):
    """Validated learner profile handed to the generation service.

    Attributes:
        name: Learner's name (non-empty)
        education_level: Resolved education level (never the literal "Other")
        field_of_study: Subject/trade, or preferred sport for sports talent
        prior_skills: Self-described skills, free text
        socio_economic_context: Resolved context (never the literal "Other")
        learning_pace: slow | medium | fast
        difficulty_level: Beginner | Intermediate | Advanced
        career_aspirations: Goal text (non-empty)
        talent_category: Academic/Vocational | Sports/Athletics
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
        validate_default=True,
    )

    name: str = Field(min_length=1)
    education_level: str
    field_of_study: str = Field(min_length=1)
    prior_skills: str = ""
    socio_economic_context: str
    learning_pace: LearningPace = LearningPace.MEDIUM
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    career_aspirations: str = Field(min_length=1)
    talent_category: TalentCategory = TalentCategory.ACADEMIC

    @property
    def is_sports(self) -> bool:
        return self.talent_category == TalentCategory.SPORTS.value

    def to_wire(self) -> dict:
        """Serialize with camelCase keys as stored and sent to the generator."""
        return self.model_dump(by_alias=True, mode="json")


class ProfileDraft(BaseModel):
    """Mutable form state before validation."""

    model_config = ConfigDict(validate_assignment=False)

    name: str = ""
    education_level: str = "12th Pass"
    education_level_other: str = ""
    field_of_study: str = ""
    prior_skills: str = ""
    socio_economic_context: str = "Urban"
    socio_economic_context_other: str = ""
    learning_pace: LearningPace = LearningPace.MEDIUM
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    career_aspirations: str = ""
    talent_category: TalentCategory = TalentCategory.ACADEMIC
