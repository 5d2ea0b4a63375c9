"""
Profile Form Agent
Collects a learner profile into a draft, validates required fields, and hands
an immutable, normalized LearnerProfile to its caller.
"""

from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from pathfinder.models.profile import (
    EDUCATION_LEVELS,
    OTHER_CHOICE,
    SOCIO_ECONOMIC_CONTEXTS,
    DifficultyLevel,
    LearnerProfile,
    LearningPace,
    ProfileDraft,
    TalentCategory,
)
from pathfinder.utils.logger import get_logger

logger = get_logger(
    correlation_id="profile-form",
    phase="form",
    component="profile_form",
)

NAME_REQUIRED = "Name is required."
FIELD_REQUIRED = "Subject/Trade is required."
SPORT_REQUIRED = "Preferred Sport is required."
GOAL_REQUIRED = "Goal is required."
OTHER_REQUIRED = "Please specify."


class ProfileForm:
    """Draft state plus presence validation for a learner profile."""

    def __init__(self, draft: Optional[ProfileDraft] = None):
        self.draft = draft or ProfileDraft()
        self.errors: dict[str, str] = {}

    def update(self, field: str, value) -> None:
        """Set one draft field and clear its error, as typing into a form does."""
        if field not in ProfileDraft.model_fields:
            raise KeyError(f"Unknown profile field: {field}")
        setattr(self.draft, field, value)
        self.errors.pop(field, None)

    def field_label(self) -> str:
        """Label for field_of_study, which depends on the talent category."""
        if self.draft.talent_category == TalentCategory.SPORTS:
            return "Preferred Sport"
        return "Subject/Trade"

    def validate(self) -> dict[str, str]:
        """
        Check required fields.

        Returns:
            Mapping of draft field name to error message; empty when valid
        """
        draft = self.draft
        errors: dict[str, str] = {}

        if not draft.name.strip():
            errors["name"] = NAME_REQUIRED
        if not draft.field_of_study.strip():
            errors["field_of_study"] = (
                SPORT_REQUIRED
                if draft.talent_category == TalentCategory.SPORTS
                else FIELD_REQUIRED
            )
        if not draft.career_aspirations.strip():
            errors["career_aspirations"] = GOAL_REQUIRED
        if draft.education_level == OTHER_CHOICE and not draft.education_level_other.strip():
            errors["education_level_other"] = OTHER_REQUIRED
        if (
            draft.socio_economic_context == OTHER_CHOICE
            and not draft.socio_economic_context_other.strip()
        ):
            errors["socio_economic_context_other"] = OTHER_REQUIRED

        self.errors = errors
        return errors

    def to_profile(self) -> LearnerProfile:
        """
        Build the normalized profile. "Other" choices are replaced by their
        free-text values.

        Raises:
            ValueError: If the draft does not validate
        """
        errors = self.validate()
        if errors:
            raise ValueError(f"Profile has {len(errors)} invalid field(s)")

        draft = self.draft
        education = (
            draft.education_level_other.strip()
            if draft.education_level == OTHER_CHOICE
            else draft.education_level
        )
        context = (
            draft.socio_economic_context_other.strip()
            if draft.socio_economic_context == OTHER_CHOICE
            else draft.socio_economic_context
        )
        return LearnerProfile(
            name=draft.name.strip(),
            education_level=education,
            field_of_study=draft.field_of_study.strip(),
            prior_skills=draft.prior_skills.strip(),
            socio_economic_context=context,
            learning_pace=draft.learning_pace,
            difficulty_level=draft.difficulty_level,
            career_aspirations=draft.career_aspirations.strip(),
            talent_category=draft.talent_category,
        )

    def submit(self, on_submit: Callable[[LearnerProfile], None]) -> bool:
        """
        Validate and, when valid, pass the profile to ``on_submit``.

        Returns:
            True if the profile was submitted, False if submission was blocked
        """
        errors = self.validate()
        if errors:
            logger.info("Profile submission blocked", invalid_fields=sorted(errors))
            return False

        profile = self.to_profile()
        logger.info(
            "Profile submitted",
            talent_category=profile.talent_category,
            skills_length=len(profile.prior_skills),
        )
        on_submit(profile)
        return True


def _choose(prompt: str, choices: list[str], default: str) -> str:
    return Prompt.ask(prompt, choices=choices, default=default)


def collect_profile(console: Optional[Console] = None) -> LearnerProfile:
    """
    Fill a ProfileForm interactively, re-asking fields until it validates.

    Returns:
        The submitted LearnerProfile
    """
    console = console or Console()
    form = ProfileForm()

    console.print("\n[bold]Learner Profile[/bold]\n")
    form.update(
        "talent_category",
        TalentCategory(
            _choose(
                "Talent category",
                [c.value for c in TalentCategory],
                TalentCategory.ACADEMIC.value,
            )
        ),
    )
    form.update("name", Prompt.ask("Name", default=""))
    form.update(
        "education_level",
        _choose("Education level", EDUCATION_LEVELS, form.draft.education_level),
    )
    if form.draft.education_level == OTHER_CHOICE:
        form.update("education_level_other", Prompt.ask("Specify education level", default=""))
    form.update("field_of_study", Prompt.ask(form.field_label(), default=""))
    form.update("prior_skills", Prompt.ask("Skills and talents", default=""))
    form.update(
        "socio_economic_context",
        _choose("Context", SOCIO_ECONOMIC_CONTEXTS, form.draft.socio_economic_context),
    )
    if form.draft.socio_economic_context == OTHER_CHOICE:
        form.update(
            "socio_economic_context_other", Prompt.ask("Specify context", default="")
        )
    form.update(
        "learning_pace",
        LearningPace(
            _choose("Learning pace", [p.value for p in LearningPace], LearningPace.MEDIUM.value)
        ),
    )
    form.update(
        "difficulty_level",
        DifficultyLevel(
            _choose(
                "Difficulty",
                [d.value for d in DifficultyLevel],
                DifficultyLevel.BEGINNER.value,
            )
        ),
    )
    form.update("career_aspirations", Prompt.ask("Goal", default=""))

    prompts = {
        "name": lambda: Prompt.ask("Name"),
        "field_of_study": lambda: Prompt.ask(form.field_label()),
        "career_aspirations": lambda: Prompt.ask("Goal"),
        "education_level_other": lambda: Prompt.ask("Specify education level"),
        "socio_economic_context_other": lambda: Prompt.ask("Specify context"),
    }

    submitted: list[LearnerProfile] = []
    while not form.submit(submitted.append):
        for field, message in list(form.errors.items()):
            console.print(f"[red]{message}[/red]")
            form.update(field, prompts[field]())

    return submitted[0]
