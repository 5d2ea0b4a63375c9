"""
Shared fixtures for unit tests: a sample learner, canned generator output and
a fake generation service.
"""

import copy
import json

import pytest

from pathfinder.models.pathway import SearchResult, Source, TrainingPathway
from pathfinder.models.profile import LearnerProfile
from pathfinder.utils.errors import SearchError


def make_step(number: int, step_type: str = "Course", resources: int = 2) -> dict:
    return {
        "step": number,
        "title": f"Step title {number}",
        "description": f"Description for step {number}.",
        "nsqfLevel": f"Level {number + 2}",
        "duration": f"{number} months",
        "type": step_type,
        "costType": "Free",
        "learningResources": [
            {"label": f"Resource {number}-{i}", "url": f"example.gov.in/{number}/{i}"}
            for i in range(1, resources + 1)
        ],
    }


PATHWAY_DATA = {
    "summary": "Asha, your hands-on aptitude suits electronics servicing.",
    "recommendedRole": "Electronics Technician",
    "skillsFeedback": "Strong troubleshooting instinct and patience.",
    "skillGapAnalysis": {
        "matchingSkills": ["Soldering", "Basic circuits"],
        "criticalGaps": ["Digital multimeter use"],
        "summary": "Close the instrumentation gap first.",
    },
    "futureProspects": [
        {
            "role": "Field Service Technician",
            "description": "Install and repair consumer electronics.",
            "estimatedPackage": "INR 2.4 - 3.6 LPA",
            "growthPotential": "High",
        },
        {
            "role": "Service Centre Lead",
            "description": "Supervise a small repair team.",
            "estimatedPackage": "INR 4 - 6 LPA",
            "growthPotential": "Medium",
        },
    ],
    "pathway": [make_step(3), make_step(1, "Certification"), make_step(2, "Apprenticeship")],
}


@pytest.fixture
def pathway_data() -> dict:
    return copy.deepcopy(PATHWAY_DATA)


@pytest.fixture
def pathway_json(pathway_data) -> str:
    return json.dumps(pathway_data)


@pytest.fixture
def pathway(pathway_data) -> TrainingPathway:
    return TrainingPathway.model_validate(pathway_data).sorted_by_step()


@pytest.fixture
def profile() -> LearnerProfile:
    return LearnerProfile(
        name="Asha",
        education_level="12th Pass",
        field_of_study="Electronics",
        prior_skills="Repairing radios",
        socio_economic_context="Rural",
        learning_pace="medium",
        difficulty_level="Beginner",
        career_aspirations="Become a technician",
        talent_category="Academic/Vocational",
    )


class FakeGenerator:
    """Generation service double returning canned results."""

    def __init__(self, pathway=None, error=None, search_result=None, search_error=False):
        self.pathway = pathway
        self.error = error
        self.search_result = search_result or SearchResult(
            text="Admissions open in November.",
            sources=[Source(title="NCVET", uri="https://ncvet.gov.in")],
            source_type="Grounded Live Update",
            timestamp="17 Oct 2026, 02:30 pm",
        )
        self.search_error = search_error
        self.generate_calls = []
        self.search_calls = []

    async def generate_pathway(self, profile):
        self.generate_calls.append(profile)
        if self.error is not None:
            raise self.error
        return self.pathway

    async def search_course_updates(self, label, role):
        self.search_calls.append((label, role))
        if self.search_error:
            raise SearchError()
        return self.search_result


@pytest.fixture
def fake_generator(pathway) -> FakeGenerator:
    return FakeGenerator(pathway=pathway)


@pytest.fixture
def generator_factory():
    """Build FakeGenerator instances with custom behaviour."""
    return FakeGenerator
