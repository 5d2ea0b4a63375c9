"""
Integration Test Configuration

Provides fixtures and configuration for integration tests.
When running in CI environment (CI=true), slow tests are automatically skipped.
Tests marked ``live`` call the real generation service and are skipped when
no API key is available.
"""

import os

import pytest

from pathfinder.models.profile import LearnerProfile


@pytest.fixture
def is_ci_environment() -> bool:
    """
    Detect if tests are running in CI environment.

    Returns:
        True if CI environment variable is set to 'true'
    """
    return os.getenv("CI", "").lower() == "true"


@pytest.fixture(autouse=True)
def skip_slow_tests_in_ci(request, is_ci_environment):
    """
    Automatically skip slow integration tests when running in CI.

    Args:
        request: pytest request fixture
        is_ci_environment: Fixture indicating CI environment
    """
    if is_ci_environment and request.node.get_closest_marker("slow"):
        pytest.skip("Skipping slow test in CI environment")


@pytest.fixture(autouse=True)
def skip_live_tests_without_key(request):
    """Skip tests that need the real service when no key is configured."""
    if request.node.get_closest_marker("live") and not os.getenv("ANTHROPIC_API_KEY"):
        pytest.skip("ANTHROPIC_API_KEY not set")


@pytest.fixture
def academic_profile() -> LearnerProfile:
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


@pytest.fixture
def sports_profile() -> LearnerProfile:
    return LearnerProfile(
        name="Ravi",
        education_level="10th Pass",
        field_of_study="Sprinting",
        prior_skills="District 100m finalist",
        socio_economic_context="Semi-Urban",
        learning_pace="fast",
        difficulty_level="Intermediate",
        career_aspirations="Compete at national level",
        talent_category="Sports/Athletics",
    )
