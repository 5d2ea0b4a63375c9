"""
Unit tests for prompt_loader module.
"""

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from pathfinder.utils.prompt_loader import (
    PromptLoader,
    get_default_loader,
    render_prompt,
)


class TestPromptLoader:
    """Test cases for PromptLoader class."""

    def test_initialization_with_default_path(self):
        """Test that PromptLoader initializes with the bundled template directory."""
        # Act
        loader = PromptLoader()

        # Assert
        assert loader.template_dir.name == "prompts"
        assert (loader.template_dir / "pathway" / "generate.j2").exists()

    def test_render_simple_template(self, tmp_path):
        """Test rendering a simple template with variables."""
        # Arrange
        (tmp_path / "test.j2").write_text("Hello {{ name }}!")
        loader = PromptLoader(template_dir=tmp_path)

        # Act
        result = loader.render("test.j2", name="Asha")

        # Assert
        assert result == "Hello Asha!"

    def test_missing_variable_raises(self, tmp_path):
        """Test that strict mode rejects undefined variables."""
        (tmp_path / "test.j2").write_text("Hello {{ name }}!")
        loader = PromptLoader(template_dir=tmp_path)

        with pytest.raises(UndefinedError):
            loader.render("test.j2")

    def test_missing_variable_allowed_when_not_strict(self, tmp_path):
        (tmp_path / "test.j2").write_text("Hello {{ name }}!")
        loader = PromptLoader(template_dir=tmp_path, strict_undefined=False)

        assert loader.render("test.j2") == "Hello !"

    def test_template_not_found(self, tmp_path):
        loader = PromptLoader(template_dir=tmp_path)

        with pytest.raises(TemplateNotFound):
            loader.render("missing.j2")

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_or_not_provided_filter_blank(self, tmp_path, value):
        """Test that blank free text renders as 'Not provided'."""
        (tmp_path / "test.j2").write_text("{{ skills | or_not_provided }}")
        loader = PromptLoader(template_dir=tmp_path)

        assert loader.render("test.j2", skills=value) == "Not provided"

    def test_or_not_provided_filter_keeps_text(self, tmp_path):
        (tmp_path / "test.j2").write_text("{{ skills | or_not_provided }}")
        loader = PromptLoader(template_dir=tmp_path)

        assert loader.render("test.j2", skills=" Soldering ") == "Soldering"


class TestBundledTemplates:
    """Test cases for the shipped prompt templates."""

    def test_generate_prompt_lists_profile(self, profile):
        """Test that the generation prompt carries every profile field."""
        # Act
        prompt = render_prompt(
            "pathway/generate.j2",
            profile=profile.to_wire(),
            is_sports=False,
            schema_json='{"type": "object"}',
        )

        # Assert
        assert "- Name: Asha" in prompt
        assert "- Field: Electronics" in prompt
        assert "- Learner's Unique Talents: Repairing radios" in prompt
        assert "- Context: Rural" in prompt
        assert "- Pace: medium" in prompt
        assert prompt.rstrip().endswith('{"type": "object"}')

    def test_generate_prompt_blank_skills(self, profile):
        blank = profile.model_copy(update={"prior_skills": ""})

        prompt = render_prompt(
            "pathway/generate.j2", profile=blank.to_wire(), is_sports=False, schema_json="{}"
        )

        assert "- Learner's Unique Talents: Not provided" in prompt

    def test_sports_system_prompt(self):
        """Test that the sports branch names SAI centres and trials."""
        prompt = render_prompt("pathway/system.j2", is_sports=True)

        assert "SAI regional centers" in prompt
        assert "Trial/Selection" in prompt
        assert "NSQF certified courses" not in prompt

    def test_search_prompt_quotes_label_and_role(self):
        prompt = render_prompt(
            "search/course_updates.j2", label="ITI Pusa", role="Electronics Technician"
        )

        assert '"ITI Pusa"' in prompt
        assert '"Electronics Technician"' in prompt

    def test_default_loader_is_shared(self):
        assert get_default_loader() is get_default_loader()
