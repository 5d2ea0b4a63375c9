"""
Pathway Generator Agent
Turns a learner profile into a structured training pathway, and runs grounded
live searches for individual learning resources.

The rest of the application depends only on the ``PathwayGenerator`` protocol,
so tests substitute a fake that returns canned JSON.
"""

import json
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from pydantic import ValidationError

from pathfinder.models.config import GenerationConfig, SearchConfig
from pathfinder.models.pathway import SearchResult, Source, TrainingPathway
from pathfinder.models.profile import LearnerProfile
from pathfinder.utils.credential_manager import CredentialManager
from pathfinder.utils.errors import PathwayParseError, PathwayServiceError, SearchError
from pathfinder.utils.llm_helpers import call_llm, extract_json_from_markdown
from pathfinder.utils.logger import get_logger
from pathfinder.utils.prompt_loader import render_prompt
from pathfinder.utils.validator import PATHWAY_SCHEMA, SchemaValidator

MISSING_KEY_MESSAGE = (
    "The API key is not configured. Please check your environment settings."
)
GENERATION_FAILED_MESSAGE = "Failed to map your talents to a pathway. Please try again."
SEARCH_FAILED_MESSAGE = "Live search failed."
GROUNDED_SOURCE_TYPE = "Grounded Live Update"
SEARCH_TOOLS = ["WebSearch"]


class PathwayGenerator(Protocol):
    """Narrow interface to the external generation service."""

    async def generate_pathway(self, profile: LearnerProfile) -> TrainingPathway: ...

    async def search_course_updates(self, label: str, role: str) -> SearchResult: ...


def format_search_timestamp(moment: datetime) -> str:
    """Format like '17 Oct 2026, 02:30 pm'."""
    return moment.strftime("%d %b %Y, %I:%M ") + moment.strftime("%p").lower()


def parse_pathway_response(
    response_text: str,
    validator: SchemaValidator,
    correlation_id: Optional[str] = None,
) -> TrainingPathway:
    """
    Parse and validate the raw generation response.

    Args:
        response_text: Model output, optionally wrapped in a markdown code fence
        validator: Schema validator holding the pathway schema
        correlation_id: Optional correlation ID for logging

    Returns:
        TrainingPathway with steps sorted ascending by step number

    Raises:
        PathwayParseError: If the output is not JSON or is structurally invalid
    """
    logger = get_logger(
        correlation_id=correlation_id, phase="generation", component="pathway_parser"
    )

    try:
        data = json.loads(extract_json_from_markdown(response_text))
    except json.JSONDecodeError as e:
        logger.error(
            "Failed to parse JSON from LLM response",
            error=str(e),
            response_length=len(response_text),
        )
        raise PathwayParseError(
            "The AI returned a response that could not be read. Please try again."
        ) from e

    validator.validate_pathway(data)

    try:
        pathway = TrainingPathway.model_validate(data)
    except ValidationError as e:
        logger.error("Pathway failed model validation", error=str(e)[:300])
        raise PathwayParseError(
            "The AI returned an incomplete pathway. Please try again."
        ) from e

    pathway = pathway.sorted_by_step()

    numbers = [s.step for s in pathway.pathway]
    if numbers != list(range(1, len(numbers) + 1)):
        logger.warning("Pathway step numbering is not dense from 1", steps=numbers)

    return pathway


class ClaudePathwayGenerator:
    """Pathway generator backed by the Claude agent SDK."""

    def __init__(
        self,
        credentials: Optional[CredentialManager] = None,
        generation: Optional[GenerationConfig] = None,
        search: Optional[SearchConfig] = None,
        validator: Optional[SchemaValidator] = None,
        clock: Callable[[], datetime] = datetime.now,
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize the generator.

        Args:
            credentials: Credential source, read at call time
            generation: Generation call settings
            search: Live search settings
            validator: Schema validator for responses
            clock: Time source for search timestamps
            correlation_id: Correlation ID for logging
        """
        self.generation = generation or GenerationConfig()
        self.search = search or SearchConfig()
        self.credentials = credentials or CredentialManager(
            api_key_env=self.generation.api_key_env
        )
        self.validator = validator or SchemaValidator()
        self.clock = clock
        self.correlation_id = correlation_id
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="generation",
            component="pathway_generator",
        )

    def build_prompts(self, profile: LearnerProfile) -> tuple[str, str]:
        """Render (system_prompt, prompt) for a profile."""
        variables: dict[str, Any] = {
            "profile": profile.to_wire(),
            "is_sports": profile.is_sports,
        }
        system_prompt = render_prompt(
            "pathway/system.j2", correlation_id=self.correlation_id, **variables
        )
        prompt = render_prompt(
            "pathway/generate.j2",
            correlation_id=self.correlation_id,
            schema_json=self.validator.schema_text(PATHWAY_SCHEMA),
            **variables,
        )
        return system_prompt, prompt

    async def generate_pathway(self, profile: LearnerProfile) -> TrainingPathway:
        """
        Generate a training pathway for a learner.

        Args:
            profile: Validated learner profile

        Returns:
            TrainingPathway with steps sorted by step number

        Raises:
            PathwayServiceError: Missing credential, upstream failure or timeout
            PathwayParseError: Unparsable or structurally invalid output
        """
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise PathwayServiceError(MISSING_KEY_MESSAGE)

        system_prompt, prompt = self.build_prompts(profile)
        self.logger.info(
            "Generating pathway",
            talent_category=profile.talent_category,
            prompt_length=len(prompt),
        )

        try:
            response = await call_llm(
                prompt,
                system_prompt=system_prompt,
                max_turns=self.generation.max_turns,
                model=self.generation.model,
                api_key=api_key,
                api_key_env=self.generation.api_key_env,
                timeout_seconds=self.generation.timeout_seconds,
                correlation_id=self.correlation_id,
            )
        except Exception as e:
            self.logger.error(
                "Pathway generation call failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            raise PathwayServiceError(GENERATION_FAILED_MESSAGE) from e

        pathway = parse_pathway_response(response, self.validator, self.correlation_id)
        self.logger.info(
            "Pathway generated",
            step_count=len(pathway.pathway),
            prospect_count=len(pathway.future_prospects),
        )
        return pathway

    async def search_course_updates(self, label: str, role: str) -> SearchResult:
        """
        Run a grounded web search about one learning resource.

        Args:
            label: Resource label (academy, portal, course)
            role: Recommended role the learner is targeting

        Returns:
            SearchResult with text, cited sources and a localized timestamp

        Raises:
            SearchError: On any failure
        """
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise SearchError(SEARCH_FAILED_MESSAGE)

        try:
            prompt = render_prompt(
                "search/course_updates.j2",
                correlation_id=self.correlation_id,
                label=label,
                role=role,
            )
            response = await call_llm(
                prompt,
                allowed_tools=SEARCH_TOOLS,
                max_turns=self.search.max_turns,
                model=self.generation.model,
                api_key=api_key,
                api_key_env=self.generation.api_key_env,
                timeout_seconds=self.search.timeout_seconds,
                correlation_id=self.correlation_id,
            )
            data = json.loads(extract_json_from_markdown(response))
            if not isinstance(data, dict) or not isinstance(data.get("text"), str):
                raise ValueError("search response lacks text")
            sources = [
                Source(title=str(s["title"]), uri=str(s["uri"]))
                for s in data.get("sources") or []
                if isinstance(s, dict) and s.get("title") and s.get("uri")
            ]
            result = SearchResult(
                text=data["text"],
                sources=sources,
                source_type=GROUNDED_SOURCE_TYPE,
                timestamp=format_search_timestamp(self.clock()),
            )
        except Exception as e:
            self.logger.warning(
                "Live search failed", error_type=type(e).__name__, error=str(e)
            )
            raise SearchError(SEARCH_FAILED_MESSAGE) from e

        self.logger.info("Live search complete", source_count=len(sources))
        return result
