"""
LLM Helpers Module

The single I/O boundary to the language model. Every model call in the
application goes through ``call_llm``; prompts are rendered from templates by
the callers, never inlined here.

Example Usage:
    from pathfinder.utils.llm_helpers import call_llm, extract_json_from_markdown

    response = await call_llm(
        prompt,
        system_prompt=system_prompt,
        api_key=api_key,
        timeout_seconds=180,
    )
    data = json.loads(extract_json_from_markdown(response))

No retries: a failure surfaces immediately to the caller.
"""

import asyncio
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an expert career analyst. Respond directly to user prompts "
    "with the requested analysis."
)


class LLMCallError(Exception):
    """The model call failed, returned an error result, or returned nothing."""


def extract_json_from_markdown(response_text: str) -> str:
    """Extract JSON from LLM response, removing markdown code block markers if present.

    Args:
        response_text: Raw text response from LLM

    Returns:
        Clean JSON string with code block markers removed
    """
    json_text = response_text.strip()

    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]

    if json_text.endswith("```"):
        json_text = json_text[:-3]

    return json_text.strip()


async def _collect_response(options, prompt: str) -> str:
    from claude_agent_sdk import ClaudeSDKClient

    response_text = ""
    async with ClaudeSDKClient(options=options) as client:
        await client.query(prompt)
        async for message in client.receive_response():
            if getattr(message, "is_error", False) is True:
                raise LLMCallError(
                    f"LLM returned error result: {getattr(message, 'subtype', 'unknown')}"
                )
            if hasattr(message, "content") and isinstance(message.content, list):
                for block in message.content:
                    text = getattr(block, "text", None)
                    if isinstance(text, str):
                        response_text += text
    return response_text


async def call_llm(
    prompt: str,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    allowed_tools: Optional[list[str]] = None,
    max_turns: int = 1,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    api_key_env: str = "ANTHROPIC_API_KEY",
    timeout_seconds: Optional[float] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """
    Send one prompt to the model and collect the text response.

    Args:
        prompt: The rendered prompt to send
        system_prompt: System instruction for the session
        allowed_tools: Tools the model may use (default: none)
        max_turns: Maximum agent turns (1 for plain generation)
        model: Model override, SDK default when None
        api_key: Credential passed to the SDK process environment
        api_key_env: Environment variable name for the credential
        timeout_seconds: Client-side bound on the whole call, None for no bound
        correlation_id: Optional correlation ID for logging

    Returns:
        LLM response text, stripped

    Raises:
        LLMCallError: If the model returned an error result or an empty response
        TimeoutError: If the call exceeded timeout_seconds
        Exception: SDK and transport errors propagate unchanged
    """
    from claude_agent_sdk import ClaudeAgentOptions

    log = logger.bind(correlation_id=correlation_id) if correlation_id else logger
    log.debug(
        "LLM call initiated",
        prompt_length=len(prompt),
        allowed_tools=allowed_tools or [],
        timeout_seconds=timeout_seconds,
    )

    option_kwargs = dict(
        max_turns=max_turns,
        allowed_tools=allowed_tools or [],
        system_prompt=system_prompt,
        setting_sources=None,  # Disable loading .claude/settings, CLAUDE.md, etc.
    )
    if model:
        option_kwargs["model"] = model
    if api_key:
        option_kwargs["env"] = {api_key_env: api_key}
    options = ClaudeAgentOptions(**option_kwargs)

    try:
        if timeout_seconds is None:
            response_text = await _collect_response(options, prompt)
        else:
            response_text = await asyncio.wait_for(
                _collect_response(options, prompt), timeout=timeout_seconds
            )
    except asyncio.TimeoutError as e:
        log.error("LLM call timed out", timeout_seconds=timeout_seconds)
        raise TimeoutError(f"LLM call exceeded {timeout_seconds}s") from e
    except Exception as e:
        log.error("LLM call failed", error=str(e), prompt_length=len(prompt))
        raise

    if not response_text.strip():
        log.error("LLM returned empty response")
        raise LLMCallError("LLM returned empty response")

    log.debug("LLM call succeeded", response_length=len(response_text))
    return response_text.strip()
