"""Generation service — asks an LLM for a journey map draft.

The service only fetches and parses. Its output is untrusted and goes
through `journeymap.merger.merge_draft` before touching any draft.
"""

import logging
from pathlib import Path
from typing import Any, Protocol

import anthropic
import yaml
from jinja2 import Environment, StrictUndefined

from journeymap.config import LLMConfig
from journeymap.errors import GenerationFailed, ValidationError
from journeymap.merger import parse_generation_text
from journeymap.models import GenerationContext, JobType

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"

MIN_STEPS = 5
MAX_STEPS = 8

JOB_TYPE_HINTS = {
    JobType.FUNCTIONAL: "getting something done",
    JobType.SOCIAL: "how others perceive them",
    JobType.EMOTIONAL: "how they want to feel",
}

_jinja = Environment(undefined=StrictUndefined, keep_trailing_newline=True)


class GenerationService(Protocol):
    async def generate(self, context: GenerationContext) -> dict[str, Any]:
        """Return a raw journey map draft. Raises GenerationFailed."""
        ...


def render_prompt(prompt_path: Path, **variables: Any) -> tuple[str, str]:
    """Render the `system` and `user` templates of a prompt file."""
    raw = yaml.safe_load(prompt_path.read_text())
    system = _jinja.from_string(raw["system"]).render(**variables).strip()
    user = _jinja.from_string(raw["user"]).render(**variables).strip()
    return system, user


def build_messages(context: GenerationContext) -> tuple[str, list[dict[str, str]]]:
    """System prompt and message list for a generation request."""
    if not context.job.is_complete:
        raise ValidationError("Complete Job to be Done information is required")

    system, user = render_prompt(
        PROMPTS_DIR / "journey_map.yaml",
        job=context.job,
        job_type_hint=JOB_TYPE_HINTS[context.job.type],
        idea_title=context.idea_title,
        idea_description=context.idea_description,
        vision=context.vision,
        business_model=context.business_model,
        min_steps=MIN_STEPS,
        max_steps=MAX_STEPS,
    )
    return system, [{"role": "user", "content": user}]


class AnthropicGenerationService:
    """Generation service backed by the Anthropic messages API."""

    def __init__(
        self,
        config: LLMConfig,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic()
        return self._client

    async def generate(self, context: GenerationContext) -> dict[str, Any]:
        system, messages = build_messages(context)
        logger.info("Requesting journey map draft from %s", self.config.model)

        try:
            message = await self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=system,
                messages=messages,
                timeout=self.config.timeout,
            )
        except anthropic.APIError as e:
            logger.error("Journey map generation failed: %s", e)
            raise GenerationFailed(f"Failed to generate journey map: {e}", cause=e) from e

        text_blocks = [b.text for b in message.content if getattr(b, "type", None) == "text"]
        if not text_blocks:
            raise GenerationFailed("Unexpected response format: no text content")

        usage = getattr(message, "usage", None)
        if usage is not None:
            logger.info(
                "Generation usage: %s input tokens, %s output tokens",
                usage.input_tokens, usage.output_tokens,
            )
        return parse_generation_text(text_blocks[0])
