"""
Generation Service - Structured LLM Output

Defines the interface every planning stage uses to ask a language model
for schema-conforming JSON, and the pydantic-ai backed implementation.

One service instance is built per planning request; the provider it
wraps is fixed for the whole run. The service never retries: a call
error, an empty response, or a schema mismatch raises GenerationFailure
naming the stage, and the request fails.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ValidationError
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model

from config.settings import get_settings
from src.utils.logger import setup_logger
from src.utils.schema_validation import get_stage_schema, validate_stage_output

logger = setup_logger(__name__)


class GenerationService(ABC):
    """
    Abstract structured-generation backend.

    Implementations return an instance of the stage's registered output
    model (see src.utils.schema_validation.STAGE_SCHEMAS).
    """

    provider: str = "unknown"

    @abstractmethod
    async def _generate(
        self,
        stage: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float
    ) -> Any:
        """Run one model call and return its raw output (model, dict or JSON text)."""

    async def generate_structured(
        self,
        stage: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float
    ) -> BaseModel:
        """
        Generate and validate the output of one pipeline stage.

        Args:
            stage: Stage name; selects the output schema
            system_prompt: Instructions for the model
            user_prompt: Stage inputs rendered as text
            temperature: Sampling temperature for this stage

        Returns:
            Validated instance of the stage's output model

        Raises:
            GenerationFailure: The call failed or returned nothing usable
            SchemaValidationFailure: The output did not match the stage schema
        """
        schema = get_stage_schema(stage)
        logger.info(
            f"Generating '{schema.name}' v{schema.version} for stage '{stage}' "
            f"(provider={self.provider}, temperature={temperature})"
        )

        try:
            raw = await self._generate(stage, system_prompt, user_prompt, temperature)
        except GenerationFailure:
            raise
        except ValidationError as e:
            raise SchemaValidationFailure(stage, str(e), {"schema": schema.name}) from e
        except AgentRunError as e:
            raise GenerationFailure(stage, str(e), {"provider": self.provider}) from e
        except Exception as e:
            raise GenerationFailure(
                stage,
                f"{type(e).__name__}: {e}",
                {"provider": self.provider}
            ) from e

        try:
            output = validate_stage_output(stage, raw)
        except ValidationError as e:
            raise SchemaValidationFailure(
                stage,
                f"Output does not match '{schema.name}': {e.error_count()} error(s)",
                {"schema": schema.name, "errors": e.errors(include_url=False)}
            ) from e
        except ValueError as e:
            raise GenerationFailure(stage, str(e), {"provider": self.provider}) from e

        logger.debug(f"Stage '{stage}' produced valid '{schema.name}' output")
        return output


class PydanticAIGenerationService(GenerationService):
    """
    Generation backend built on pydantic-ai Agents.

    A fresh Agent is created per call so each stage gets its own system
    prompt and output type; the model object itself is shared.
    """

    def __init__(
        self,
        model: Union[str, Model],
        provider: str = "openai",
        output_retries: Optional[int] = None
    ):
        """
        Args:
            model: pydantic-ai model id (e.g. "openai:gpt-4o") or Model instance
            provider: Provider label used in logs and errors
            output_retries: Validation retries inside pydantic-ai; defaults to settings
        """
        settings = get_settings()
        self.model = model
        self.provider = provider
        self.output_retries = (
            settings.GENERATION_OUTPUT_RETRIES if output_retries is None else output_retries
        )

        from src.utils.logfire_config import instrument_agents
        instrument_agents()

        logger.info(f"PydanticAIGenerationService initialized (provider={provider})")

    async def _generate(
        self,
        stage: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float
    ) -> Any:
        output_type = get_stage_schema(stage).model
        agent = Agent(
            model=self.model,
            output_type=output_type,
            system_prompt=system_prompt,
            retries=self.output_retries,
            output_retries=self.output_retries,
        )
        result = await agent.run(user_prompt, model_settings={"temperature": temperature})
        if result.output is None:
            raise GenerationFailure(stage, "No output returned from model")
        return result.output


def _build_model(provider: str) -> Model:
    """Create the pydantic-ai model for a provider from settings."""
    settings = get_settings()

    if provider == "gemini":
        from pydantic_ai.models.google import GoogleModel
        from pydantic_ai.providers.google import GoogleProvider

        google_provider = GoogleProvider(api_key=settings.GEMINI_API_KEY) if settings.GEMINI_API_KEY else GoogleProvider()
        return GoogleModel(settings.GEMINI_TEXT_MODEL, provider=google_provider)

    if provider == "openai":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openai import OpenAIProvider

        openai_provider = OpenAIProvider(api_key=settings.OPENAI_API_KEY) if settings.OPENAI_API_KEY else OpenAIProvider()
        return OpenAIChatModel(settings.OPENAI_TEXT_MODEL, provider=openai_provider)

    raise ValueError(f"Unknown generation provider '{provider}'. Use 'openai' or 'gemini'.")


def build_generation_service(provider: Optional[str] = None) -> GenerationService:
    """
    Build the generation service for one planning request.

    Args:
        provider: "openai" or "gemini"; defaults to settings.GENERATION_PROVIDER

    Returns:
        GenerationService bound to that provider for the whole run
    """
    provider = (provider or get_settings().GENERATION_PROVIDER).strip().lower()
    return PydanticAIGenerationService(_build_model(provider), provider=provider)


class GenerationFailure(Exception):
    """Raised when a generation stage fails. Fatal for the request."""

    def __init__(self, stage: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.stage = stage
        self.message = message
        self.details = details or {}
        super().__init__(f"Generation stage '{stage}' failed: {message}")


class SchemaValidationFailure(GenerationFailure):
    """Raised when a stage's output does not match its schema."""
    pass
