"""LLM service implementations."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import LLMServiceError, clean_completion
from ..interfaces import ILLMService

SYSTEM_PROMPT = "You are a helpful assistant for a movie subtitle library."

SIMPLIFY_PROMPT = """Simplify the following movie file name and extract the standard movie title.
Remove the year, resolution, codec, audio format, subtitle tags, release group and any other noise, keeping only the core movie title.

Original file name: {name}

Reply with the simplified movie title only, without any explanation."""

TRANSLATE_PROMPT = """Translate the following subtitle content into {language}. Keep the subtitle numbering and timeline lines exactly as they are and only translate the text lines:

{content}

Keep the original subtitle format and timeline, translating only the text."""


class BaseLLMService(ILLMService, LoggerMixin, ABC):
    """Base LLM service with common functionality."""

    def __init__(self, config: Config):
        """Initialize LLM service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._llm_config = config.llm

    async def complete(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Run a single-prompt completion.

        Args:
            prompt: User prompt.
            max_tokens: Output token bound. Uses the configured default if None.
            temperature: Sampling temperature. Uses the configured default if None.

        Returns:
            Completion text.

        Raises:
            LLMServiceError: If LLM request fails.
        """
        return await self._make_llm_request(
            SYSTEM_PROMPT,
            prompt,
            max_tokens=max_tokens or self._llm_config.max_tokens,
            temperature=self._llm_config.temperature if temperature is None else temperature,
        )

    async def simplify_movie_name(self, raw_name: str) -> str:
        """Strip release noise from a movie file name.

        Args:
            raw_name: File name without extension.

        Returns:
            Cleaned movie title.

        Raises:
            LLMServiceError: If LLM request fails or returns nothing usable.
        """
        self.logger.info(f"Simplifying movie name with AI: {raw_name}")

        response_text = await self.complete(
            SIMPLIFY_PROMPT.format(name=raw_name),
            max_tokens=self._llm_config.max_tokens,
            temperature=self._llm_config.temperature,
        )
        simplified = clean_completion(response_text)
        if not simplified:
            raise LLMServiceError(f"LLM returned an empty title for '{raw_name}'")

        self.logger.info(f"Movie name simplified: {raw_name} -> {simplified}")
        return simplified

    async def translate_subtitle(self, content: str, target_language: str) -> str:
        """Translate subtitle text while keeping its timing lines intact.

        Args:
            content: Subtitle file content.
            target_language: Language code to translate into.

        Returns:
            Translated subtitle content.

        Raises:
            LLMServiceError: If LLM request fails.
        """
        self.logger.info(f"Translating subtitle to {target_language}")

        translated = await self.complete(
            TRANSLATE_PROMPT.format(language=target_language, content=content),
            max_tokens=self._llm_config.translation_max_tokens,
            temperature=self._llm_config.translation_temperature,
        )
        return translated.strip()

    @abstractmethod
    async def _make_llm_request(
        self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float
    ) -> str:
        """Make request to LLM service.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.
            max_tokens: Output token bound.
            temperature: Sampling temperature.

        Returns:
            LLM response text.
        """
        pass


class OpenAILLMService(BaseLLMService):
    """OpenAI-compatible LLM service (OpenAI, DeepSeek)."""

    def __init__(self, config: Config):
        """Initialize OpenAI-compatible service.

        Args:
            config: Application configuration.
        """
        super().__init__(config)
        self._client: Any = None

    def _get_client(self) -> Any:
        """Get or create the SDK client."""
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise LLMServiceError(
                    "OpenAI package not installed. Install with: pip install openai"
                )

            self._client = openai.AsyncOpenAI(
                api_key=self._llm_config.api_key,
                base_url=self._llm_config.resolved_base_url,
                timeout=self._llm_config.timeout,
            )
        return self._client

    async def _make_llm_request(
        self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float
    ) -> str:
        """Make request to an OpenAI-compatible chat completions API.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.
            max_tokens: Output token bound.
            temperature: Sampling temperature.

        Returns:
            LLM response text.
        """
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self._llm_config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            raise LLMServiceError(f"{self._llm_config.provider} API request failed: {e}") from e

        content = response.choices[0].message.content
        if content is None:
            raise LLMServiceError(f"{self._llm_config.provider} API returned empty content")
        return content


class AnthropicLLMService(BaseLLMService):
    """Anthropic (Claude) LLM service implementation."""

    def __init__(self, config: Config):
        """Initialize Anthropic service.

        Args:
            config: Application configuration.
        """
        super().__init__(config)
        self._client: Any = None

    def _get_client(self) -> Any:
        """Get or create the SDK client."""
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise LLMServiceError(
                    "Anthropic package not installed. Install with: pip install anthropic"
                )

            self._client = anthropic.AsyncAnthropic(
                api_key=self._llm_config.api_key,
                base_url=self._llm_config.base_url,
                timeout=self._llm_config.timeout,
            )
        return self._client

    async def _make_llm_request(
        self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float
    ) -> str:
        """Make request to Anthropic API.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.
            max_tokens: Output token bound.
            temperature: Sampling temperature.

        Returns:
            LLM response text.
        """
        client = self._get_client()

        try:
            response = await client.messages.create(
                model=self._llm_config.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            raise LLMServiceError(f"Anthropic API request failed: {e}") from e

        content_block = response.content[0]
        if hasattr(content_block, "text"):
            return content_block.text
        raise LLMServiceError("Anthropic API returned unexpected content type")
