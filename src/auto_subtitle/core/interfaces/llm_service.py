"""LLM service interface."""

from abc import ABC, abstractmethod
from typing import Optional


class ILLMService(ABC):
    """Interface for AI completion services."""

    @abstractmethod
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
        pass

    @abstractmethod
    async def simplify_movie_name(self, raw_name: str) -> str:
        """Strip release noise from a movie file name.

        Args:
            raw_name: File name without extension.

        Returns:
            Cleaned movie title.

        Raises:
            LLMServiceError: If LLM request fails.
        """
        pass

    @abstractmethod
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
        pass
