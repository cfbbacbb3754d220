"""Translation fallback interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models import SubtitleRecord


class ITranslationFallback(ABC):
    """Interface for translating subtitles the user cannot read."""

    @abstractmethod
    def should_translate(self, language: str) -> bool:
        """Check whether a subtitle language needs translation."""
        pass

    @abstractmethod
    async def translate_text(self, content: str, target_language: Optional[str] = None) -> str:
        """Translate subtitle content.

        Args:
            content: Subtitle content.
            target_language: Language code. Uses the configured one if None.

        Returns:
            Translated content.

        Raises:
            LLMServiceError: If translation fails.
        """
        pass

    @abstractmethod
    async def translate_file(self, path: Path, target_language: Optional[str] = None) -> Path:
        """Translate a subtitle file into a sibling file.

        Args:
            path: Subtitle file to translate.
            target_language: Language code. Uses the configured one if None.

        Returns:
            Path of the translated file.

        Raises:
            LLMServiceError: If translation fails.
        """
        pass

    @abstractmethod
    async def maybe_translate(self, subtitle: SubtitleRecord, path: Path) -> Optional[Path]:
        """Translate a downloaded subtitle when its language requires it.

        Args:
            subtitle: Downloaded subtitle.
            path: Where it was written.

        Returns:
            Path of the translated file, or None if no translation was needed.

        Raises:
            LLMServiceError: If translation fails.
        """
        pass
