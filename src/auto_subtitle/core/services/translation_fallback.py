"""Translation fallback service implementation."""

from pathlib import Path
from typing import Optional

import aiofiles

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import with_language_suffix
from ..interfaces import ILLMService, ITranslationFallback
from ..models import SubtitleRecord


class TranslationFallback(ITranslationFallback, LoggerMixin):
    """Translates English subtitles when English is not a preferred language."""

    def __init__(self, config: Config, llm_service: ILLMService):
        """Initialize translation fallback.

        Args:
            config: Application configuration.
            llm_service: LLM service used for translation.
        """
        self._config = config
        self._llm_service = llm_service

    def should_translate(self, language: str) -> bool:
        """Check whether a subtitle language needs translation."""
        return language == "en" and "en" not in self._config.subtitles.preferred_languages

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
        target = target_language or self._config.subtitles.target_language
        return await self._llm_service.translate_subtitle(content, target)

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
        target = target_language or self._config.subtitles.target_language
        self.logger.info(f"Translating {path.name} to {target}")

        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
            content = await f.read()

        translated = await self.translate_text(content, target)

        output_path = with_language_suffix(path, target)
        async with aiofiles.open(output_path, "w", encoding="utf-8") as f:
            await f.write(translated)

        self.logger.info(f"Translated subtitle saved to: {output_path}")
        return output_path

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
        if not self.should_translate(subtitle.language):
            return None
        return await self.translate_file(path)
