"""Subtitle quality ranking."""

from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence

from ...infrastructure.logging import LoggerMixin
from ..models import SubtitleRecord

# Languages tried after the preferred one when picking the best subtitle
FALLBACK_LANGUAGES = ("zh-CN", "zh", "en")


def _timestamp(value: Optional[datetime]) -> Optional[float]:
    """Convert an upload date to a comparable timestamp, treating naive dates as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


class QualityRanker(LoggerMixin):
    """Orders subtitles from best to worst."""

    @staticmethod
    def compare(a: SubtitleRecord, b: SubtitleRecord) -> int:
        """Compare two subtitles.

        Human translations beat AI and machine translations, HD releases beat
        SD, then the higher quality score wins and the newer upload breaks ties.

        Args:
            a: First subtitle.
            b: Second subtitle.

        Returns:
            Negative if ``a`` ranks before ``b``, positive if after, 0 if equal.
        """
        if a.ai_translated != b.ai_translated:
            return 1 if a.ai_translated else -1
        if a.machine_translated != b.machine_translated:
            return 1 if a.machine_translated else -1
        if a.hd != b.hd:
            return -1 if a.hd else 1

        if a.quality_score != b.quality_score:
            return -1 if a.quality_score > b.quality_score else 1

        a_time = _timestamp(a.upload_date)
        b_time = _timestamp(b.upload_date)
        if a_time == b_time:
            return 0
        # Missing dates sort last
        if a_time is None:
            return 1
        if b_time is None:
            return -1
        return -1 if a_time > b_time else 1

    def sort_by_quality(self, records: Sequence[SubtitleRecord]) -> List[SubtitleRecord]:
        """Sort subtitles best first.

        Args:
            records: Subtitles to sort.

        Returns:
            New sorted list.
        """
        return sorted(records, key=cmp_to_key(self.compare))

    def select_best(
        self, records: Sequence[SubtitleRecord], preferred_language: str
    ) -> Optional[SubtitleRecord]:
        """Pick the best subtitle, honouring language priority.

        Args:
            records: Candidate subtitles.
            preferred_language: Language tried first.

        Returns:
            Best subtitle of the first language group that has any, the best
            overall subtitle if no priority language matches, or None if
            ``records`` is empty.
        """
        if not records:
            return None

        groups: Dict[str, List[SubtitleRecord]] = {}
        for record in records:
            groups.setdefault(record.language, []).append(record)

        priority = list(dict.fromkeys([preferred_language, *FALLBACK_LANGUAGES]))
        for language in priority:
            group = groups.get(language)
            if group:
                best = self.sort_by_quality(group)[0]
                self.logger.info(
                    f"Selected subtitle: {best.file_name} [{language}] "
                    f"(downloads {best.download_count}, rating {best.rating})"
                )
                return best

        best = self.sort_by_quality(records)[0]
        self.logger.info(
            f"No priority language matched, selected: {best.file_name} [{best.language}]"
        )
        return best
