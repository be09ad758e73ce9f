from typing import Any, List, Optional, Sequence
import requests
from subtitlekit.config import build_language_candidates
from subtitlekit.core.errors import TranscriptNotFoundError
from subtitlekit.core.source import FetchResult, Found, NotFound, TranscriptSource
from subtitlekit.models.transcript import RawTranscriptSegment
from subtitlekit.providers.youtube import TimedTextStrategy, TranscriptApiStrategy, WatchPageStrategy
from subtitlekit.utils.logger import logger


class TranscriptFetcher:
    """Runs transcript strategies in order and stops at the first success."""

    def __init__(self, strategies: Sequence[TranscriptSource]):
        self.strategies = list(strategies)

    @classmethod
    def default(cls, session: Optional[requests.Session] = None, api: Any = None) -> "TranscriptFetcher":
        session = session or requests.Session()
        return cls([
            TranscriptApiStrategy(api),
            TimedTextStrategy(session),
            WatchPageStrategy(session),
        ])

    def try_fetch(self, video_id: str, languages: Optional[List[str]] = None, target_lang: Optional[str] = None) -> FetchResult:
        languages = languages or build_language_candidates(target_lang)
        reasons = []
        for strategy in self.strategies:
            try:
                result = strategy.fetch(video_id, languages, target_lang)
            except Exception as e:
                logger.warning(f"{strategy.name} raised unexpectedly: {e}")
                result = strategy.not_found(f"{type(e).__name__}: {e}")
            if isinstance(result, Found) and result.segments:
                logger.info(f"Transcript obtained via {result.source} ({len(result.segments)} segments)")
                return result
            reason = result.reason if isinstance(result, NotFound) else "no segments"
            reasons.append(f"{strategy.name}: {reason}")
            logger.warning(f"{strategy.name} produced no transcript ({reason}); trying next strategy")
        return NotFound(source="all", reason="; ".join(reasons), reasons=reasons)

    def fetch_transcript(self, video_id: str, languages: Optional[List[str]] = None, target_lang: Optional[str] = None) -> List[RawTranscriptSegment]:
        """Return segments from the first strategy that has any.

        Raises TranscriptNotFoundError when every strategy is exhausted.
        """
        result = self.try_fetch(video_id, languages, target_lang)
        if isinstance(result, Found):
            return result.segments
        raise TranscriptNotFoundError(video_id, result.reasons or [result.reason])
