from abc import ABC, abstractmethod
from typing import List, Optional, Union
from pydantic import BaseModel, Field
from subtitlekit.models.transcript import RawTranscriptSegment

class Found(BaseModel):
    source: str
    segments: List[RawTranscriptSegment]

class NotFound(BaseModel):
    source: str
    reason: str
    reasons: List[str] = Field(default_factory=list)

FetchResult = Union[Found, NotFound]

class TranscriptSource(ABC):
    name: str = "source"

    @abstractmethod
    def fetch(self, video_id: str, languages: List[str], target_lang: Optional[str] = None) -> FetchResult:
        """Fetch raw transcript segments for a video.

        ``languages`` is the caller's preference order; ``target_lang`` is the
        language the caller ultimately wants, when known.
        """
        pass

    def found(self, segments: List[RawTranscriptSegment]) -> FetchResult:
        if not segments:
            return self.not_found("no segments")
        return Found(source=self.name, segments=segments)

    def not_found(self, reason: str) -> NotFound:
        return NotFound(source=self.name, reason=reason)
