from typing import List, Optional


class SubtitleKitError(Exception):
    """Base class for every error raised by subtitlekit."""


class TranscriptNotFoundError(SubtitleKitError):
    """Every transcript strategy was tried and none produced segments."""

    def __init__(self, video_id: Optional[str], reasons: Optional[List[str]] = None):
        self.video_id = video_id
        self.reasons = list(reasons or [])
        detail = "; ".join(self.reasons) if self.reasons else "no strategy produced segments"
        super().__init__(f"Could not obtain transcript for {video_id or 'video'}: {detail}")


class StrategyError(SubtitleKitError):
    """A strategy hit a structural problem it cannot fall back from."""


class InvalidVideoError(SubtitleKitError):
    pass


class UploadTooLargeError(SubtitleKitError):
    pass


class UnsupportedMediaError(SubtitleKitError):
    pass


class EnhancementError(SubtitleKitError):
    """The optional language-model step failed."""


class QuotaExceededError(EnhancementError):
    pass


class PipelineTimeoutError(SubtitleKitError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout:g}s")
