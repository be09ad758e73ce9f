import os
from typing import List, Optional
from subtitlekit.config import build_language_candidates, settings
from subtitlekit.core.errors import (
    EnhancementError,
    InvalidVideoError,
    TranscriptNotFoundError,
    UnsupportedMediaError,
    UploadTooLargeError,
)
from subtitlekit.core.source import Found
from subtitlekit.models.caption import CaptionItem, Dialect, ParsedCaptions, RenderedSubtitles
from subtitlekit.models.suggestion import Suggestion
from subtitlekit.providers.youtube import extract_video_id, to_caption_items
from subtitlekit.services.corrector import CorrectionEngine, merge_suggestions
from subtitlekit.services.fetcher import TranscriptFetcher
from subtitlekit.services.llm import LanguageModelService
from subtitlekit.services.parser import parse_captions
from subtitlekit.services.serializer import render
from subtitlekit.utils.logger import logger
from subtitlekit.utils.segmenter import segment, with_text

CAPTION_EXTENSIONS = {".srt", ".vtt"}
TEXT_EXTENSIONS = {".txt"}


def _plain(cues: List[CaptionItem]) -> ParsedCaptions:
    return ParsedCaptions(text="\n".join(c.text for c in cues), cues=cues)


class SubtitleService:
    """Request-level pipelines built from the caption components.

    Collaborators are injected; the language model is optional and only
    ever used to enhance a result that is already valid without it.
    """

    def __init__(self, fetcher: TranscriptFetcher, corrector: CorrectionEngine = None,
                 llm: Optional[LanguageModelService] = None):
        self.fetcher = fetcher
        self.corrector = corrector or CorrectionEngine()
        self.llm = llm

    def process_upload(self, filename: str, content: bytes) -> ParsedCaptions:
        if len(content) > settings.MAX_UPLOAD_BYTES:
            limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
            raise UploadTooLargeError(f"File too large. Max {limit_mb}MB.")
        ext = os.path.splitext((filename or "").lower())[1]
        if ext in CAPTION_EXTENSIONS:
            return parse_captions(filename, content.decode("utf-8", errors="replace"))
        if ext in TEXT_EXTENSIONS:
            return _plain(segment(content.decode("utf-8", errors="replace")))

        if self.llm is None:
            raise UnsupportedMediaError("Audio/video uploads require a language model API key for transcription")
        logger.info(f"Transcribing {filename}...")
        transcript = self.llm.transcribe(filename, content)
        return _plain(segment(transcript))

    def generate_subtitles(self, url: Optional[str], target_lang: str = "en", fmt: str = "srt",
                           transcript: Optional[str] = None) -> RenderedSubtitles:
        dialect = Dialect.VTT if fmt == "vtt" else Dialect.SRT
        video_id = extract_video_id(url) if url else None
        if not video_id and not transcript:
            raise InvalidVideoError("Invalid YouTube URL")

        cues: List[CaptionItem] = []
        reasons: List[str] = []
        if video_id:
            result = self.fetcher.try_fetch(video_id, build_language_candidates(target_lang), target_lang)
            if isinstance(result, Found):
                cues = self._translate_cues(to_caption_items(result.segments), target_lang)
            else:
                reasons.extend(result.reasons or [result.reason])

        if not cues:
            if not transcript:
                raise TranscriptNotFoundError(video_id, reasons)
            logger.info("Falling back to the supplied transcript text...")
            cues = segment(self._translate_text(transcript, target_lang))

        filename = f"captions-{target_lang}.{dialect.value}"
        return RenderedSubtitles(filename=filename, content=render(cues, dialect))

    def _translate_cues(self, cues: List[CaptionItem], target_lang: str) -> List[CaptionItem]:
        if self.llm is None:
            return cues
        try:
            lines = self.llm.translate_lines([c.text for c in cues], target_lang)
        except EnhancementError as e:
            logger.warning(f"Translation failed, keeping original text: {e}")
            return cues
        translated = with_text(cues, lines)
        if len(translated) < len(cues):
            logger.warning(f"Translation returned {len(lines)} lines for {len(cues)} cues; extra cues dropped")
        return translated or cues

    def _translate_text(self, text: str, target_lang: str) -> str:
        if self.llm is None:
            return text
        try:
            return self.llm.translate_text(text, target_lang)
        except EnhancementError as e:
            logger.warning(f"Translation failed, using the transcript as given: {e}")
            return text

    def suggest(self, text: str, enhance: bool = False) -> List[Suggestion]:
        if not text or not text.strip():
            return []
        if len(text) > settings.MAX_SUGGEST_CHARS:
            logger.warning(f"Input truncated to {settings.MAX_SUGGEST_CHARS} characters for proofreading")
            text = text[:settings.MAX_SUGGEST_CHARS]
        local = self.corrector.suggest(text)
        if not (enhance and self.llm is not None):
            return local
        try:
            remote = self.llm.proofread(text)
        except EnhancementError as e:
            logger.warning(f"Model proofreading unavailable, using local rules only: {e}")
            return local
        return merge_suggestions(local, remote)
