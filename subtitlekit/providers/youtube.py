import re
import json
import html
import xml.etree.ElementTree as ET
import requests
import yt_dlp
from youtube_transcript_api import YouTubeTranscriptApi
from typing import Any, Dict, List, Optional
from subtitlekit.config import settings
from subtitlekit.core.errors import StrategyError
from subtitlekit.core.source import FetchResult, TranscriptSource
from subtitlekit.models.caption import CaptionItem
from subtitlekit.models.transcript import RawTranscriptSegment
from subtitlekit.services.parser import iter_vtt_cues, strip_markup
from subtitlekit.utils.logger import logger

TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"
WATCH_URL = "https://www.youtube.com/watch"
AUTO_PREFIX = "a."

_ID_PATTERNS = [
    re.compile(r"(?:v=|/shorts/|/embed/|/live/)([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
]
_BARE_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PLAYER_RESPONSE = re.compile(r"ytInitialPlayerResponse\s*=\s*(?=\{)")
_TEXT_NODE = re.compile(r"<text\b([^>]*)>(.*?)</text>", re.S)
_XML_ATTR = re.compile(r"""([\w:-]+)\s*=\s*["']([^"']*)["']""")


def extract_video_id(url: str, resolve: bool = False) -> Optional[str]:
    url = (url or "").strip()
    if not url:
        return None
    for pattern in _ID_PATTERNS:
        m = pattern.search(url)
        if m:
            return m.group(1)
    if _BARE_ID.match(url):
        return url
    if not resolve:
        return None
    try:
        with yt_dlp.YoutubeDL({'quiet': True, 'no_warnings': True}) as ydl:
            info = ydl.extract_info(url, download=False)
            return info.get('id')
    except Exception as e:
        logger.warning(f"Failed to resolve video id from {url}: {e}")
        return None


def to_caption_items(segments: List[RawTranscriptSegment]) -> List[CaptionItem]:
    return [
        CaptionItem(
            id=i + 1,
            start=s.offset_ms / 1000,
            end=(s.offset_ms + s.duration_ms) / 1000,
            text=s.text,
        )
        for i, s in enumerate(segments)
    ]


def plain_languages(languages: List[str]) -> List[str]:
    """Language codes without the auto-generated marker, de-duplicated."""
    out = []
    for cand in languages:
        code = cand[len(AUTO_PREFIX):] if cand.startswith(AUTO_PREFIX) else cand
        if code and code not in out:
            out.append(code)
    return out


def clean_caption_text(raw: str) -> str:
    return html.unescape(strip_markup(raw.replace("\n", " "))).strip()


class TranscriptApiStrategy(TranscriptSource):
    """Primary strategy: the youtube-transcript-api package."""
    name = "youtube-transcript-api"

    def __init__(self, api: Any = None):
        self.api = api

    def fetch(self, video_id: str, languages: List[str], target_lang: Optional[str] = None) -> FetchResult:
        logger.info("Attempting to fetch transcript via youtube-transcript-api...")
        langs = plain_languages(languages) or ["en"]
        try:
            api = self.api if self.api is not None else YouTubeTranscriptApi()
            if hasattr(api, "fetch"):
                data = api.fetch(video_id, languages=langs)
            else:
                data = api.get_transcript(video_id, languages=langs)
        except Exception as e:
            logger.warning(f"youtube-transcript-api failed: {e}")
            return self.not_found(f"{type(e).__name__}: {e}")

        segments = []
        for item in data:
            if isinstance(item, dict):
                start, duration, text = item.get("start"), item.get("duration"), item.get("text")
            else:
                start = getattr(item, "start", None)
                duration = getattr(item, "duration", None)
                text = getattr(item, "text", None)
            if start is None or text is None:
                continue
            text = clean_caption_text(str(text))
            if not text:
                continue
            segments.append(RawTranscriptSegment(
                text=text,
                offset_ms=max(0, round(float(start) * 1000)),
                duration_ms=max(0, round(float(duration or 0) * 1000)),
            ))
        return self.found(segments)


class TimedTextStrategy(TranscriptSource):
    """Public timedtext endpoint, one request per language candidate."""
    name = "timedtext"

    def __init__(self, session: requests.Session, timeout: float = None):
        self.session = session
        self.timeout = timeout or settings.HTTP_TIMEOUT

    def fetch(self, video_id: str, languages: List[str], target_lang: Optional[str] = None) -> FetchResult:
        logger.info("Trying YouTube timedtext endpoint...")
        for cand in languages:
            auto = cand.startswith(AUTO_PREFIX)
            params = {"v": video_id, "lang": cand[len(AUTO_PREFIX):] if auto else cand}
            if auto:
                params["kind"] = "asr"
            try:
                resp = self.session.get(
                    TIMEDTEXT_URL,
                    params=params,
                    headers={"accept": "text/xml,*/*"},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                logger.debug(f"timedtext {cand}: {e}")
                continue
            if not resp.ok or "<text" not in (resp.text or ""):
                logger.debug(f"timedtext {cand}: no captions (status {resp.status_code})")
                continue
            segments = self.parse(resp.text)
            if segments:
                logger.info(f"timedtext returned {len(segments)} segments for '{cand}'")
                return self.found(segments)
        return self.not_found(f"no captions for {', '.join(languages) or 'any language'}")

    @staticmethod
    def parse(xml_text: str) -> List[RawTranscriptSegment]:
        try:
            root = ET.fromstring(xml_text)
            nodes = [(node.attrib, "".join(node.itertext())) for node in root.iter("text")]
        except ET.ParseError as e:
            logger.debug(f"timedtext XML is malformed ({e}); scanning <text> elements")
            nodes = [
                (dict(_XML_ATTR.findall(m.group(1))), m.group(2))
                for m in _TEXT_NODE.finditer(xml_text or "")
            ]
        segments = []
        for attrs, raw in nodes:
            try:
                start = float(attrs["start"])
                dur = float(attrs.get("dur", 0))
            except (KeyError, ValueError):
                continue
            text = clean_caption_text(raw)
            if not text:
                continue
            segments.append(RawTranscriptSegment(
                text=text,
                offset_ms=max(0, round(start * 1000)),
                duration_ms=max(0, round(dur * 1000)),
            ))
        return segments


class WatchPageStrategy(TranscriptSource):
    """Caption-track discovery through the public watch page.

    Structural problems raise StrategyError internally; they end the chain
    because there is nothing after this strategy.
    """
    name = "watch-page"

    def __init__(self, session: requests.Session, timeout: float = None):
        self.session = session
        self.timeout = timeout or settings.HTTP_TIMEOUT

    def fetch(self, video_id: str, languages: List[str], target_lang: Optional[str] = None) -> FetchResult:
        logger.info("Trying caption tracks from the watch page...")
        if not target_lang:
            plain = plain_languages(languages)
            target_lang = plain[0] if plain else None
        try:
            return self.found(self._fetch(video_id, target_lang))
        except (StrategyError, requests.RequestException) as e:
            logger.warning(f"Watch page strategy failed: {e}")
            return self.not_found(str(e))

    def _fetch(self, video_id: str, target_lang: Optional[str]) -> List[RawTranscriptSegment]:
        resp = self.session.get(
            WATCH_URL,
            params={"v": video_id, "hl": "en"},
            headers={"accept-language": "en"},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise StrategyError(f"watch page returned HTTP {resp.status_code}")
        player = extract_player_response(resp.text)
        tracks = (((player.get("captions") or {})
                   .get("playerCaptionsTracklistRenderer") or {})
                  .get("captionTracks"))
        if not isinstance(tracks, list) or not tracks:
            raise StrategyError("no caption tracks")

        track = pick_track(tracks, target_lang)
        base_url = track.get("baseUrl")
        if not base_url:
            raise StrategyError("caption track has no baseUrl")
        if "fmt=" not in base_url:
            base_url += ("&" if "?" in base_url else "?") + "fmt=vtt"
        logger.info(f"Fetching caption track '{track.get('languageCode')}'")

        t_resp = self.session.get(base_url, timeout=self.timeout)
        if not t_resp.ok:
            raise StrategyError(f"caption track returned HTTP {t_resp.status_code}")
        segments = vtt_to_segments(t_resp.text)
        if not segments:
            raise StrategyError("caption track is empty")
        return segments


def extract_player_response(page: str) -> Dict[str, Any]:
    m = _PLAYER_RESPONSE.search(page or "")
    if not m:
        raise StrategyError("player response not found")
    try:
        player, _ = json.JSONDecoder().raw_decode(page, m.end())
    except ValueError as e:
        raise StrategyError(f"player response parse error: {e}")
    if not isinstance(player, dict):
        raise StrategyError("player response is not an object")
    return player


def pick_track(tracks: List[Dict[str, Any]], target_lang: Optional[str] = None) -> Dict[str, Any]:
    """Target language, then English variants, then first manual track, then the first track."""
    prefs = []
    if target_lang:
        prefs.append(target_lang.lower())
    prefs += ["en", "en-us", "en-gb"]
    for pref in prefs:
        for track in tracks:
            if (track.get("languageCode") or "").lower() == pref:
                return track
    manual = next((t for t in tracks if t.get("kind") != "asr"), None)
    return manual or tracks[0]


def vtt_to_segments(content: str) -> List[RawTranscriptSegment]:
    segments = []
    for start, end, raw in iter_vtt_cues(content):
        text = clean_caption_text(raw)
        if not text:
            continue
        segments.append(RawTranscriptSegment(
            text=text,
            offset_ms=round(start * 1000),
            duration_ms=max(0, round((end - start) * 1000)),
        ))
    return segments
