from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # LLM Configuration (optional enhancement only)
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://api.openai.com/v1"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_FALLBACK_MODELS: List[str] = ["gpt-4o-mini", "gpt-4o", "gpt-4.1-mini"]
    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT: float = 120.0
    TRANSCRIBE_MODEL: str = "whisper-1"

    # Caption Settings
    MAX_CHUNK_SECONDS: int = 5
    PLAIN_TEXT_MAX_SECONDS: int = 5
    READING_CHARS_PER_SECOND: int = 18
    CAPTION_LANGUAGES: List[str] = [
        "en", "a.en", "ar", "a.ar", "es", "a.es", "fr", "a.fr",
        "de", "a.de", "pt", "a.pt", "ja", "a.ja",
    ]

    # Limits
    MAX_SUGGEST_CHARS: int = 200_000
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024

    # System Settings
    LOG_LEVEL: str = "INFO"
    MAX_RETRIES: int = 3
    HTTP_TIMEOUT: float = 30.0
    REQUEST_TIMEOUT: Optional[float] = None

    # Paths
    OUTPUT_DIR: str = "outputs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()


def build_language_candidates(target_lang: Optional[str] = None) -> List[str]:
    """Timed-text language candidates: English first, then the target, then the defaults."""
    raw = ["en", "a.en"]
    if target_lang:
        raw += [target_lang, f"a.{target_lang}"]
    raw += settings.CAPTION_LANGUAGES
    seen = set()
    out = []
    for cand in raw:
        if cand and cand not in seen:
            seen.add(cand)
            out.append(cand)
    return out
