import json
from typing import List, Optional, Sequence
import openai
from jinja2 import Environment, PackageLoader
from openai import OpenAI
from subtitlekit.config import Settings, settings
from subtitlekit.core.errors import EnhancementError, QuotaExceededError
from subtitlekit.models.suggestion import Suggestion
from subtitlekit.services.corrector import sanitize_suggestions
from subtitlekit.utils.logger import logger
from subtitlekit.utils.retry import api_retry


def build_client(config: Settings = settings) -> Optional[OpenAI]:
    """Construct the model client once; None when no API key is configured."""
    if not config.LLM_API_KEY:
        return None
    return OpenAI(
        api_key=config.LLM_API_KEY,
        base_url=config.LLM_BASE_URL,
        timeout=config.LLM_TIMEOUT
    )


def _is_quota_error(e: Exception) -> bool:
    msg = str(e).lower()
    return isinstance(e, openai.RateLimitError) or getattr(e, "status_code", None) == 429 \
        or "quota" in msg or "rate limit" in msg


def _is_model_missing(e: Exception) -> bool:
    msg = str(e).lower()
    return isinstance(e, openai.NotFoundError) or "does not exist" in msg or "model_not_found" in msg


class LanguageModelService:
    """Optional enhancement: translation, proofreading and transcription.

    Nothing in the caption pipeline depends on this for correctness.
    """

    def __init__(self, client: OpenAI, model: str = None, fallback_models: Sequence[str] = None,
                 temperature: float = None):
        self.client = client
        preferred = model or settings.LLM_MODEL
        fallbacks = settings.LLM_FALLBACK_MODELS if fallback_models is None else fallback_models
        self.models = list(dict.fromkeys([preferred, *fallbacks]))
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.env = Environment(loader=PackageLoader("subtitlekit", "prompts"))

    @api_retry()
    def _call(self, model: str, prompt: str, json_mode: bool = False) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            **kwargs
        )
        return (response.choices[0].message.content or "").strip()

    def _chat(self, prompt: str, json_mode: bool = False) -> str:
        last_err: Optional[Exception] = None
        for model in self.models:
            try:
                content = self._call(model, prompt, json_mode=json_mode)
            except Exception as e:
                if _is_quota_error(e):
                    raise QuotaExceededError("Language model quota exceeded. Check billing or try again later.") from e
                if _is_model_missing(e):
                    logger.warning(f"Model {model} unavailable, trying next")
                else:
                    logger.warning(f"Model {model} failed: {e}")
                last_err = e
                continue
            if content:
                return content
        raise EnhancementError(f"All language models failed: {last_err}")

    def _render(self, template: str, **context) -> str:
        return self.env.get_template(template).render(**context)

    def translate_lines(self, lines: List[str], target_lang: str) -> List[str]:
        prompt = self._render("translate_lines.jinja2", target_lang=target_lang, text="\n".join(lines))
        translated = self._chat(prompt)
        return [l for l in translated.splitlines() if l.strip()]

    def translate_text(self, text: str, target_lang: str) -> str:
        return self._chat(self._render("translate_text.jinja2", target_lang=target_lang, text=text))

    def proofread(self, text: str) -> List[Suggestion]:
        content = self._chat(self._render("proofread.jinja2", text=text), json_mode=True)
        try:
            data = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            raise EnhancementError(f"Proofreading response is not JSON: {e}") from e
        raw = data.get("suggestions") if isinstance(data, dict) else None
        return sanitize_suggestions(raw if isinstance(raw, list) else [], text)

    def transcribe(self, filename: str, content: bytes) -> str:
        try:
            result = self.client.audio.transcriptions.create(
                model=settings.TRANSCRIBE_MODEL,
                file=(filename, content),
            )
        except Exception as e:
            if _is_quota_error(e):
                raise QuotaExceededError("Language model quota exceeded. Check billing or try again later.") from e
            raise EnhancementError(f"Transcription failed: {e}") from e
        return getattr(result, "text", "") or ""
