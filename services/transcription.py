import httpx
import logging
from typing import Any, Dict, List, NamedTuple, Optional
from config import Config
from models import AudioUpload, TranscriptionResult, WordTiming


class TranscriptionError(Exception):
    """Every transcription attempt failed."""


class TranscriptionAttempt(NamedTuple):
    model: str
    response_format: Optional[str]
    include_word_timestamps: bool


class TranscriptionService:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.base_url = base_url or Config.OPENAI_BASE_URL
        self.language = Config.TRANSCRIPTION_LANGUAGE
        self.timeout = Config.TRANSCRIPTION_TIMEOUT

    def build_attempts(self) -> List[TranscriptionAttempt]:
        """Ordered ladder: preferred model with word timings, preferred model
        as plain json, then the legacy model with word timings."""
        return [
            TranscriptionAttempt(Config.OPENAI_TRANSCRIBE_MODEL, "verbose_json", True),
            TranscriptionAttempt(Config.OPENAI_TRANSCRIBE_MODEL, "json", False),
            TranscriptionAttempt(Config.LEGACY_TRANSCRIBE_MODEL, "verbose_json", True),
        ]

    async def transcribe(self, audio: AudioUpload) -> TranscriptionResult:
        """Run the attempt ladder; the first success wins."""
        if not self.api_key:
            raise TranscriptionError("OpenAI API key not configured")

        errors = []
        for attempt in self.build_attempts():
            tag = f"[model={attempt.model}, format={attempt.response_format or 'default'}]"
            try:
                result = await self._request_transcription(audio, attempt)
            except (httpx.HTTPError, TranscriptionError) as e:
                logging.warning(f"Transcription attempt {tag} failed: {e}")
                errors.append(f"{tag} {e}")
                continue

            logging.info(f"Transcription succeeded with {tag}")
            return self.parse_transcription_result(result)

        raise TranscriptionError(f"Transcription failed. {' | '.join(errors)}")

    async def _request_transcription(self, audio: AudioUpload, attempt: TranscriptionAttempt) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}

        data = {"model": attempt.model, "language": self.language}
        if attempt.response_format:
            data["response_format"] = attempt.response_format
        if attempt.include_word_timestamps:
            data["timestamp_granularities[]"] = "word"

        files_payload = {
            "file": (audio.filename or "recording.webm", audio.data, audio.content_type or "audio/webm")
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/audio/transcriptions",
                headers=headers,
                data=data,
                files=files_payload,
            )

            if response.status_code != 200:
                error_text = response.text if response.content else "Unknown error"
                raise TranscriptionError(f"{response.status_code} - {error_text}")

            try:
                return response.json()
            except ValueError:
                raise TranscriptionError("Transcription response was not valid JSON")

    def parse_transcription_result(self, result: Dict[str, Any]) -> TranscriptionResult:
        """Parse the provider result into our format. Malformed word entries are skipped."""
        text = result.get("text") if isinstance(result, dict) else None
        raw_words = result.get("words") if isinstance(result, dict) else None

        words = []
        for word_data in raw_words if isinstance(raw_words, list) else []:
            if not isinstance(word_data, dict):
                continue
            word = word_data.get("word")
            start = word_data.get("start")
            end = word_data.get("end")
            if isinstance(word, str) and _is_number(start) and _is_number(end):
                words.append(WordTiming(word=word, start=start, end=end))

        return TranscriptionResult(
            text=text.strip() if isinstance(text, str) else "",
            words=words,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
