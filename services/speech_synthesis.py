import httpx
import logging
from typing import Optional
from config import Config

SPEECH_INSTRUCTIONS = "Speak naturally with clear pacing, gentle intonation, and conversational rhythm."


class SpeechSynthesisError(Exception):
    pass


class SpeechSynthesisService:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.base_url = base_url or Config.OPENAI_BASE_URL
        self.timeout = Config.SPEECH_TIMEOUT

    async def synthesize(self, text: str) -> bytes:
        """Render text as mp3 audio with the configured TTS model and voice."""
        if not self.api_key:
            raise SpeechSynthesisError("OpenAI API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": Config.OPENAI_TTS_MODEL,
            "voice": Config.OPENAI_TTS_VOICE,
            "response_format": "mp3",
            "input": text,
            "instructions": SPEECH_INSTRUCTIONS,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/audio/speech", headers=headers, json=payload)

                if response.status_code != 200:
                    error_text = response.text if response.content else "Unknown error"
                    raise SpeechSynthesisError(f"TTS generation failed: {response.status_code} - {error_text}")

                logging.info(f"Synthesized {len(text)} characters into {len(response.content)} bytes of audio")
                return response.content
        except httpx.TimeoutException:
            raise SpeechSynthesisError("TTS generation timed out")
        except httpx.HTTPError as e:
            raise SpeechSynthesisError(f"TTS request error: {e}")
