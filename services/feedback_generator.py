import json
import logging
from typing import Any, List, Optional

import google.generativeai as genai
from config import Config
from models import WordTiming

PRONUNCIATION_SCORING_RULES = """
Strict scoring rules:
- If the utterance is not the target sentence, set isTargetSentence=false and overallScore <= 20.
- If speech is non-English or gibberish, set englishConfidence < 50 and overallScore <= 20.
- Do not return 100 unless target sentence match and pronunciation quality are both excellent.
""".strip()

PRONUNCIATION_JSON_SCHEMA = """
Return strict JSON with this schema:
{
  "overallScore": number, // 0-100 final pronunciation score
  "aiTimingScore": number, // 0-100 from timing/rhythm only (pauses, tempo, flow)
  "targetMatchScore": number, // 0-100 semantic/content match to target sentence
  "englishConfidence": number, // 0-100 confidence that utterance is meaningful English
  "isTargetSentence": boolean,
  "transcribedText": string,
  "summary": string,
  "consonantComment": string,
  "vowelComment": string,
  "stressComment": string,
  "pronunciationIssues": [
    { "expected": string, "heard": string, "advice": string }
  ],
  "practiceTips": string[]
}
""".strip()

AUDIO_SYSTEM_PROMPT = (
    "You are an English pronunciation coach. Analyze pronunciation directly from the provided audio "
    "against the target sentence. Always return valid JSON and provide distinct comments for consonants, "
    "vowels, and stress. Never give high scores to unrelated or non-English speech."
)

TRANSCRIPT_SYSTEM_PROMPT = (
    "You are an English pronunciation coach. Analyze likely pronunciation issues using transcript "
    "differences and word timings. Always provide distinct comments for consonants, vowels, and stress. "
    "Never give high scores to unrelated or non-English speech."
)

TEXT_FEEDBACK_SYSTEM_PROMPT = (
    "You are an English writing coach. Explain grammar and wording clearly and concisely."
)

# Declared audio format -> MIME type sent with the inline audio part
AUDIO_FORMAT_MIME_TYPES = {
    "wav": "audio/wav",
    "mp3": "audio/mp3",
    "m4a": "audio/mp4",
    "webm": "audio/webm",
}


class FeedbackGenerationError(Exception):
    """The generation provider failed to answer."""


def infer_audio_format(content_type: str) -> str:
    file_type = (content_type or "").lower()
    if "wav" in file_type:
        return "wav"
    if "mp3" in file_type or "mpeg" in file_type:
        return "mp3"
    if "m4a" in file_type or "mp4" in file_type:
        return "m4a"
    return "webm"


class FeedbackGenerator:
    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or Config.GEMINI_API_KEY
        # genai.configure is process-wide: the last generator built sets the key for all of them
        if self.api_key:
            genai.configure(api_key=self.api_key)
        self.timeout = Config.GENERATION_TIMEOUT

    async def generate_from_audio(self, target_text: str, audio_data: bytes, content_type: str) -> Optional[str]:
        """Ask the model to judge pronunciation straight from the recording."""
        audio_format = infer_audio_format(content_type)
        prompt = f"""
Target sentence:
{target_text}

Evaluate the learner's pronunciation directly from the input audio (format: {audio_format}).
Return a best-effort transcription in "transcribedText".
{PRONUNCIATION_SCORING_RULES}

{PRONUNCIATION_JSON_SCHEMA}
""".strip()

        audio_part = {"mime_type": AUDIO_FORMAT_MIME_TYPES[audio_format], "data": audio_data}
        return await self._generate(
            Config.GEMINI_AUDIO_MODEL,
            AUDIO_SYSTEM_PROMPT,
            [prompt, audio_part],
            Config.PRONUNCIATION_TEMPERATURE,
        )

    async def generate_from_transcript(self,
                                       target_text: str,
                                       transcribed_text: str,
                                       words: List[WordTiming]) -> Optional[str]:
        """Ask the model to infer pronunciation issues from the transcript and word timings."""
        timings = [word.model_dump() for word in words[:Config.MAX_WORD_TIMINGS]]
        prompt = f"""
Target sentence:
{target_text}

Learner transcription:
{transcribed_text}

Word timings from learner audio (seconds):
{json.dumps(timings)}

{PRONUNCIATION_SCORING_RULES}

{PRONUNCIATION_JSON_SCHEMA}
""".strip()

        return await self._generate(
            Config.GEMINI_TRANSCRIPT_MODEL,
            TRANSCRIPT_SYSTEM_PROMPT,
            [prompt],
            Config.PRONUNCIATION_TEMPERATURE,
        )

    async def generate_text_feedback(self, full_text: str, selected_text: str) -> Optional[str]:
        prompt = f"""
Full text:
{full_text}

Selected text:
{selected_text}

Return strict JSON with this schema:
{{
  "explanation": string, // grammar and phrasing explanation in simple English
  "suggestions": string[] // up to {Config.MAX_SUGGESTIONS} improved rewrites of selected text
}}
Rules:
- Keep suggestions faithful to the original meaning.
- Prefer natural spoken English.
- Do not include markdown or extra keys.
""".strip()

        return await self._generate(
            Config.GEMINI_TEXT_MODEL,
            TEXT_FEEDBACK_SYSTEM_PROMPT,
            [prompt],
            Config.TEXT_FEEDBACK_TEMPERATURE,
        )

    async def _generate(self, model_name: str, system_prompt: str, contents: List[Any], temperature: float) -> Optional[str]:
        model = genai.GenerativeModel(
            model_name,
            system_instruction=system_prompt,
            generation_config=genai.types.GenerationConfig(
                temperature=temperature,
                response_mime_type="application/json",
            ),
        )

        try:
            response = await model.generate_content_async(
                contents,
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            logging.error(f"Error generating feedback with Gemini model {model_name}: {e}")
            raise FeedbackGenerationError(f"Feedback generation failed: {e}") from e

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        """Concatenate text parts of the first candidate; None when the model said nothing."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(part, "text", "") or "" for part in parts)
        return text or None
