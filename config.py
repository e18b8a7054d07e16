from dotenv import load_dotenv
import os

load_dotenv()

# Configuration class for the application
class Config:
    # Provider credentials are checked per request, not at import time
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

    # Transcription ladder models
    OPENAI_TRANSCRIBE_MODEL = os.getenv("OPENAI_TRANSCRIBE_MODEL", "gpt-4o-mini-transcribe")
    LEGACY_TRANSCRIBE_MODEL = os.getenv("LEGACY_TRANSCRIBE_MODEL", "whisper-1")
    TRANSCRIPTION_LANGUAGE = "en"

    # Gemini models for feedback generation
    GEMINI_AUDIO_MODEL = os.getenv("GEMINI_AUDIO_MODEL", "gemini-2.0-flash")
    GEMINI_TRANSCRIPT_MODEL = os.getenv("GEMINI_TRANSCRIPT_MODEL", "gemini-2.0-flash-lite")
    GEMINI_TEXT_MODEL = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.0-flash-lite")
    PRONUNCIATION_TEMPERATURE = 0.2
    TEXT_FEEDBACK_TEMPERATURE = 0.3

    # Speech synthesis
    OPENAI_TTS_MODEL = os.getenv("OPENAI_TTS_MODEL", "gpt-4o-mini-tts")
    OPENAI_TTS_VOICE = os.getenv("OPENAI_TTS_VOICE", "alloy")

    # Network configuration (seconds)
    TRANSCRIPTION_TIMEOUT = float(os.getenv("TRANSCRIPTION_TIMEOUT", "60"))
    GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "90"))
    SPEECH_TIMEOUT = float(os.getenv("SPEECH_TIMEOUT", "30"))

    # File size limits
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB (OpenAI transcription limit)

    # Payload and record limits
    MAX_WORD_TIMINGS = 80
    MAX_PRONUNCIATION_ISSUES = 5
    MAX_PRACTICE_TIPS = 5
    MAX_SUGGESTIONS = 3

    # Scoring guard thresholds
    ENGLISH_CONFIDENCE_THRESHOLD = 50
    UNVERIFIED_SCORE_CAP = 20
