# tests/conftest.py
"""Root pytest configuration and fixtures for the pronunciation feedback service tests."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from config import Config
from models import AudioUpload, TranscriptionResult, WordTiming
from services.feedback_generator import FeedbackGenerator
from services.transcription import TranscriptionService


@pytest.fixture
def api_keys(monkeypatch):
    """Pretend both provider credentials are configured."""
    monkeypatch.setattr(Config, "OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setattr(Config, "GEMINI_API_KEY", "test-gemini-key")


@pytest.fixture
def audio_upload():
    return AudioUpload(filename="recording.webm", content_type="audio/webm", data=b"fake-webm-bytes")


@pytest.fixture
def transcription_result():
    return TranscriptionResult(
        text="The weather in Vancouver is often rainy.",
        words=[
            WordTiming(word="The", start=0.0, end=0.2),
            WordTiming(word="weather", start=0.2, end=0.6),
            WordTiming(word="in", start=0.6, end=0.7),
            WordTiming(word="Vancouver", start=0.7, end=1.3),
        ],
    )


@pytest.fixture
def model_json():
    """Factory fixture producing generation output as the model would return it."""
    def _make(**overrides):
        payload = {
            "overallScore": 82,
            "aiTimingScore": 7.5,
            "targetMatchScore": 95,
            "englishConfidence": 90,
            "isTargetSentence": True,
            "transcribedText": "The weather in Vancouver is often rainy.",
            "summary": "Clear and well paced.",
            "consonantComment": "The 'th' in 'the' was slightly stopped.",
            "vowelComment": "Good vowel length in 'rainy'.",
            "stressComment": "Stress on 'VAN' was correct.",
            "pronunciationIssues": [
                {"expected": "the", "heard": "de", "advice": "Put your tongue between your teeth."}
            ],
            "practiceTips": ["Practice 'th' minimal pairs."],
        }
        payload.update(overrides)
        return json.dumps(payload)
    return _make


@pytest.fixture
def mock_transcription_service(transcription_result):
    service = MagicMock(spec=TranscriptionService)
    service.transcribe = AsyncMock(return_value=transcription_result)
    return service


@pytest.fixture
def mock_feedback_generator(model_json):
    generator = MagicMock(spec=FeedbackGenerator)
    generator.generate_from_audio = AsyncMock(return_value=model_json())
    generator.generate_from_transcript = AsyncMock(return_value=model_json())
    generator.generate_text_feedback = AsyncMock(
        return_value=json.dumps({"explanation": "Use the past tense here.", "suggestions": ["I went home."]})
    )
    return generator
