"""Unit tests for feedback_generator.py."""

from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from models import WordTiming
from services.feedback_generator import FeedbackGenerationError, FeedbackGenerator, infer_audio_format


@pytest.fixture
def generator():
    return FeedbackGenerator(api_key="test-gemini-key")


class TestInferAudioFormat:
    @pytest.mark.parametrize("content_type, expected", [
        ("audio/wav", "wav"),
        ("audio/x-wav", "wav"),
        ("audio/mpeg", "mp3"),
        ("audio/mp3", "mp3"),
        ("audio/mp4", "m4a"),
        ("audio/x-m4a", "m4a"),
        ("audio/webm;codecs=opus", "webm"),
        ("audio/ogg", "webm"),
        ("", "webm"),
    ])
    def test_formats(self, content_type, expected):
        assert infer_audio_format(content_type) == expected


class TestPrompts:
    @pytest.mark.asyncio
    async def test_audio_prompt_inlines_audio(self, generator):
        with patch.object(generator, "_generate", AsyncMock(return_value="{}")) as generate:
            await generator.generate_from_audio("I like tea.", b"abc", "audio/mpeg")

        contents = generate.await_args.args[2]
        assert "I like tea." in contents[0]
        assert "format: mp3" in contents[0]
        assert contents[1] == {"mime_type": "audio/mp3", "data": b"abc"}

    @pytest.mark.asyncio
    async def test_transcript_prompt_limits_word_timings(self, generator):
        words = [WordTiming(word=f"w{i}", start=i * 0.1, end=i * 0.1 + 0.05) for i in range(100)]
        with patch.object(generator, "_generate", AsyncMock(return_value="{}")) as generate:
            await generator.generate_from_transcript("Target.", "Heard.", words)

        prompt = generate.await_args.args[2][0]
        assert "Heard." in prompt
        assert '"w79"' in prompt
        assert '"w80"' not in prompt

    @pytest.mark.asyncio
    async def test_text_feedback_prompt(self, generator):
        with patch.object(generator, "_generate", AsyncMock(return_value="{}")) as generate:
            await generator.generate_text_feedback("I goes home. Then sleep.", "I goes home.")

        prompt = generate.await_args.args[2][0]
        assert "Full text:\nI goes home. Then sleep." in prompt
        assert "Selected text:\nI goes home." in prompt


class TestGenerate:
    @pytest.mark.asyncio
    async def test_upstream_error_is_wrapped(self, generator):
        model = MagicMock()
        model.generate_content_async = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        with patch("services.feedback_generator.genai.GenerativeModel", return_value=model):
            with pytest.raises(FeedbackGenerationError, match="quota exceeded"):
                await generator.generate_text_feedback("", "Hello")

    @pytest.mark.asyncio
    async def test_json_mode_and_timeout_requested(self, generator):
        part = SimpleNamespace(text='{"explanation": "ok"}')
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=response)
        with patch("services.feedback_generator.genai.GenerativeModel", return_value=model) as model_cls:
            content = await generator.generate_text_feedback("", "Hello")

        assert content == '{"explanation": "ok"}'
        config = model_cls.call_args.kwargs["generation_config"]
        assert config.response_mime_type == "application/json"
        assert "system_instruction" in model_cls.call_args.kwargs
        assert model.generate_content_async.await_args.kwargs["request_options"] == {"timeout": generator.timeout}


class TestExtractText:
    def test_joins_parts(self):
        parts = [SimpleNamespace(text='{"a": '), SimpleNamespace(text="1}")]
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])
        assert FeedbackGenerator._extract_text(response) == '{"a": 1}'

    def test_no_candidates_is_none(self):
        assert FeedbackGenerator._extract_text(SimpleNamespace(candidates=[])) is None

    def test_empty_parts_is_none(self):
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))])
        assert FeedbackGenerator._extract_text(response) is None


class TestConfigure:
    def test_key_is_configured_globally(self):
        with patch("services.feedback_generator.genai.configure") as configure:
            FeedbackGenerator(api_key="key-a")
            FeedbackGenerator(api_key="key-b")

        assert [c.kwargs["api_key"] for c in configure.call_args_list] == ["key-a", "key-b"]

    def test_no_key_skips_configure(self, monkeypatch):
        monkeypatch.setattr("config.Config.GEMINI_API_KEY", None)
        with patch("services.feedback_generator.genai.configure") as configure:
            FeedbackGenerator()

        configure.assert_not_called()
