import logging
from typing import Any, Optional

from config import Config
from models import TextFeedback
from services.feedback_generator import FeedbackGenerator
from services.feedback_sanitizer import sanitize_text
from services.json_utils import parse_model_json

DEFAULT_EXPLANATION = "No explanation available."


def normalize_text_feedback(candidate: Any, selected_text: str) -> TextFeedback:
    if not isinstance(candidate, dict):
        candidate = {}

    raw_suggestions = candidate.get("suggestions")
    suggestions = []
    if isinstance(raw_suggestions, list):
        suggestions = [s for s in (sanitize_text(item) for item in raw_suggestions) if s]

    return TextFeedback(
        selected_text=selected_text,
        explanation=sanitize_text(candidate.get("explanation")) or DEFAULT_EXPLANATION,
        suggestions=suggestions[:Config.MAX_SUGGESTIONS],
    )


class TextFeedbackService:
    def __init__(self, feedback_generator: Optional[FeedbackGenerator] = None):
        self.feedback_generator = feedback_generator or FeedbackGenerator()

    async def review(self, full_text: str, selected_text: str) -> TextFeedback:
        content = await self.feedback_generator.generate_text_feedback(full_text, selected_text)
        if not content:
            logging.warning("Text feedback generation returned no content")
            return normalize_text_feedback({}, selected_text)

        return normalize_text_feedback(parse_model_json(content), selected_text)
