import json
import re
from typing import Any

# Only a fence wrapping the whole answer is stripped
_LEADING_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")


class FeedbackParseError(Exception):
    """Generation output was present but could not be parsed as JSON."""


def strip_code_fence(text: str) -> str:
    """
    Remove a markdown code fence surrounding model output.
    Both a ```json fence (any case) and an unlabelled ``` fence are stripped.
    Text without a fence is returned stripped.
    """
    text = _LEADING_FENCE_RE.sub("", text)
    text = _TRAILING_FENCE_RE.sub("", text)
    return text.strip()


def parse_model_json(content: str) -> Any:
    try:
        return json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise FeedbackParseError(f"Model returned invalid JSON: {e}") from e
