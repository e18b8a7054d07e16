from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config
from models import PronunciationIssue
from services.score_normalizer import normalize_score

DEFAULT_SUMMARY = "Feedback is not available."
DEFAULT_CONSONANT_COMMENT = "No consonant-specific feedback."
DEFAULT_VOWEL_COMMENT = "No vowel-specific feedback."
DEFAULT_STRESS_COMMENT = "No stress-specific feedback."


def sanitize_text(value: Any) -> Optional[str]:
    """Return the trimmed text, or None when the value is not usable text."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def is_strict_true(value: Any) -> bool:
    # Identity check: 1, "true" and other truthy values do not count
    return value is True


def sanitize_issues(value: Any, limit: int = Config.MAX_PRONUNCIATION_ISSUES) -> List[PronunciationIssue]:
    if not isinstance(value, list):
        return []

    issues = []
    for entry in value:
        if len(issues) >= limit:
            break
        if not isinstance(entry, dict):
            continue
        expected = sanitize_text(entry.get("expected"))
        heard = sanitize_text(entry.get("heard"))
        advice = sanitize_text(entry.get("advice"))
        if expected and heard and advice:
            issues.append(PronunciationIssue(expected=expected, heard=heard, advice=advice))
    return issues


def sanitize_tips(value: Any, limit: int = Config.MAX_PRACTICE_TIPS) -> List[str]:
    if not isinstance(value, list):
        return []
    return [tip for tip in value if isinstance(tip, str)][:limit]


class SanitizedFeedback(BaseModel):
    """Schema-validation pass over untrusted generation output.

    Every field accepts any input and either keeps a safe value or falls back
    to its default, so validation never raises on a malformed model answer.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    overallScore: Optional[int] = None
    aiTimingScore: Optional[int] = None
    targetMatchScore: Optional[int] = None
    englishConfidence: Optional[int] = None
    isTargetSentence: bool = False
    transcribedText: Optional[str] = None
    summary: str = DEFAULT_SUMMARY
    consonantComment: str = DEFAULT_CONSONANT_COMMENT
    vowelComment: str = DEFAULT_VOWEL_COMMENT
    stressComment: str = DEFAULT_STRESS_COMMENT
    pronunciationIssues: List[PronunciationIssue] = Field(default_factory=list)
    practiceTips: List[str] = Field(default_factory=list)

    @field_validator("overallScore", "aiTimingScore", "targetMatchScore", "englishConfidence", mode="before")
    @classmethod
    def _normalize_score(cls, value: Any) -> Optional[int]:
        return normalize_score(value)

    @field_validator("isTargetSentence", mode="before")
    @classmethod
    def _strict_bool(cls, value: Any) -> bool:
        return is_strict_true(value)

    @field_validator("transcribedText", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return sanitize_text(value)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, value: Any) -> str:
        return sanitize_text(value) or DEFAULT_SUMMARY

    @field_validator("consonantComment", mode="before")
    @classmethod
    def _consonant(cls, value: Any) -> str:
        return sanitize_text(value) or DEFAULT_CONSONANT_COMMENT

    @field_validator("vowelComment", mode="before")
    @classmethod
    def _vowel(cls, value: Any) -> str:
        return sanitize_text(value) or DEFAULT_VOWEL_COMMENT

    @field_validator("stressComment", mode="before")
    @classmethod
    def _stress(cls, value: Any) -> str:
        return sanitize_text(value) or DEFAULT_STRESS_COMMENT

    @field_validator("pronunciationIssues", mode="before")
    @classmethod
    def _issues(cls, value: Any) -> List[PronunciationIssue]:
        return sanitize_issues(value)

    @field_validator("practiceTips", mode="before")
    @classmethod
    def _tips(cls, value: Any) -> List[str]:
        return sanitize_tips(value)

    @classmethod
    def from_candidate(cls, candidate: Any) -> "SanitizedFeedback":
        if not isinstance(candidate, dict):
            candidate = {}
        return cls.model_validate(candidate)
