from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

ANALYSIS_MODE = "audio_transcription_timing"


class AudioUpload(BaseModel):
    filename: str = "recording.webm"
    content_type: str = ""
    data: bytes


class WordTiming(BaseModel):
    word: str
    start: float
    end: float


class TranscriptionResult(BaseModel):
    text: str = ""
    words: List[WordTiming] = Field(default_factory=list)


class PronunciationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    expected: str
    heard: str
    advice: str


class PronunciationFeedback(BaseModel):
    """Final feedback record returned to the client. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    overall_score: int = Field(..., ge=0, le=100, alias="overallScore")
    ai_timing_score: Optional[int] = Field(None, ge=0, le=100, alias="aiTimingScore")
    target_match_score: Optional[int] = Field(None, ge=0, le=100, alias="targetMatchScore")
    english_confidence: Optional[int] = Field(None, ge=0, le=100, alias="englishConfidence")
    is_target_sentence: bool = Field(False, alias="isTargetSentence")
    summary: str
    consonant_comment: str = Field(..., alias="consonantComment")
    vowel_comment: str = Field(..., alias="vowelComment")
    stress_comment: str = Field(..., alias="stressComment")
    pronunciation_issues: List[PronunciationIssue] = Field(default_factory=list, alias="pronunciationIssues")
    practice_tips: List[str] = Field(default_factory=list, alias="practiceTips")
    target_text: str = Field("", alias="targetText")
    transcribed_text: str = Field("", alias="transcribedText")
    analysis_mode: str = Field(ANALYSIS_MODE, alias="analysisMode")


class TextFeedback(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    selected_text: str = Field(..., alias="selectedText")
    explanation: str
    suggestions: List[str] = Field(default_factory=list)


class TextFeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_text: Optional[str] = Field(None, alias="fullText")
    selected_text: Optional[str] = Field(None, alias="selectedText")


class SpeechRequest(BaseModel):
    text: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    message: str
