"""Pronunciation feedback pipeline.

Transcribe the recording, ask the generation provider for feedback (straight
from the audio first, from the transcript and word timings if that fails),
then sanitize, normalize and guard the answer into a PronunciationFeedback.
"""
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from models import AudioUpload, PronunciationFeedback, TranscriptionResult
from services.feedback_generator import FeedbackGenerationError, FeedbackGenerator
from services.feedback_sanitizer import SanitizedFeedback
from services.json_utils import parse_model_json
from services.scoring_guard import ScoringGuard
from services.text_compare import calculate_accuracy
from services.transcription import TranscriptionService

FALLBACK_SUMMARY = "Feedback is not available."
FALLBACK_COMMENT = "No analysis."
SPEECH_NOT_DETECTED_SUMMARY = "Speech was not detected clearly. Please try again."

GenerationStrategy = Tuple[str, Callable[[], Awaitable[Optional[str]]]]


def build_fallback_feedback(target_text: str,
                            transcribed_text: str = "",
                            summary: str = FALLBACK_SUMMARY) -> PronunciationFeedback:
    """Fresh low-information record for when no real analysis is possible."""
    return PronunciationFeedback(
        overall_score=0,
        ai_timing_score=None,
        target_match_score=None,
        english_confidence=None,
        is_target_sentence=False,
        summary=summary,
        consonant_comment=FALLBACK_COMMENT,
        vowel_comment=FALLBACK_COMMENT,
        stress_comment=FALLBACK_COMMENT,
        pronunciation_issues=[],
        practice_tips=[],
        target_text=target_text,
        transcribed_text=transcribed_text,
    )


def normalize_feedback(candidate: Any,
                       target_text: str,
                       fallback_transcribed_text: str,
                       guard: Optional[ScoringGuard] = None) -> PronunciationFeedback:
    guard = guard or ScoringGuard()
    sanitized = SanitizedFeedback.from_candidate(candidate)

    overall_score = guard.guard(
        sanitized.overallScore,
        sanitized.targetMatchScore,
        sanitized.englishConfidence,
        sanitized.isTargetSentence,
    )

    return PronunciationFeedback(
        overall_score=overall_score,
        ai_timing_score=sanitized.aiTimingScore,
        target_match_score=sanitized.targetMatchScore,
        english_confidence=sanitized.englishConfidence,
        is_target_sentence=sanitized.isTargetSentence,
        summary=sanitized.summary,
        consonant_comment=sanitized.consonantComment,
        vowel_comment=sanitized.vowelComment,
        stress_comment=sanitized.stressComment,
        pronunciation_issues=sanitized.pronunciationIssues,
        practice_tips=sanitized.practiceTips,
        target_text=target_text,
        transcribed_text=sanitized.transcribedText or fallback_transcribed_text,
    )


class FeedbackAssembler:
    def __init__(self,
                 transcription_service: Optional[TranscriptionService] = None,
                 feedback_generator: Optional[FeedbackGenerator] = None,
                 scoring_guard: Optional[ScoringGuard] = None):
        self.transcription_service = transcription_service or TranscriptionService()
        self.feedback_generator = feedback_generator or FeedbackGenerator()
        self.scoring_guard = scoring_guard or ScoringGuard()

    async def assemble(self, target_text: str, audio: AudioUpload, request_id: str = "-") -> PronunciationFeedback:
        transcription = await self.transcription_service.transcribe(audio)
        transcribed_text = transcription.text.strip()

        if not transcribed_text:
            logging.info(f"[{request_id}] Empty transcript, skipping feedback generation")
            return build_fallback_feedback(target_text, summary=SPEECH_NOT_DETECTED_SUMMARY)

        logging.info(
            f"[{request_id}] Transcript has {len(transcription.words)} timed words, "
            f"word accuracy vs target {calculate_accuracy(target_text, transcribed_text)}%"
        )

        content = await self._generate(target_text, audio, transcription, request_id)
        if not content:
            logging.warning(f"[{request_id}] Generation returned no content, using fallback record")
            return build_fallback_feedback(target_text, transcribed_text=transcribed_text)

        parsed = parse_model_json(content)
        return normalize_feedback(parsed, target_text, transcribed_text, self.scoring_guard)

    def build_generation_strategies(self,
                                    target_text: str,
                                    audio: AudioUpload,
                                    transcription: TranscriptionResult) -> List[GenerationStrategy]:
        """Ordered strategies; direct audio carries timing and prosody so it goes first."""
        return [
            ("audio", lambda: self.feedback_generator.generate_from_audio(
                target_text, audio.data, audio.content_type)),
            ("transcript", lambda: self.feedback_generator.generate_from_transcript(
                target_text, transcription.text.strip(), transcription.words)),
        ]

    async def _generate(self,
                        target_text: str,
                        audio: AudioUpload,
                        transcription: TranscriptionResult,
                        request_id: str) -> Optional[str]:
        errors = []
        for name, strategy in self.build_generation_strategies(target_text, audio, transcription):
            try:
                content = await strategy()
            except Exception as e:
                logging.warning(f"[{request_id}] Feedback generation via {name} failed: {e}")
                errors.append(f"[{name}] {e}")
                continue

            logging.info(f"[{request_id}] Feedback generated via {name}")
            return content

        raise FeedbackGenerationError(" | ".join(errors))
