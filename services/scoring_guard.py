import math
from typing import Optional

from config import Config


class ScoringGuard:
    def __init__(self):
        self.confidence_threshold = Config.ENGLISH_CONFIDENCE_THRESHOLD
        self.unverified_cap = Config.UNVERIFIED_SCORE_CAP

    def guard(self,
              ai_overall: Optional[int],
              target_match: Optional[int],
              english_confidence: Optional[int],
              is_target_sentence: bool) -> int:
        """Combine the model's sub-scores into the exposed overall score.

        The target match score acts as a ceiling on the overall score, and
        unless the model both claims the target sentence was spoken and is
        confident the speech is English, the result is capped low.
        """
        if ai_overall is None:
            base = 0
        elif target_match is None:
            base = ai_overall
        else:
            base = min(ai_overall, target_match)

        confident = english_confidence is None or english_confidence >= self.confidence_threshold
        if is_target_sentence is True and confident:
            guarded = base
        else:
            guarded = min(base, self.unverified_cap)

        return max(0, min(100, math.floor(guarded + 0.5)))
