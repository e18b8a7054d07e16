import math
from typing import Any, Optional


def normalize_score(value: Any) -> Optional[int]:
    """Map a model-reported score onto an integer in [0, 100].

    Models sometimes answer on a 1-10 scale even when asked for 0-100, so any
    value in (0, 10] is multiplied by 10. Anything that is not a finite number
    (including booleans and numeric strings) yields None.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None

    scaled = value * 10 if 0 < value <= 10 else value
    if isinstance(scaled, int):
        # Arbitrarily large JSON integers must not be converted to float
        rounded = scaled
    else:
        # Half-up rounding, not banker's rounding
        rounded = math.floor(scaled + 0.5)
    return max(0, min(100, rounded))
