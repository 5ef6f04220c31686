import math
from typing import Optional

MIN_PERCENT = 1
# 100 stays free so a "perfect match" can be told apart later
MAX_PERCENT = 99


def to_percent(similarity: Optional[float]) -> int:
    """Convert a similarity score to a certainty percentage in [1, 99].

    Rounds half up. Scores outside [0, 1] are tolerated and clamped; a missing
    or NaN score counts as the 1% floor.
    """
    if similarity is None or math.isnan(similarity):
        return MIN_PERCENT

    scaled = min(max(similarity * 100, MIN_PERCENT), MAX_PERCENT)
    return int(math.floor(scaled + 0.5))
