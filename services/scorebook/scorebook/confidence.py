"""Per-player and page-level quality scores.

Player score = mean OCR confidence of the row's tokens (0.5 when the engine
reported none), then multiplied by:
  0.7 when total points is missing
  0.8 when the name is missing
  0.9 when any flag was raised
Page score = mean player score - 0.05 per quality issue, clamped to [0, 1].
Scores are rounded half-up to two decimals.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

DEFAULT_ROW_CONFIDENCE = 0.5
MISSING_POINTS_FACTOR = 0.7
MISSING_NAME_FACTOR = 0.8
FLAGGED_FACTOR = 0.9
ISSUE_PENALTY = 0.05


def clamp01(v: float) -> float:
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


def round2(v: float) -> float:
    return float(Decimal(str(v)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def player_confidence(
    token_confidences: Iterable[Optional[float]],
    total_points: Optional[int],
    player_name: Optional[str],
    flags: Sequence[str],
) -> float:
    known = [c for c in token_confidences if c is not None]
    score = sum(known) / len(known) if known else DEFAULT_ROW_CONFIDENCE
    if total_points is None:
        score *= MISSING_POINTS_FACTOR
    if not player_name:
        score *= MISSING_NAME_FACTOR
    if flags:
        score *= FLAGGED_FACTOR
    return round2(clamp01(score))


def overall_confidence(player_scores: Sequence[float], issue_count: int) -> float:
    if not player_scores:
        return 0.0
    score = sum(player_scores) / len(player_scores) - ISSUE_PENALTY * issue_count
    return round2(clamp01(score))
