"""Read the printed team totals row."""

from __future__ import annotations

from .columns import map_columns, numeric_tokens
from .config import EngineConfig
from .models import AnchorSet, Row, TeamTotals


def extract_team_totals(row: Row, anchors: AnchorSet, config: EngineConfig) -> TeamTotals:
    """Map the totals row with the player column mapper.

    When no numeral lands on the total points column the rightmost numeral on
    the row is taken as the team's points.
    """
    numerics = numeric_tokens(row.tokens)
    assignment = map_columns(numerics, anchors, config)

    total_points = assignment.total_points
    if total_points is None and numerics:
        rightmost = sorted(numerics, key=lambda n: (-n.center_x, n.order))[0]
        total_points = rightmost.value

    return TeamTotals(shooting=assignment.shooting(), total_points=total_points)
