"""Map numerals in the scoring zone onto the scoring summary columns.

Mapping runs as an ordered list of strategies. Each strategy returns a
``ColumnAssignment`` or ``None`` for "no opinion", and the first assignment
wins. Anchored matching comes first; the positional reading only runs when
neither the total points nor the 2-point column was located.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .models import AnchorSet, ColumnRange, ShootingStats, Token
from .numeral import parse_numerics

# Each column is matched on its own; one numeral may serve two columns whose windows overlap.
MAPPING_ORDER: Tuple[str, ...] = ("total_points", "fg2_made", "fg3_made", "ft_att", "ft_made")

# Right-to-left reading of the Mark 5 summary block. Any other print order is mis-mapped.
POSITIONAL_ORDER: Tuple[str, ...] = ("total_points", "ft_made", "ft_att", "fg3_made", "fg2_made")

FLAG_POSITIONAL = (
    "scoring_columns_by_position: values assigned right-to-left as "
    "total_points, ft_made, ft_att, fg3_made, fg2_made; no column headers found"
)


@dataclass(frozen=True, slots=True)
class NumericToken:
    value: int
    center_x: float
    order: int
    confidence: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ColumnAssignment:
    strategy: str
    values: Dict[str, int] = field(default_factory=dict)
    flags: Tuple[str, ...] = ()

    def shooting(self) -> ShootingStats:
        # Field-goal attempts are never printed in this summary block.
        return ShootingStats(
            fg2_made=self.values.get("fg2_made"),
            fg3_made=self.values.get("fg3_made"),
            ft_made=self.values.get("ft_made"),
            ft_att=self.values.get("ft_att"),
        )

    @property
    def total_points(self) -> Optional[int]:
        return self.values.get("total_points")


ColumnStrategy = Callable[[Sequence[NumericToken], AnchorSet, EngineConfig], Optional[ColumnAssignment]]


def numeric_tokens(tokens: Sequence[Token]) -> List[NumericToken]:
    """Every integer found in ``tokens``, positioned at its token's center."""
    out: List[NumericToken] = []
    for token in tokens:
        for value in parse_numerics(token.text):
            out.append(
                NumericToken(
                    value=value,
                    center_x=token.center_x,
                    order=len(out),
                    confidence=token.confidence,
                )
            )
    return out


def closest_numeric(
    numerics: Sequence[NumericToken],
    target: ColumnRange,
    tolerance: float,
) -> Optional[NumericToken]:
    best: Optional[NumericToken] = None
    best_dist: Optional[float] = None
    for candidate in numerics:
        dist = abs(candidate.center_x - target.center)
        if dist >= tolerance:
            continue
        if best_dist is None or dist < best_dist:
            best = candidate
            best_dist = dist
    return best


def anchored_columns(
    numerics: Sequence[NumericToken],
    anchors: AnchorSet,
    config: EngineConfig,
) -> Optional[ColumnAssignment]:
    if anchors.total_points is None and anchors.fg2_made is None:
        return None

    values: Dict[str, int] = {}
    for column in MAPPING_ORDER:
        target = anchors.column(column)
        if target is None:
            continue
        match = closest_numeric(numerics, target, config.column_tolerance)
        if match is not None:
            values[column] = match.value
    return ColumnAssignment(strategy="anchored", values=values)


def positional_columns(
    numerics: Sequence[NumericToken],
    anchors: AnchorSet,
    config: EngineConfig,
) -> Optional[ColumnAssignment]:
    ordered = sorted(numerics, key=lambda n: (-n.center_x, n.order))
    values = {column: numeric.value for column, numeric in zip(POSITIONAL_ORDER, ordered)}
    flags = (FLAG_POSITIONAL,) if values else ()
    return ColumnAssignment(strategy="positional", values=values, flags=flags)


COLUMN_STRATEGIES: Tuple[ColumnStrategy, ...] = (anchored_columns, positional_columns)


def map_columns(
    numerics: Sequence[NumericToken],
    anchors: AnchorSet,
    config: EngineConfig,
    strategies: Sequence[ColumnStrategy] = COLUMN_STRATEGIES,
) -> ColumnAssignment:
    for strategy in strategies:
        assignment = strategy(numerics, anchors, config)
        if assignment is not None:
            return assignment
    return ColumnAssignment(strategy="none")
