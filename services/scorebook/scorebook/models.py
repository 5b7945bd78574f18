"""Domain models for OCR input, table geometry and extracted scorebook data."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

TEMPLATE_NAME = "Mark 5 Basketball Scorebook"

# Printed left-to-right order of the scoring summary block.
SCORING_COLUMNS: Tuple[str, ...] = ("fg2_made", "fg3_made", "ft_att", "ft_made", "total_points")

_BBOX_KEYS = ("x1", "y1", "x2", "y2", "x3", "y3", "x4", "y4")


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


@dataclass(frozen=True, slots=True)
class BBox:
    """Quadrilateral in pixel space, corners clockwise from top-left."""

    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float
    x4: float
    y4: float

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["BBox"]:
        if not isinstance(raw, dict):
            return None
        values = [_as_number(raw.get(key)) for key in _BBOX_KEYS]
        if any(value is None for value in values):
            return None
        return cls(*values)

    @property
    def left(self) -> float:
        return min(self.x1, self.x4)

    @property
    def right(self) -> float:
        return max(self.x2, self.x3)

    @property
    def y_center(self) -> float:
        return (self.y1 + self.y3) / 2.0

    def to_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in _BBOX_KEYS}


@dataclass(frozen=True, slots=True)
class OcrLine:
    text: str
    confidence: Optional[float] = None
    bbox: Optional[BBox] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["OcrLine"]:
        if not isinstance(raw, dict):
            return None
        text = raw.get("text")
        return cls(
            text=text if isinstance(text, str) else "",
            confidence=_as_number(raw.get("confidence")),
            bbox=BBox.from_dict(raw.get("bbox")),
        )


@dataclass(frozen=True, slots=True)
class OcrPage:
    width: float
    height: float
    lines: Tuple[OcrLine, ...] = ()
    page_number: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["OcrPage"]:
        if not isinstance(raw, dict):
            return None
        raw_lines = raw.get("lines")
        lines = []
        for item in raw_lines if isinstance(raw_lines, list) else []:
            line = OcrLine.from_dict(item)
            if line is not None:
                lines.append(line)
        page_number = raw.get("pageNumber")
        # Missing or zero dimensions normalise against 1.
        return cls(
            width=_as_number(raw.get("width")) or 1.0,
            height=_as_number(raw.get("height")) or 1.0,
            lines=tuple(lines),
            page_number=page_number if isinstance(page_number, int) else None,
        )


@dataclass(frozen=True, slots=True)
class Token:
    """One positioned OCR fragment.

    ``y_center`` and ``center_x`` are normalised to the page; ``left`` and
    ``right`` stay in pixels. ``index`` is the source line position and is the
    final tie-breaker for every sort.
    """

    index: int
    text: str
    confidence: Optional[float]
    y_center: float
    left: float
    right: float
    center_x: float
    bbox: BBox

    @property
    def upper(self) -> str:
        return self.text.upper()


@dataclass(frozen=True, slots=True)
class Row:
    y_center: float
    tokens: Tuple[Token, ...]

    @property
    def text(self) -> str:
        return " ".join(token.text for token in self.tokens)


@dataclass(frozen=True, slots=True)
class ColumnRange:
    left: float
    right: float

    @property
    def center(self) -> float:
        return (self.left + self.right) / 2.0

    def to_dict(self) -> Dict[str, float]:
        return {"left": self.left, "right": self.right}


@dataclass(frozen=True, slots=True)
class AnchorSet:
    """Normalised column ranges located from the printed table header."""

    has_player_table: bool = False
    header_y: Optional[float] = None
    name: Optional[ColumnRange] = None
    number: Optional[ColumnRange] = None
    position: Optional[ColumnRange] = None
    quarters: Optional[ColumnRange] = None
    fouls: Optional[ColumnRange] = None
    scoring_left: Optional[float] = None
    fg2_made: Optional[ColumnRange] = None
    fg3_made: Optional[ColumnRange] = None
    ft_att: Optional[ColumnRange] = None
    ft_made: Optional[ColumnRange] = None
    total_points: Optional[ColumnRange] = None
    turnovers: Optional[ColumnRange] = None
    interpolated: Tuple[str, ...] = ()

    def column(self, name: str) -> Optional[ColumnRange]:
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "has_player_table": self.has_player_table,
            "header_y": self.header_y,
            "scoring_left": self.scoring_left,
            "interpolated": list(self.interpolated),
        }
        for name in ("name", "number", "position", "quarters", "fouls", "turnovers") + SCORING_COLUMNS:
            column = self.column(name)
            out[name] = column.to_dict() if column is not None else None
        return out


@dataclass(frozen=True, slots=True)
class ShootingStats:
    fg2_made: Optional[int] = None
    fg2_att: Optional[int] = None
    fg3_made: Optional[int] = None
    fg3_att: Optional[int] = None
    ft_made: Optional[int] = None
    ft_att: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "fg2_made": self.fg2_made,
            "fg2_att": self.fg2_att,
            "fg3_made": self.fg3_made,
            "fg3_att": self.fg3_att,
            "ft_made": self.ft_made,
            "ft_att": self.ft_att,
        }


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    row_index: int
    player_name: Optional[str] = None
    player_number: Optional[str] = None
    personal_fouls_total: Optional[int] = None
    shooting: ShootingStats = field(default_factory=ShootingStats)
    total_points: Optional[int] = None
    confidence: float = 0.0
    flags: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_index": self.row_index,
            "player_name": self.player_name,
            "player_number": self.player_number,
            "personal_fouls_total": self.personal_fouls_total,
            "shooting": self.shooting.to_dict(),
            "total_points": self.total_points,
            "confidence": self.confidence,
            "flags": list(self.flags),
        }


@dataclass(frozen=True, slots=True)
class TeamTotals:
    shooting: ShootingStats = field(default_factory=ShootingStats)
    total_points: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"shooting": self.shooting.to_dict(), "total_points": self.total_points}


@dataclass(frozen=True, slots=True)
class ValidationCheck:
    name: str
    passed: bool
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "passed": self.passed, "details": self.details}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    checks: Tuple[ValidationCheck, ...] = ()
    review_reasons: Tuple[str, ...] = ()

    @property
    def needs_review(self) -> bool:
        return len(self.review_reasons) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checks": [check.to_dict() for check in self.checks],
            "needs_review": self.needs_review,
            "review_reasons": list(self.review_reasons),
        }


@dataclass(frozen=True, slots=True)
class Quality:
    overall_confidence: float
    issues: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"overall_confidence": self.overall_confidence, "issues": list(self.issues)}


@dataclass(frozen=True, slots=True)
class ScorebookResult:
    is_blank: bool
    quality: Quality
    players: Tuple[PlayerRecord, ...] = ()
    team_totals: TeamTotals = field(default_factory=TeamTotals)
    validation: ValidationResult = field(default_factory=ValidationResult)
    template: str = TEMPLATE_NAME

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template": self.template,
            "is_blank": self.is_blank,
            "quality": self.quality.to_dict(),
            "players": [player.to_dict() for player in self.players],
            "team_totals": self.team_totals.to_dict(),
            "validation": self.validation.to_dict(),
        }


def player_sum(players: Iterable[PlayerRecord]) -> int:
    """Sum of printed player points, treating missing values as zero."""
    return sum(player.total_points or 0 for player in players)
