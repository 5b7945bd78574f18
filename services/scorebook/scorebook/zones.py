"""Classify table rows and split player rows into name, fouls and scoring zones."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import EngineConfig
from .labels import TECHNICAL_PATTERN, TOTALS_PATTERN, skip_reason
from .models import AnchorSet, Row, Token
from .numeral import is_bare_integer, is_quarter_indicator, jersey_number

ROW_SKIP = "skip"
ROW_TOTALS = "totals"
ROW_PLAYER = "player"

_LETTER = re.compile(r"[A-Za-z]")


@dataclass(frozen=True, slots=True)
class RowKind:
    kind: str
    reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PlayerZones:
    name: Tuple[Token, ...] = ()
    fouls: Tuple[Token, ...] = ()
    scoring: Tuple[Token, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.fouls or self.scoring)


def is_below_header(row: Row, anchors: AnchorSet, config: EngineConfig) -> bool:
    header_y = anchors.header_y or 0.0
    return row.y_center > header_y + config.header_buffer


def classify_row(row: Row) -> RowKind:
    text = row.text.strip()
    if not text:
        return RowKind(ROW_SKIP, "empty")
    reason = skip_reason(text)
    if reason is not None:
        return RowKind(ROW_SKIP, reason)
    upper = text.upper()
    if TOTALS_PATTERN.search(upper) and not TECHNICAL_PATTERN.search(upper):
        return RowKind(ROW_TOTALS)
    return RowKind(ROW_PLAYER)


def scoring_boundary(anchors: AnchorSet, config: EngineConfig) -> float:
    if anchors.scoring_left is not None:
        return anchors.scoring_left
    return config.default_scoring_left


def partition_row(row: Row, anchors: AnchorSet, config: EngineConfig) -> PlayerZones:
    """Split a player row by each token's horizontal center.

    Scoring wins over fouls where the two blocks overlap. Tokens between the
    fouls block and the scoring block (quarter-played markers) belong to no
    zone and are dropped.
    """
    scoring_left = scoring_boundary(anchors, config)
    fouls = anchors.fouls
    name_right = min(fouls.left, scoring_left) if fouls is not None else scoring_left

    name: List[Token] = []
    foul_tokens: List[Token] = []
    scoring: List[Token] = []
    for token in row.tokens:
        x = token.center_x
        if x >= scoring_left:
            scoring.append(token)
        elif fouls is not None and fouls.left <= x <= fouls.right:
            foul_tokens.append(token)
        elif x < name_right:
            name.append(token)

    return PlayerZones(name=tuple(name), fouls=tuple(foul_tokens), scoring=tuple(scoring))


def extract_jersey_number(name_tokens: Sequence[Token], anchors: AnchorSet) -> Tuple[Optional[str], Optional[Token]]:
    """Pick the numeric name-zone token closest to the jersey column.

    Without a jersey anchor the first candidate from the left is taken.
    """
    best: Optional[Tuple[str, Token]] = None
    best_dist: Optional[float] = None
    for token in name_tokens:
        number = jersey_number(token.text)
        if number is None:
            continue
        if anchors.number is None:
            return number, token
        dist = abs(token.center_x - anchors.number.center)
        if best_dist is None or dist < best_dist:
            best = (number, token)
            best_dist = dist
    if best is None:
        return None, None
    return best


def extract_player_name(name_tokens: Sequence[Token], jersey_token: Optional[Token]) -> Optional[str]:
    fragments: List[str] = []
    for token in name_tokens:
        if jersey_token is not None and token.index == jersey_token.index:
            continue
        text = token.text.strip()
        if is_bare_integer(text) or is_quarter_indicator(text):
            continue
        if _LETTER.search(text):
            fragments.append(text)
    return " ".join(fragments) if fragments else None
