"""Printed vocabulary of the Mark 5 scorebook.

Header labels are a lookup table rather than inline conditionals: each entry
names the anchor it feeds, its pattern and its rank. Rank 0 is the printed
label, higher ranks are aliases seen on other print runs or in noisy OCR. A
lower-ranked match replaces a higher-ranked one; equal ranks keep the first.
A new scorebook print adds rows here without touching the detector.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

__all__ = [
    "LabelPattern",
    "HEADER_LABELS",
    "SKIP_ROW_PATTERNS",
    "TOTALS_PATTERN",
    "TECHNICAL_PATTERN",
    "strip_template_vocabulary",
    "skip_reason",
]


@dataclass(frozen=True, slots=True)
class LabelPattern:
    anchor: str
    pattern: Pattern[str]
    rank: int = 0
    exclude: Optional[Pattern[str]] = None
    max_length: Optional[int] = None

    def matches(self, text: str) -> bool:
        if self.max_length is not None and len(text) >= self.max_length:
            return False
        if not self.pattern.search(text):
            return False
        return not (self.exclude is not None and self.exclude.search(text))


def _label(anchor: str, pattern: str, rank: int = 0, exclude: Optional[str] = None,
           max_length: Optional[int] = None) -> LabelPattern:
    return LabelPattern(
        anchor=anchor,
        pattern=re.compile(pattern),
        rank=rank,
        exclude=re.compile(exclude) if exclude else None,
        max_length=max_length,
    )


# Matched against upper-cased, trimmed line text.
HEADER_LABELS: Tuple[LabelPattern, ...] = (
    _label("name", r"\bPLAYERS?\s*NAMES?\b"),
    _label("name", r"\bPLAYERS?\b", rank=1),
    _label("number", r"\bNO\.?(?!\w)", max_length=10),
    _label("number", r"^(?:#|NUM\.?|NUMBER)$", rank=1),
    _label("position", r"\bPOS(?:ITION)?\.?(?!\w)", max_length=12),
    _label("quarters", r"\bQUARTERS?\s*PLAYED\b"),
    _label("quarters", r"^(?:QUARTERS?|QTRS?\.?)$", rank=1),
    _label("fouls", r"\bPERSONAL\s*FOULS?\b"),
    _label("fouls", r"^(?:PERSONALS?|P\.?\s?F\.?)$", rank=1),
    # Bare "FOULS" only; the team fouls banner must not become the personal fouls block.
    _label("fouls", r"^FOULS?$", rank=2),
    _label("scoring_summary", r"\bSCORING\s*SUMM"),
    _label("scoring_summary", r"\bSUMMARY\b", rank=1),
    _label("fg2_made", r"\b2\s*(?:PTS?|P|FGM?)\b|\b2\s*POINTS?\b"),
    _label("fg2_made", r"\bFGM?\b", rank=1, exclude=r"\b3\s*FG|\bFT"),
    _label("fg3_made", r"\b3\s*(?:PTS?|P|FGM?)\b|\b3\s*POINTS?\b"),
    _label("fg3_made", r"\bTHREES?\b", rank=1),
    _label("ft_att", r"\bFTA\b"),
    _label("ft_att", r"\bFT\s*ATT(?:EMPTS?|\.)?(?!\w)", rank=1),
    _label("ft_made", r"\bFTM\b"),
    _label("ft_made", r"\bFT\s*MADE\b", rank=1),
    _label("ft_made", r"^FT$", rank=2),
    _label("total_points", r"\bTP\b"),
    _label("total_points", r"\bTOTAL\s*P(?:OINTS|TS)?\b", rank=1),
    _label("total_points", r"\bPTS\b", rank=2, exclude=r"\b[23]\s*PTS\b"),
    _label("turnovers", r"\bTURN\s*OVERS?\b"),
    _label("turnovers", r"^T\.?O\.?$", rank=1),
)

SKIP_ROW_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("running_score", re.compile(r"\bRUNNING\s*SCORE\b")),
    ("time_outs", re.compile(r"\bTIME[\s-]*OUTS?\b")),
    ("technicals", re.compile(r"\bTECHNICALS?\b|\bTECH\.?\s*FOULS?\b")),
    ("officials", re.compile(r"\bCOACH(?:ES)?\b|\bSCORERS?\b|\bTIMERS?\b|\bREFEREES?\b|\bUMPIRES?\b")),
    ("date_location", re.compile(r"\bDATE\b|\bLOCATION\b")),
    (
        "quarter_labels",
        re.compile(r"\bQUARTERS?\b|\bQTRS?\b|\bPERIODS?\b|\bHALF\b|\bOVERTIME\b"),
    ),
    ("team_fouls", re.compile(r"\bTEAM\s*FOULS?\b")),
    ("header_echo", re.compile(r"\bPOS\b|\bPLAYERS?\b|(?<!\w)NO\.(?!\w)")),
)

TOTALS_PATTERN = re.compile(r"\bTOTALS?\b")
TECHNICAL_PATTERN = re.compile(r"\bTECH")

_TEMPLATE_VOCABULARY = re.compile(
    r"\b(?:"
    r"MARK|BASKETBALL|SCOREBOOK|HOME|VISITORS?|TEAM|PLAYERS?|NAMES?|NO|NUM|NUMBER|POS|POSITION|"
    r"QUARTERS?|QTRS?|PLAYED|PERSONAL|FOULS?|PF|SCORING|SUMMARY|FG|FGM|FGA|FT|FTA|FTM|PTS?|"
    r"POINTS?|TP|TOTALS?|MADE|ATT|ATTEMPTS?|THREES?|TURN|OVERS?|TURNOVERS?|TO|"
    r"RUNNING|SCORE|TIME|OUTS?|TECHNICALS?|TECH|COACH(?:ES)?|SCORERS?|TIMERS?|REFEREES?|"
    r"UMPIRES?|DATE|LOCATION|HALF|PERIODS?|OVERTIME|P[1-5]?|Q[1-4]?"
    r")\b"
)
_NON_LETTERS = re.compile(r"[^A-Z]")


def strip_template_vocabulary(text: str) -> str:
    """Remove printed labels, numerals and symbols, leaving handwriting residue."""
    upper = (text or "").upper()
    # Digits glued to labels ("2PT", "1Q") are split off so the labels still match.
    upper = re.sub(r"(\d)([A-Z])", r"\1 \2", upper)
    upper = _TEMPLATE_VOCABULARY.sub(" ", upper)
    return _NON_LETTERS.sub("", upper)


def skip_reason(row_text: str) -> Optional[str]:
    upper = row_text.upper()
    for name, pattern in SKIP_ROW_PATTERNS:
        if pattern.search(upper):
            return name
    return None
