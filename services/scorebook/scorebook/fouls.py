"""Recover a player's personal foul count from the P1-P5 boxes.

A foul is recorded by crossing out the next printed box. OCR reports that in
several ways: the mark fused onto the label (``P1X``), the mark read as a
token of its own, a number written beside the boxes, or only as a dip in the
label's confidence. Each reading is a strategy. Strategies are tried in
``FOUL_STRATEGIES`` order and the first one returning a ``FoulDecision`` wins.
When none decides the count stays ``None``: zero observed fouls and an
unreadable fouls block are different answers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from statistics import fmean
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .models import Token

MAX_FOULS = 5

MARK_GLYPHS = frozenset("Xx×✕✗✘/\\|")

_SLOT_LABEL = re.compile(r"P\s*([1-5])", re.IGNORECASE)
_WRITTEN_TOTAL = re.compile(r"^[0-5]$")

FLAG_NOT_DETERMINED = "personal_fouls_not_determined: P-slots visible but no marks detected"
FLAG_UNREADABLE = "personal_fouls_not_determined: fouls zone text not recognised"


@dataclass(frozen=True, slots=True)
class SlotReading:
    slot: int
    marked: bool
    garbled: bool = False
    confidence: Optional[float] = None

    @property
    def label(self) -> str:
        return f"P{self.slot}"


@dataclass(frozen=True, slots=True)
class FoulsReading:
    """Everything the strategies may look at for one row's fouls zone."""

    slots: Tuple[SlotReading, ...] = ()
    mark_tokens: int = 0
    written_totals: Tuple[int, ...] = ()
    token_count: int = 0


@dataclass(frozen=True, slots=True)
class FoulDecision:
    count: Optional[int]
    flags: Tuple[str, ...] = ()


FoulStrategy = Callable[[FoulsReading, EngineConfig], Optional[FoulDecision]]


def is_mark_token(text: str) -> bool:
    compact = "".join(ch for ch in text if not ch.isspace())
    return bool(compact) and all(ch in MARK_GLYPHS for ch in compact)


def read_slot_labels(text: str, confidence: Optional[float] = None) -> List[SlotReading]:
    """Read every P-slot label in one token.

    Characters between a label and the next one belong to that label; any
    characters before the first label belong to the first.
    """
    matches = list(_SLOT_LABEL.finditer(text))
    readings: List[SlotReading] = []
    for i, match in enumerate(matches):
        segment_start = 0 if i == 0 else match.start()
        segment_end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        extra = text[segment_start:match.start()] + text[match.end():segment_end]
        extra = "".join(ch for ch in extra if not ch.isspace())
        if not extra:
            readings.append(SlotReading(slot=int(match.group(1)), marked=False, confidence=confidence))
            continue
        garbled = not all(ch in MARK_GLYPHS for ch in extra)
        readings.append(
            SlotReading(slot=int(match.group(1)), marked=True, garbled=garbled, confidence=confidence)
        )
    return readings


def read_fouls_zone(tokens: Sequence[Token]) -> FoulsReading:
    slots: Dict[int, SlotReading] = {}
    mark_tokens = 0
    written: List[int] = []

    for token in tokens:
        text = token.text.strip()
        if not text:
            continue
        labels = read_slot_labels(text, token.confidence)
        if labels:
            for reading in labels:
                seen = slots.get(reading.slot)
                if seen is None or (reading.marked and not seen.marked):
                    slots[reading.slot] = reading
            continue
        if is_mark_token(text):
            mark_tokens += 1
        elif _WRITTEN_TOTAL.match(text):
            written.append(int(text))

    return FoulsReading(
        slots=tuple(slots[slot] for slot in sorted(slots)),
        mark_tokens=mark_tokens,
        written_totals=tuple(written),
        token_count=len(tokens),
    )


def merged_slot_marks(reading: FoulsReading, config: EngineConfig) -> Optional[FoulDecision]:
    marked = [slot for slot in reading.slots if slot.marked]
    if not marked:
        return None
    flags = [f"fouls_from_marked_slots: {','.join(slot.label for slot in marked)}"]
    garbled = [slot.label for slot in marked if slot.garbled]
    if garbled:
        flags.append(f"fouls_garbled_slot_overlay: {','.join(garbled)} counted as marked")
    return FoulDecision(count=len(marked), flags=tuple(flags))


def standalone_marks(reading: FoulsReading, config: EngineConfig) -> Optional[FoulDecision]:
    if reading.mark_tokens == 0:
        return None
    count = min(reading.mark_tokens, MAX_FOULS)
    flag = f"fouls_from_mark_tokens: {reading.mark_tokens} standalone mark token(s)"
    if reading.mark_tokens > MAX_FOULS:
        flag += f", capped at {MAX_FOULS}"
    return FoulDecision(count=count, flags=(flag,))


def written_total(reading: FoulsReading, config: EngineConfig) -> Optional[FoulDecision]:
    if len(reading.written_totals) != 1:
        return None
    return FoulDecision(count=reading.written_totals[0])


def confidence_drop(reading: FoulsReading, config: EngineConfig) -> Optional[FoulDecision]:
    scored = [slot for slot in reading.slots if not slot.marked and slot.confidence is not None]
    if len(scored) < 2:
        return None
    mean = fmean(slot.confidence for slot in scored)
    dropped = [slot for slot in scored if mean - slot.confidence > config.foul_confidence_drop]
    # All or nothing below the mean says nothing about individual boxes.
    if not dropped or len(dropped) == len(scored):
        return None
    labels = ",".join(slot.label for slot in dropped)
    flag = (
        f"fouls_inferred_from_confidence_drop: {labels} more than "
        f"{config.foul_confidence_drop:g} below mean slot confidence {mean:.2f}"
    )
    return FoulDecision(count=len(dropped), flags=(flag,))


FOUL_STRATEGIES: Tuple[FoulStrategy, ...] = (
    merged_slot_marks,
    standalone_marks,
    written_total,
    confidence_drop,
)


def count_fouls(
    tokens: Sequence[Token],
    config: EngineConfig,
    strategies: Sequence[FoulStrategy] = FOUL_STRATEGIES,
) -> FoulDecision:
    reading = read_fouls_zone(tokens)
    for strategy in strategies:
        decision = strategy(reading, config)
        if decision is not None:
            return decision
    if reading.slots:
        return FoulDecision(count=None, flags=(FLAG_NOT_DETERMINED,))
    if reading.token_count:
        return FoulDecision(count=None, flags=(FLAG_UNREADABLE,))
    return FoulDecision(count=None)
