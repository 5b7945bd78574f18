import pytest

from conftest import make_line, page_of
from scorebook.config import EngineConfig
from scorebook.fouls import (
    FLAG_NOT_DETERMINED,
    FLAG_UNREADABLE,
    FoulsReading,
    count_fouls,
    is_mark_token,
    read_slot_labels,
    written_total,
)
from scorebook.rows import build_tokens

CONFIG = EngineConfig()


def _tokens(*items):
    """Build fouls-zone tokens from ``(text, confidence)`` pairs laid out left to right."""
    lines = [
        make_line(text, 430 + 50 * i, 188, 470 + 50 * i, 212, confidence=confidence)
        for i, (text, confidence) in enumerate(items)
    ]
    page = page_of(lines)
    return build_tokens(page.lines, page.width, page.height)


def _slots(*texts, confidence=0.95):
    return [(text, confidence) for text in texts]


def test_marks_fused_onto_labels_win():
    decision = count_fouls(_tokens(*_slots("P1X", "P2X", "P3", "P4", "P5")), CONFIG)

    assert decision.count == 2
    assert decision.flags == ("fouls_from_marked_slots: P1,P2",)


def test_merged_labels_in_one_token():
    decision = count_fouls(_tokens(*_slots("P1X P2X P3 P4 P5")), CONFIG)

    assert decision.count == 2


def test_garbled_overlay_is_counted_and_flagged():
    decision = count_fouls(_tokens(*_slots("P1#", "P2", "P3", "P4", "P5")), CONFIG)

    assert decision.count == 1
    assert "fouls_garbled_slot_overlay: P1 counted as marked" in decision.flags


def test_clean_slots_are_not_zero_fouls():
    decision = count_fouls(_tokens(*_slots("P1", "P2", "P3", "P4", "P5")), CONFIG)

    assert decision.count is None
    assert decision.flags == (FLAG_NOT_DETERMINED,)


def test_standalone_marks_are_counted_and_capped():
    decision = count_fouls(_tokens(*_slots("P1", "P2", "X", "x", "/")), CONFIG)
    assert decision.count == 3
    assert decision.flags[0].startswith("fouls_from_mark_tokens: 3")

    capped = count_fouls(_tokens(*_slots("X", "X", "X", "X", "X", "X")), CONFIG)
    assert capped.count == 5
    assert "capped at 5" in capped.flags[0]


def test_written_total_used_when_nothing_is_marked():
    decision = count_fouls(_tokens(*_slots("P1", "P2", "P3", "P4", "P5", "3")), CONFIG)

    assert decision.count == 3
    assert decision.flags == ()


def test_ambiguous_written_totals_are_ignored():
    assert written_total(FoulsReading(written_totals=(1, 2)), CONFIG) is None
    assert written_total(FoulsReading(written_totals=()), CONFIG) is None


def test_confidence_drop_marks_low_slots():
    tokens = _tokens(("P1", 0.95), ("P2", 0.93), ("P3", 0.60), ("P4", 0.94), ("P5", 0.92))
    decision = count_fouls(tokens, CONFIG)

    assert decision.count == 1
    assert decision.flags[0].startswith("fouls_inferred_from_confidence_drop: P3")


def test_confidence_drop_threshold_is_configurable():
    tokens = _tokens(("P1", 0.95), ("P2", 0.95), ("P3", 0.85), ("P4", 0.95), ("P5", 0.95))

    assert count_fouls(tokens, CONFIG).count is None
    assert count_fouls(tokens, EngineConfig(foul_confidence_drop=0.05)).count == 1


def test_strategy_order_can_be_replaced():
    tokens = _tokens(*_slots("P1X", "P2", "P3", "P4", "P5", "4"))

    assert count_fouls(tokens, CONFIG).count == 1
    assert count_fouls(tokens, CONFIG, strategies=(written_total,)).count == 4


def test_unrecognised_zone_and_empty_zone():
    unreadable = count_fouls(_tokens(("scribble", 0.4)), CONFIG)
    assert unreadable.count is None
    assert unreadable.flags == (FLAG_UNREADABLE,)

    empty = count_fouls([], CONFIG)
    assert empty.count is None
    assert empty.flags == ()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("P1", [(1, False)]),
        ("P1X", [(1, True)]),
        ("XP2", [(2, True)]),
        ("P1XP2", [(1, True), (2, False)]),
        ("P 3 P4", [(3, False), (4, False)]),
    ],
)
def test_read_slot_labels(text, expected):
    assert [(r.slot, r.marked) for r in read_slot_labels(text)] == expected


def test_is_mark_token():
    assert is_mark_token("X")
    assert is_mark_token("x /")
    assert not is_mark_token("P1")
    assert not is_mark_token("")
