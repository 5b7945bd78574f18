from conftest import header_lines, make_line, page_of
from scorebook.anchors import detect_anchors
from scorebook.columns import (
    FLAG_POSITIONAL,
    NumericToken,
    closest_numeric,
    map_columns,
    numeric_tokens,
)
from scorebook.config import EngineConfig
from scorebook.models import AnchorSet, ColumnRange
from scorebook.rows import build_tokens

CONFIG = EngineConfig()


def _anchors():
    page = page_of(header_lines())
    return detect_anchors(page.lines, page.width, page.height)


def _numerics(*pairs):
    return [NumericToken(value=value, center_x=x, order=i) for i, (value, x) in enumerate(pairs)]


def test_numeric_tokens_reads_fractions_and_skips_words():
    page = page_of(
        [
            make_line("4/8", 1225, 188, 1255, 212),
            make_line("12 3", 1345, 188, 1375, 212),
            make_line("X", 1465, 188, 1495, 212),
            make_line("2a", 1585, 188, 1615, 212),
        ]
    )
    numerics = numeric_tokens(build_tokens(page.lines, page.width, page.height))

    assert [n.value for n in numerics] == [4, 8, 12, 3]
    assert [n.order for n in numerics] == [0, 1, 2, 3]
    assert numerics[0].center_x == numerics[1].center_x == 0.62


def test_anchored_mapping_matches_nearest_column_center():
    numerics = _numerics((4, 0.62), (1, 0.68), (3, 0.74), (2, 0.80), (13, 0.86))
    assignment = map_columns(numerics, _anchors(), CONFIG)

    assert assignment.strategy == "anchored"
    assert assignment.flags == ()
    assert assignment.total_points == 13
    shooting = assignment.shooting()
    assert (shooting.fg2_made, shooting.fg3_made, shooting.ft_att, shooting.ft_made) == (4, 1, 3, 2)
    assert shooting.fg2_att is None
    assert shooting.fg3_att is None


def test_anchored_mapping_leaves_far_numerals_unassigned():
    numerics = _numerics((13, 0.86), (5, 0.95))
    assignment = map_columns(numerics, _anchors(), CONFIG)

    assert assignment.values == {"total_points": 13}


def test_columns_are_matched_independently():
    numerics = _numerics((13, 0.85))
    assignment = map_columns(numerics, _anchors(), EngineConfig(column_tolerance=0.1))

    assert assignment.values == {"total_points": 13, "ft_made": 13}


def test_closest_numeric_requires_distance_under_tolerance():
    target = ColumnRange(0.6, 0.64)
    numerics = _numerics((1, 0.70), (2, 0.66), (3, 0.55))

    assert closest_numeric(numerics, target, 0.05).value == 2
    assert closest_numeric(numerics, target, 0.01) is None


def test_positional_fallback_reads_right_to_left_and_flags():
    anchors = AnchorSet(has_player_table=True, header_y=0.1, scoring_left=0.6)
    numerics = _numerics((4, 0.62), (1, 0.68), (3, 0.74), (2, 0.80), (13, 0.86))
    assignment = map_columns(numerics, anchors, CONFIG)

    assert assignment.strategy == "positional"
    assert assignment.flags == (FLAG_POSITIONAL,)
    assert assignment.values == {
        "total_points": 13,
        "ft_made": 2,
        "ft_att": 3,
        "fg3_made": 1,
        "fg2_made": 4,
    }


def test_positional_fallback_with_fewer_numerals():
    anchors = AnchorSet(has_player_table=True, header_y=0.1)
    assignment = map_columns(_numerics((3, 0.7), (7, 0.9)), anchors, CONFIG)

    assert assignment.total_points == 7
    assert assignment.values["ft_made"] == 3
    assert assignment.shooting().fg2_made is None


def test_positional_fallback_without_numerals_is_not_flagged():
    anchors = AnchorSet(has_player_table=True, header_y=0.1)
    assignment = map_columns([], anchors, CONFIG)

    assert assignment.values == {}
    assert assignment.flags == ()


def test_fg2_anchor_alone_keeps_anchored_mapping():
    anchors = AnchorSet(has_player_table=True, fg2_made=ColumnRange(0.605, 0.635))
    assignment = map_columns(_numerics((4, 0.62), (13, 0.86)), anchors, CONFIG)

    assert assignment.strategy == "anchored"
    assert assignment.values == {"fg2_made": 4}
