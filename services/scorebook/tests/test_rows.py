import pytest

from conftest import make_line, page_of
from scorebook.rows import build_tokens, cluster_rows


def _tokens(lines):
    page = page_of(lines)
    return build_tokens(page.lines, page.width, page.height)


def test_build_tokens_normalises_and_drops_boxless_lines():
    lines = [
        make_line(" Smith ", 50, 188, 200, 212, confidence=0.9),
        {"text": "floating", "confidence": 0.9},
        make_line("23", 275, 188, 305, 212),
    ]
    tokens = _tokens(lines)

    assert [t.text for t in tokens] == ["Smith", "23"]
    assert [t.index for t in tokens] == [0, 2]
    assert tokens[0].y_center == pytest.approx(0.2)
    assert tokens[0].center_x == pytest.approx(0.0625)
    assert tokens[0].left == 50
    assert tokens[0].right == 200


def test_cluster_rows_groups_by_vertical_center_and_sorts_left_to_right():
    tokens = _tokens(
        [
            make_line("13", 1705, 190, 1735, 214),
            make_line("Smith", 50, 188, 200, 212),
            make_line("Johnson", 50, 248, 200, 272),
            make_line("23", 275, 186, 305, 210),
        ]
    )
    rows = cluster_rows(tokens, threshold=0.015)

    assert [row.text for row in rows] == ["Smith 23 13", "Johnson"]
    assert rows[0].y_center == pytest.approx((0.2 + 0.202 + 0.198) / 3)


def test_cluster_rows_follows_running_mean_for_skewed_rows():
    # Each token is within the band of the running mean but the last is not
    # within the band of the first token.
    tokens = _tokens(
        [
            make_line("a", 0, 188, 10, 212),
            make_line("b", 20, 200, 30, 224),
            make_line("c", 40, 206, 50, 230),
            make_line("d", 60, 210, 70, 234),
        ]
    )
    rows = cluster_rows(tokens, threshold=0.015)

    assert len(rows) == 1
    assert rows[0].text == "a b c d"


def test_cluster_rows_never_reopens_a_closed_row():
    tokens = _tokens(
        [
            make_line("top", 0, 188, 10, 212),
            make_line("gap", 0, 248, 10, 272),
        ]
    )
    rows = cluster_rows(tokens, threshold=0.015)

    assert [row.text for row in rows] == ["top", "gap"]


def test_cluster_rows_empty_input():
    assert cluster_rows([], threshold=0.015) == []
