import json
from pathlib import Path

import pytest

from scorebook.models import OcrLine, OcrPage

FIXTURES = Path(__file__).parent / "fixtures"

PAGE_WIDTH = 2000
PAGE_HEIGHT = 1000


def make_line(text, x0, y0, x1, y1, confidence=0.95):
    return {
        "text": text,
        "confidence": confidence,
        "bbox": {"x1": x0, "y1": y0, "x2": x1, "y2": y0, "x3": x1, "y3": y1, "x4": x0, "y4": y1},
    }


def make_record(lines, text=None, width=PAGE_WIDTH, height=PAGE_HEIGHT):
    if text is None:
        text = "\n".join(line["text"] for line in lines)
    return {"text": text, "pages": [{"pageNumber": 1, "width": width, "height": height, "lines": lines}]}


def header_lines(scoring_banner=True, scoring_labels=("2PT", "3PT", "FTA", "FTM", "TP"), turnovers=True):
    lines = [
        make_line("PLAYER", 40, 100, 240, 130),
        make_line("NO.", 260, 100, 320, 130),
        make_line("PERSONAL FOULS", 420, 100, 800, 130),
        make_line("QUARTERS", 820, 100, 1180, 130),
    ]
    if scoring_banner:
        lines.append(make_line("SCORING SUMMARY", 1200, 60, 1800, 90))
    for label, left in zip(scoring_labels, (1210, 1330, 1450, 1570, 1690)):
        if label:
            lines.append(make_line(label, left, 100, left + 60, 130))
    if turnovers:
        lines.append(make_line("TO", 1830, 100, 1890, 130))
    return lines


def score_lines(y_center, values, centers=(1240, 1360, 1480, 1600, 1720)):
    return [
        make_line(str(value), x - 15, y_center - 12, x + 15, y_center + 12)
        for value, x in zip(values, centers)
        if value is not None
    ]


def page_of(lines, width=PAGE_WIDTH, height=PAGE_HEIGHT):
    return OcrPage(width=width, height=height, lines=tuple(OcrLine.from_dict(line) for line in lines))


@pytest.fixture
def sample_record():
    return json.loads((FIXTURES / "sample_ocr.json").read_text(encoding="utf-8"))


@pytest.fixture
def blank_record():
    return json.loads((FIXTURES / "blank_ocr.json").read_text(encoding="utf-8"))


@pytest.fixture
def sample_path():
    return FIXTURES / "sample_ocr.json"
