"""Turn OCR lines into positioned tokens and cluster them into table rows."""

from __future__ import annotations

from typing import Iterable, List

from .logging import get_logger
from .models import OcrLine, Row, Token

logger = get_logger(__name__)


def _norm(v: float, denom: float) -> float:
    return float(v) / float(denom) if denom else 0.0


def build_tokens(lines: Iterable[OcrLine], page_width: float, page_height: float) -> List[Token]:
    """One token per line that carries a bounding box, in source order."""
    tokens: List[Token] = []
    for index, line in enumerate(lines):
        bbox = line.bbox
        if bbox is None:
            continue
        tokens.append(
            Token(
                index=index,
                text=line.text.strip(),
                confidence=line.confidence,
                y_center=_norm(bbox.y_center, page_height),
                left=bbox.left,
                right=bbox.right,
                center_x=_norm((bbox.left + bbox.right) / 2.0, page_width),
                bbox=bbox,
            )
        )
    return tokens


def cluster_rows(tokens: Iterable[Token], threshold: float) -> List[Row]:
    """Greedy single-pass clustering on vertical center.

    Tokens are walked top to bottom. A token joins the open row while it sits
    within ``threshold`` of the running mean of that row's centers, otherwise
    the row is closed for good and never revisited.
    """
    ordered = sorted(tokens, key=lambda t: (t.y_center, t.index))
    if not ordered:
        return []

    rows: List[Row] = []
    members: List[Token] = [ordered[0]]
    center = ordered[0].y_center

    for token in ordered[1:]:
        if abs(token.y_center - center) < threshold:
            members.append(token)
            center = sum(t.y_center for t in members) / len(members)
            continue
        rows.append(_close_row(members, center))
        members = [token]
        center = token.y_center
    rows.append(_close_row(members, center))

    logger.debug("rows_clustered", tokens=len(ordered), rows=len(rows))
    return rows


def _close_row(members: List[Token], center: float) -> Row:
    return Row(
        y_center=center,
        tokens=tuple(sorted(members, key=lambda t: (t.left, t.right, t.index))),
    )
