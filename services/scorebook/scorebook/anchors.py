"""Locate the printed table header and derive one column range per field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .labels import HEADER_LABELS
from .logging import get_logger
from .models import SCORING_COLUMNS, AnchorSet, ColumnRange, OcrLine

logger = get_logger(__name__)

_TABLE_ANCHORS = ("name", "number")


@dataclass(frozen=True, slots=True)
class _Hit:
    rank: int
    y_center: float
    extent: ColumnRange


def detect_anchors(lines: Iterable[OcrLine], page_width: float, page_height: float) -> AnchorSet:
    """Scan every line once and return the page's single, read-only anchor set."""
    hits: Dict[str, _Hit] = {}
    header_y: Optional[float] = None
    has_player_table = False

    for line in lines:
        if line.bbox is None:
            continue
        text = line.text.upper().strip()
        if not text:
            continue
        bbox = line.bbox
        y_center = bbox.y_center / page_height
        extent = ColumnRange(left=bbox.left / page_width, right=bbox.right / page_width)

        for label in HEADER_LABELS:
            if not label.matches(text):
                continue
            current = hits.get(label.anchor)
            if current is None or label.rank < current.rank:
                hits[label.anchor] = _Hit(rank=label.rank, y_center=y_center, extent=extent)
            if label.anchor in _TABLE_ANCHORS:
                has_player_table = True
                if header_y is None:
                    header_y = y_center

    name_hit = hits.get("name")
    if name_hit is not None:
        header_y = name_hit.y_center

    columns: Dict[str, Optional[ColumnRange]] = {
        anchor: hit.extent for anchor, hit in hits.items() if anchor != "scoring_summary"
    }
    summary = hits.get("scoring_summary")
    scoring_left = summary.extent.left if summary is not None else None

    interpolated: Tuple[str, ...] = ()
    if scoring_left is not None:
        interpolated = _interpolate_scoring_columns(columns, scoring_left)

    if scoring_left is None:
        found = [columns[name].left for name in SCORING_COLUMNS if columns.get(name) is not None]
        if found:
            scoring_left = min(found)

    anchors = AnchorSet(
        has_player_table=has_player_table,
        header_y=header_y,
        name=columns.get("name"),
        number=columns.get("number"),
        position=columns.get("position"),
        quarters=columns.get("quarters"),
        fouls=columns.get("fouls"),
        scoring_left=scoring_left,
        fg2_made=columns.get("fg2_made"),
        fg3_made=columns.get("fg3_made"),
        ft_att=columns.get("ft_att"),
        ft_made=columns.get("ft_made"),
        total_points=columns.get("total_points"),
        turnovers=columns.get("turnovers"),
        interpolated=interpolated,
    )
    logger.debug(
        "anchors_detected",
        has_player_table=has_player_table,
        found=sorted(hits),
        interpolated=list(interpolated),
    )
    return anchors


def _interpolate_scoring_columns(columns: Dict[str, Optional[ColumnRange]], scoring_left: float) -> Tuple[str, ...]:
    """Give each missing scoring sub-column an equal fifth of the summary block.

    The block runs from the summary banner to the turnovers header, or to the
    page edge when that header was not read.
    """
    missing: List[str] = [name for name in SCORING_COLUMNS if columns.get(name) is None]
    if not missing:
        return ()

    turnovers = columns.get("turnovers")
    right_edge = turnovers.left if turnovers is not None and turnovers.left > scoring_left else 1.0
    width = (right_edge - scoring_left) / len(SCORING_COLUMNS)

    for slot, name in enumerate(SCORING_COLUMNS):
        if name in missing:
            columns[name] = ColumnRange(
                left=scoring_left + slot * width,
                right=scoring_left + (slot + 1) * width,
            )

    logger.info(
        "anchor_columns_interpolated",
        columns=missing,
        scoring_left=scoring_left,
        right_edge=right_edge,
    )
    return tuple(missing)
