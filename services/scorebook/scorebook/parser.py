"""Mark 5 scorebook page parser.

Turns one normalised OCR record into a roster with per-player shooting,
fouls and points, the printed team totals, validation checks and a quality
score. Stages run once, in order:

  anchors -> rows -> row classification/zones -> columns, fouls, totals
          -> validation -> confidence

Nothing here raises on bad OCR. Missing data comes back as ``None`` with a
flag on the player or an issue on the page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .anchors import detect_anchors
from .columns import map_columns, numeric_tokens
from .config import EngineConfig
from .confidence import overall_confidence, player_confidence
from .fouls import count_fouls
from .labels import strip_template_vocabulary
from .logging import get_logger
from .models import (
    AnchorSet,
    OcrPage,
    PlayerRecord,
    Quality,
    Row,
    ScorebookResult,
    TeamTotals,
    ValidationResult,
)
from .rows import build_tokens, cluster_rows
from .totals import extract_team_totals
from .validator import validate
from .zones import (
    ROW_PLAYER,
    ROW_TOTALS,
    PlayerZones,
    classify_row,
    extract_jersey_number,
    extract_player_name,
    is_below_header,
    partition_row,
)

logger = get_logger(__name__)

ISSUE_NO_INPUT = "No OCR record provided."
ISSUE_NO_LINES = "Page has text but no parsed lines."
ISSUE_NO_TABLE = "Could not locate player table headers."
ISSUE_NO_PLAYERS = "No player rows could be extracted from the table area."


@dataclass(slots=True)
class _Extraction:
    players: List[PlayerRecord] = field(default_factory=list)
    totals: Optional[TeamTotals] = None
    issues: List[str] = field(default_factory=list)


def looks_blank(text: str, config: EngineConfig) -> bool:
    """True when little beyond the printed form is left once labels and numerals go."""
    return len(strip_template_vocabulary(text)) < config.blank_min_chars


def blank_result(is_blank: bool = True, issues: Sequence[str] = ()) -> ScorebookResult:
    return ScorebookResult(
        is_blank=is_blank,
        quality=Quality(overall_confidence=1.0 if is_blank else 0.0, issues=tuple(issues)),
        validation=ValidationResult(review_reasons=() if is_blank else tuple(issues)),
    )


def _page_text(document: dict, page: Optional[OcrPage]) -> str:
    text = document.get("text")
    if isinstance(text, str) and text:
        return text
    if page is None:
        return ""
    return "\n".join(line.text for line in page.lines)


def _first_page(document: dict) -> Optional[OcrPage]:
    pages = document.get("pages")
    if not isinstance(pages, list) or not pages:
        return None
    return OcrPage.from_dict(pages[0])


def parse_scorebook(document: Any, config: Optional[EngineConfig] = None) -> ScorebookResult:
    """Parse the first page of a normalised OCR record.

    ``document`` is ``{"text": str, "pages": [{"width", "height", "lines":
    [{"text", "confidence", "bbox"}]}]}``. Anything else, ``None`` included,
    yields the blank result shape with an issue.
    """
    config = config or EngineConfig()
    if not isinstance(document, dict):
        logger.warning("scorebook_input_missing", received=type(document).__name__)
        return blank_result(issues=(ISSUE_NO_INPUT,))

    page = _first_page(document)
    full_text = _page_text(document, page)

    if page is None or not page.lines:
        is_blank = looks_blank(full_text, config)
        return blank_result(is_blank=is_blank, issues=() if is_blank else (ISSUE_NO_LINES,))

    anchors = detect_anchors(page.lines, page.width, page.height)
    if not anchors.has_player_table:
        is_blank = looks_blank(full_text, config)
        logger.info("player_table_not_found", is_blank=is_blank)
        return blank_result(is_blank=is_blank, issues=() if is_blank else (ISSUE_NO_TABLE,))

    tokens = build_tokens(page.lines, page.width, page.height)
    rows = cluster_rows(tokens, config.row_threshold)
    extraction = _extract_rows(rows, anchors, config)
    totals = extraction.totals or TeamTotals()

    if not extraction.players and totals.total_points is None:
        is_blank = looks_blank(full_text, config)
        return blank_result(is_blank=is_blank, issues=() if is_blank else tuple(extraction.issues))

    validation = validate(extraction.players, totals)
    overall = overall_confidence([player.confidence for player in extraction.players], len(extraction.issues))

    logger.info(
        "scorebook_parsed",
        players=len(extraction.players),
        team_points=totals.total_points,
        needs_review=validation.needs_review,
        overall_confidence=overall,
    )
    return ScorebookResult(
        is_blank=False,
        quality=Quality(overall_confidence=overall, issues=tuple(extraction.issues)),
        players=tuple(extraction.players),
        team_totals=totals,
        validation=validation,
    )


def _extract_rows(rows: Sequence[Row], anchors: AnchorSet, config: EngineConfig) -> _Extraction:
    out = _Extraction()
    for row in rows:
        if not is_below_header(row, anchors, config):
            continue
        kind = classify_row(row)
        if kind.kind == ROW_TOTALS:
            if out.totals is None:
                out.totals = extract_team_totals(row, anchors, config)
            else:
                logger.warning("totals_row_ignored", row_text=row.text, y_center=row.y_center)
            continue
        if kind.kind != ROW_PLAYER:
            continue

        zones = partition_row(row, anchors, config)
        if zones.is_empty:
            continue
        out.players.append(_extract_player(row, zones, anchors, config, row_index=len(out.players)))

    if not out.players:
        out.issues.append(ISSUE_NO_PLAYERS)
    return out


def _extract_player(
    row: Row,
    zones: PlayerZones,
    anchors: AnchorSet,
    config: EngineConfig,
    row_index: int,
) -> PlayerRecord:
    number, jersey_token = extract_jersey_number(zones.name, anchors)
    name = extract_player_name(zones.name, jersey_token)
    columns = map_columns(numeric_tokens(zones.scoring), anchors, config)
    fouls = count_fouls(zones.fouls, config)

    flags: Tuple[str, ...] = columns.flags + fouls.flags
    total_points = columns.total_points
    return PlayerRecord(
        row_index=row_index,
        player_name=name,
        player_number=number,
        personal_fouls_total=fouls.count,
        shooting=columns.shooting(),
        total_points=total_points,
        confidence=player_confidence(
            (token.confidence for token in row.tokens),
            total_points,
            name,
            flags,
        ),
        flags=flags,
    )
