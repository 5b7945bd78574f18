"""Normalise a raw Document AI ``Document`` into the OCR record the parser reads.

Output shape::

    {"text": str,
     "pages": [{"pageNumber": int, "width": float, "height": float,
                "lines": [{"text": str, "confidence": float | None,
                           "bbox": {"x1": .., "y4": ..} | None}]}]}
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .logging import get_logger

logger = get_logger(__name__)

# Preferred first; a page without lines falls back to coarser layout elements.
LINE_SOURCES = ("lines", "blocks", "paragraphs")


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return float(value)


def _object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _index(value: Any) -> int:
    # Document AI serialises int64 offsets as strings.
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def layout_text(layout: Dict[str, Any], full_text: str) -> str:
    segments = _object(layout.get("textAnchor")).get("textSegments")
    if not isinstance(segments, list):
        return ""
    parts = [
        full_text[_index(seg.get("startIndex")):_index(seg.get("endIndex"))]
        for seg in segments
        if isinstance(seg, dict)
    ]
    return "".join(parts).strip()


def _vertices(value: Any) -> List[Dict[str, Any]]:
    # Non-object vertices are dropped; a polygon left with fewer than four has no box.
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def layout_bbox(bounding_poly: Optional[Dict[str, Any]], width: float, height: float) -> Optional[Dict[str, int]]:
    """Absolute pixel corners, clockwise from top-left, or ``None`` under four vertices.

    Normalised vertices are scaled by the page dimensions and win over
    absolute ones when both are present.
    """
    if not isinstance(bounding_poly, dict):
        return None
    normalized = _vertices(bounding_poly.get("normalizedVertices"))
    if normalized:
        points = [(_number(v.get("x")) * width, _number(v.get("y")) * height) for v in normalized]
    else:
        points = [(_number(v.get("x")), _number(v.get("y"))) for v in _vertices(bounding_poly.get("vertices"))]
    if len(points) < 4:
        return None

    out: Dict[str, int] = {}
    for corner, (x, y) in enumerate(points[:4], start=1):
        out[f"x{corner}"] = _round_half_up(x)
        out[f"y{corner}"] = _round_half_up(y)
    return out


def _page_lines(page: Dict[str, Any], full_text: str, width: float, height: float) -> List[Dict[str, Any]]:
    source: List[Any] = []
    for key in LINE_SOURCES:
        candidate = page.get(key)
        if isinstance(candidate, list) and candidate:
            source = candidate
            break

    lines: List[Dict[str, Any]] = []
    for segment in source:
        if not isinstance(segment, dict):
            continue
        layout = _object(segment.get("layout"))
        confidence = layout.get("confidence")
        lines.append(
            {
                "text": layout_text(layout, full_text),
                "confidence": float(confidence) if isinstance(confidence, (int, float)) else None,
                "bbox": layout_bbox(layout.get("boundingPoly"), width, height),
            }
        )
    return lines


def normalize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise ValueError("Document AI response must be a JSON object")

    full_text = document.get("text")
    if not isinstance(full_text, str):
        full_text = ""
    raw_pages = document.get("pages")
    pages: List[Dict[str, Any]] = []
    for number, page in enumerate(raw_pages if isinstance(raw_pages, list) else [], start=1):
        if not isinstance(page, dict):
            continue
        dimension = _object(page.get("dimension"))
        width = _number(dimension.get("width"))
        height = _number(dimension.get("height"))
        pages.append(
            {
                "pageNumber": number,
                "width": width,
                "height": height,
                "lines": _page_lines(page, full_text, width, height),
            }
        )

    logger.debug("documentai_normalized", pages=len(pages), text_length=len(full_text))
    return {"text": full_text, "pages": pages}
