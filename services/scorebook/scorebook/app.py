"""FastAPI application exposing the scorebook parser."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from .config import AppConfig, load_config
from .documentai import normalize_document
from .logging import configure_logging, get_logger
from .models import TEMPLATE_NAME
from .parser import parse_scorebook

logger = get_logger(__name__)


class BBoxPayload(BaseModel):
    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float
    x4: float
    y4: float


class OcrLinePayload(BaseModel):
    text: str = ""
    confidence: Optional[float] = None
    bbox: Optional[BBoxPayload] = None

    model_config = {"extra": "ignore"}


class OcrPagePayload(BaseModel):
    page_number: Optional[int] = Field(None, alias="pageNumber")
    width: Optional[float] = None
    height: Optional[float] = None
    lines: List[OcrLinePayload] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class OcrRecordPayload(BaseModel):
    text: str = ""
    pages: List[OcrPagePayload] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


def get_config(request: Request) -> AppConfig:
    config: AppConfig = request.app.state.config
    return config


def create_app(config: AppConfig | None = None) -> FastAPI:
    cfg = config or load_config()
    configure_logging(cfg.log_level)

    api = FastAPI(title="Scorebook Service", version="1.0.0")
    api.state.config = cfg

    @api.get("/health")
    def health() -> dict:
        return {"status": "healthy", "service": "scorebook", "template": TEMPLATE_NAME}

    @api.post("/parse")
    def parse(payload: OcrRecordPayload, app_config: AppConfig = Depends(get_config)) -> dict:
        """Parse an OCR record already in line/bbox form."""
        record = payload.model_dump(by_alias=True)
        result = parse_scorebook(record, app_config.engine)
        return result.to_dict()

    @api.post("/parse/documentai")
    def parse_documentai(
        body: Dict[str, Any] = Body(...),
        app_config: AppConfig = Depends(get_config),
    ) -> dict:
        """Parse a raw Document AI response (a ``ProcessResponse`` or a bare ``Document``)."""
        document = body.get("document", body)
        try:
            record = normalize_document(document)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        result = parse_scorebook(record, app_config.engine)
        logger.info("documentai_parsed", pages=len(record["pages"]), is_blank=result.is_blank)
        return result.to_dict()

    return api
