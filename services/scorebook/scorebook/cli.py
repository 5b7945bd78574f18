"""Command-line interface for the scorebook engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import typer

from .anchors import detect_anchors
from .config import load_config
from .documentai import normalize_document
from .logging import configure_logging, get_logger
from .models import OcrPage
from .parser import parse_scorebook

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Mark 5 scorebook OCR extraction")


@app.callback()
def main_callback() -> None:
    configure_logging(load_config().log_level)


@app.command("parse")
def parse_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="OCR record JSON file"),
    documentai: bool = typer.Option(False, "--documentai", help="Input is a raw Document AI response"),
    compact: bool = typer.Option(False, "--compact", help="Print the result on one line"),
) -> None:
    config = load_config()
    record = _load_record(path, documentai)
    result = parse_scorebook(record, config.engine)
    typer.echo(json.dumps(result.to_dict(), indent=None if compact else 2, ensure_ascii=False))


@app.command("anchors")
def anchors_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="OCR record JSON file"),
    documentai: bool = typer.Option(False, "--documentai", help="Input is a raw Document AI response"),
) -> None:
    """Print the column anchors found on the first page."""
    record = _load_record(path, documentai)
    pages = record.get("pages")
    page = OcrPage.from_dict(pages[0]) if isinstance(pages, list) and pages else None
    if page is None:
        typer.echo("No page found in OCR record", err=True)
        raise typer.Exit(code=1)
    anchors = detect_anchors(page.lines, page.width, page.height)
    typer.echo(json.dumps(anchors.to_dict(), indent=2))


@app.command("service")
def service_command(
    host: str = typer.Option("0.0.0.0", "--host", help="Service bind host"),
    port: int = typer.Option(8000, "--port", help="Service port"),
) -> None:
    import uvicorn

    uvicorn.run(
        "scorebook.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level="info",
    )


def _load_record(path: Path, documentai: bool) -> Dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc.msg}") from exc
    if not isinstance(raw, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object")
    if documentai:
        # Accept a full ProcessResponse as well as a bare Document.
        document = raw.get("document", raw)
        try:
            return normalize_document(document)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    return raw


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
