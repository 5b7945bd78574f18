"""Core package for the Mark 5 scorebook OCR extraction engine."""

__all__ = [
    "config",
    "models",
    "labels",
    "anchors",
    "rows",
    "zones",
    "columns",
    "fouls",
    "totals",
    "validator",
    "confidence",
    "parser",
    "documentai",
    "cli",
    "app",
]
